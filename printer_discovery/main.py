"""
Main entry point for the Printer Discovery Module.

This module provides the command-line interface for the printer scanner,
including argument parsing, configuration precedence and exit codes.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.config_loader import SCAN_CONFIG_FILE, ConfigLoader, ScanConfig
from .core.scan_orchestrator import ScanOrchestrator
from .utils.error_handler import (
    ConfigurationError,
    ErrorContext,
    ErrorHandler,
    ErrorSeverity,
    ErrorType,
)
from .utils.json_reporter import JSONReporter
from .utils.logger import LogLevel, get_logger, set_log_level


class PrinterDiscoveryApp:
    """
    Main application class for Printer Discovery Module.

    Handles CLI configuration and the application lifecycle.
    """

    def __init__(self):
        """Initialize the application."""
        self.logger = get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)

    def _resolve_config_dir(self, config_dir: Optional[str]) -> Optional[str]:
        """
        Validate the configuration directory.

        Returns:
            Resolved directory path, or None to use the package default

        Raises:
            ConfigurationError: If the directory does not exist
        """
        if not config_dir:
            return None

        config_path = Path(config_dir)
        if not config_path.is_dir():
            raise ConfigurationError(f"Configuration directory does not exist: {config_dir}")
        return str(config_path.resolve())

    def build_scan_config(self, args: argparse.Namespace) -> ScanConfig:
        """
        Merge configuration sources.

        Command line flags override scan_config.yml, which overrides the
        built-in defaults.
        """
        loader = ConfigLoader(self._resolve_config_dir(args.config_dir), logger=self.logger)
        scan_config = loader.load_scan_config()

        if args.cidr is not None:
            scan_config.cidr = args.cidr
        if args.community is not None:
            scan_config.community = args.community
        if args.workers is not None:
            scan_config.workers = args.workers

        return scan_config

    def init_config(self, args: argparse.Namespace) -> int:
        """
        Write a default scan_config.yml to --config-dir, or the current directory.

        An existing file is left untouched. No scan is started.

        Returns:
            int: 0 if the directory holds a scan config afterwards, 1 otherwise
        """
        config_dir = self._resolve_config_dir(args.config_dir) or str(Path.cwd())
        loader = ConfigLoader(config_dir, logger=self.logger)
        loader.create_default_config()

        config_path = Path(config_dir) / SCAN_CONFIG_FILE
        if not config_path.is_file():
            return 1
        self.logger.info(f"Scan with it using --config-dir {config_dir}")
        return 0

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the printer scan.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Exit code (0 for a completed scan, non-zero for failure)
        """
        try:
            if args.init_config:
                return self.init_config(args)

            scan_config = self.build_scan_config(args)
            json_reporter = JSONReporter(args.output_dir, logger=self.logger) if args.output_dir else None

            orchestrator = ScanOrchestrator(
                scan_config,
                logger=self.logger,
                json_reporter=json_reporter,
                error_handler=self.error_handler,
            )
            orchestrator.execute_scan()
            return 0

        except ConfigurationError as e:
            self.error_handler.handle_error(
                e,
                ErrorContext(
                    error_type=ErrorType.CONFIGURATION_ERROR,
                    severity=ErrorSeverity.HIGH,
                    operation="configure",
                    component="PrinterDiscoveryApp",
                ),
            )
            return 1
        except OSError as e:
            self.logger.error(f"Cannot prepare output directory {args.output_dir}", exception=e)
            return 1
        except KeyboardInterrupt:
            self.logger.warning("Scan interrupted by user")
            return 130  # Standard exit code for SIGINT


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="printer_discovery",
        description="Printer Discovery Module - find SNMP printers on a network and report their supplies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m printer_discovery                                  # Scan 192.168.1.0/24
  python -m printer_discovery --cidr 10.0.0.0/23 --workers 50  # Larger network, more workers
  python -m printer_discovery --community private              # Custom community string
  python -m printer_discovery --output-dir ./reports           # Also write a JSON report
  python -m printer_discovery --init-config --config-dir .     # Write a starter scan_config.yml
        """
    )

    parser.add_argument(
        "--cidr",
        type=str,
        help="Network CIDR to scan (default: 192.168.1.0/24)"
    )

    parser.add_argument(
        "--community",
        type=str,
        help="SNMP v2c community string (default: public)"
    )

    parser.add_argument(
        "--workers",
        type=int,
        help="Number of concurrent workers for scanning (default: 10)"
    )

    parser.add_argument(
        "--config-dir",
        type=str,
        help="Directory containing scan_config.yml. Command line flags take precedence over it."
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default scan_config.yml to --config-dir (or the current directory) and exit"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory for a JSON report of the scan. No report is written when omitted."
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Printer Discovery Module {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Printer Discovery Module.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    set_log_level(LogLevel.DEBUG if args.verbose else LogLevel.INFO)

    app = PrinterDiscoveryApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
