"""
Configuration loader for Printer Discovery Module.
Handles loading and validation of the YAML scan configuration with fallback to defaults.
"""

import yaml
from typing import Any, Optional
from dataclasses import dataclass
from pathlib import Path

from ..utils.logger import Logger, get_logger

DEFAULT_CIDR = "192.168.1.0/24"
DEFAULT_COMMUNITY = "public"
DEFAULT_WORKERS = 10

SCAN_CONFIG_FILE = "scan_config.yml"


@dataclass
class ScanConfig:
    """Configuration for a printer scan."""
    cidr: str = DEFAULT_CIDR
    community: str = DEFAULT_COMMUNITY
    workers: int = DEFAULT_WORKERS


@dataclass(frozen=True)
class SNMPConfig:
    """SNMP v2c transport settings. Fixed: UDP/161, 3 second timeout, 2 retries."""
    port: int = 161
    timeout: int = 3
    retries: int = 2


class ConfigLoader:
    """
    Loads and validates the YAML scan configuration.
    Provides fallback to default configuration when the file is missing or broken.
    """

    def __init__(self, config_dir: Optional[str] = None, logger: Optional[Logger] = None):
        """
        Initialize ConfigLoader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to the config directory relative to this file.
            logger: Logger used for validation warnings
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent
        else:
            self.config_dir = Path(config_dir)

        self.logger = logger or get_logger(__name__)

    def load_scan_config(self, config_file: str = SCAN_CONFIG_FILE) -> ScanConfig:
        """
        Load scan configuration from YAML file.

        Args:
            config_file: Name of the scan configuration file

        Returns:
            ScanConfig object with loaded or default configuration
        """
        config_path = self.config_dir / config_file

        if not config_path.exists():
            self.logger.debug(f"Scan config file not found at {config_path}. Using default configuration.")
            return ScanConfig()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)

            if not isinstance(config_data, dict) or not isinstance(config_data.get('scan'), dict):
                self.logger.warning(f"Invalid scan config structure in {config_path}. Using default configuration.")
                return ScanConfig()

            scan_data = config_data['scan']

            return ScanConfig(
                cidr=str(scan_data.get('cidr', DEFAULT_CIDR)),
                community=str(scan_data.get('community', DEFAULT_COMMUNITY)),
                workers=self._validate_positive_int(scan_data.get('workers', DEFAULT_WORKERS), 'workers', DEFAULT_WORKERS)
            )

        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing scan config file {config_path}: {e}")
            self.logger.warning("Using default scan configuration.")
            return ScanConfig()
        except OSError as e:
            self.logger.error(f"Cannot read scan config file {config_path}: {e}")
            self.logger.warning("Using default scan configuration.")
            return ScanConfig()

    def _validate_positive_int(self, value: Any, field_name: str, default: int) -> int:
        """
        Validate that a value is a positive integer.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            default: Default value to use if validation fails

        Returns:
            Validated integer value or default
        """
        if isinstance(value, bool):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be an integer. Using default: {default}")
            return default
        if isinstance(value, float) and not value.is_integer():
            self.logger.warning(f"Invalid {field_name}: {value}. Must be a whole number. Using default: {default}")
            return default
        try:
            int_value = int(value)
            if int_value <= 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must be positive. Using default: {default}")
                return default
            return int_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be an integer. Using default: {default}")
            return default

    def create_default_config(self, config_file: str = SCAN_CONFIG_FILE) -> Optional[Path]:
        """
        Create the default scan configuration file if it doesn't exist.

        Returns:
            Path of the created file, or None if it already existed or could not be written
        """
        config_path = self.config_dir / config_file
        if config_path.exists():
            self.logger.warning(f"Scan config already exists at {config_path}, leaving it unchanged")
            return None

        default_config = {
            'scan': {
                'cidr': DEFAULT_CIDR,
                'community': DEFAULT_COMMUNITY,
                'workers': DEFAULT_WORKERS
            }
        }

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.dump(default_config, f, default_flow_style=False, indent=2)
            self.logger.info(f"Created default scan config at {config_path}")
            return config_path
        except OSError as e:
            self.logger.error(f"Failed to create default scan config: {e}")
            return None
