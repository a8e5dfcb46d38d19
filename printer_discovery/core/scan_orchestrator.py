"""
Scan Orchestrator for Printer Discovery Module.

This module provides the ScanOrchestrator class that runs a complete printer
scan: concurrent discovery over a CIDR block, followed by sequential detail
collection and rendering for every printer found.
"""

import time
from datetime import datetime
from typing import Callable, Optional

from .address_enumerator import enumerate_addresses, parse_network
from .data_models import DiscoveredPrinter, ScanStatus, ScanSummary
from .detail_collector import DetailCollector
from .discovery_pool import DiscoveryWorkerPool, Probe
from ..config.config_loader import ScanConfig, SNMPConfig
from ..scanners.printer_probe import PrinterProbe
from ..scanners.snmp_client import PySNMPClient, SNMPClient
from ..utils.error_handler import (
    ErrorContext,
    ErrorHandler,
    ErrorSeverity,
    PrinterDiscoveryError,
    classify_error,
)
from ..utils.json_reporter import JSONReporter
from ..utils.logger import Logger, get_logger
from ..utils import report_renderer


class ScanOrchestrator:
    """
    Orchestrates a complete printer scan.

    Discovery runs concurrently on a bounded worker pool; once every worker
    has exited, device reports are collected one at a time in discovery
    order so that report output is never interleaved.
    """

    def __init__(
        self,
        scan_config: ScanConfig,
        snmp_config: Optional[SNMPConfig] = None,
        probe: Optional[Probe] = None,
        collector: Optional[DetailCollector] = None,
        logger: Optional[Logger] = None,
        json_reporter: Optional[JSONReporter] = None,
        error_handler: Optional[ErrorHandler] = None,
        client_factory: Optional[Callable[[str], SNMPClient]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            scan_config: Network, community and worker count
            snmp_config: Fixed SNMP transport settings
            probe: Printer probe, defaults to a PrinterProbe over pysnmp
            collector: Detail collector, defaults to one over pysnmp
            logger: Logger instance for output and diagnostics
            json_reporter: Writes the scan summary to JSON when given
            error_handler: Receives per-device failures
            client_factory: Builds SNMP clients for the default probe and collector
        """
        self.scan_config = scan_config
        self.snmp_config = snmp_config or SNMPConfig()
        self.logger = logger or get_logger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self.json_reporter = json_reporter

        self.client_factory = client_factory or self._create_client
        self.probe = probe or PrinterProbe(self.client_factory, self.logger)
        self.collector = collector or DetailCollector(self.client_factory, logger=self.logger)

    def _create_client(self, address: str) -> SNMPClient:
        return PySNMPClient(
            address,
            community=self.scan_config.community,
            snmp_config=self.snmp_config,
            logger=self.logger,
        )

    def execute_scan(self) -> ScanSummary:
        """
        Run discovery, then collect and print one report per printer.

        Returns:
            ScanSummary of the completed scan

        Raises:
            ConfigurationError: If the CIDR or worker count is invalid. Raised
                before any probe is sent.
        """
        network = parse_network(self.scan_config.cidr)
        addresses = enumerate_addresses(self.scan_config.cidr)
        pool = DiscoveryWorkerPool(
            self.probe,
            workers=self.scan_config.workers,
            on_discovery=self._announce_discovery,
            logger=self.logger,
        )

        summary = ScanSummary(network=str(network), timestamp=datetime.now())
        start_time = time.monotonic()

        self.logger.emit(
            report_renderer.format_scan_banner(self.scan_config.cidr, self.scan_config.workers)
        )
        self.logger.debug(
            f"Probing {network.num_addresses} addresses",
            port=self.snmp_config.port,
            timeout=self.snmp_config.timeout,
            retries=self.snmp_config.retries,
        )

        summary.printers = pool.run(addresses)
        summary.addresses_scanned = pool.addresses_processed

        self.logger.emit(report_renderer.format_found_summary(len(summary.printers)))

        if summary.printers:
            for printer in summary.printers:
                self._report_device(printer, summary)
            summary.scan_status = ScanStatus.COMPLETED
        else:
            summary.scan_status = ScanStatus.NO_PRINTERS

        summary.scan_duration = time.monotonic() - start_time
        self.logger.debug(
            f"Scan of {summary.network} finished in {summary.scan_duration:.2f}s",
            printers=len(summary.printers),
            failed=len(summary.failed_devices),
        )

        error_counts = self.error_handler.get_error_summary()
        if error_counts:
            self.logger.warning(
                f"{len(summary.failed_devices)} of {len(summary.printers)} device reports failed",
                **error_counts,
            )

        if self.json_reporter is not None:
            self._write_json_report(summary)

        return summary

    def _announce_discovery(self, printer: DiscoveredPrinter) -> None:
        self.logger.emit(report_renderer.format_discovery(printer))

    def _report_device(self, printer: DiscoveredPrinter, summary: ScanSummary) -> None:
        """Collect and print one device report; failures stay with the device."""
        try:
            report = self.collector.collect(printer.address)
        except PrinterDiscoveryError as e:
            context = e.error_context or self._failure_context(e, printer, ErrorSeverity.LOW)
            self._record_failure(printer, e, context, summary)
            return
        except Exception as e:
            self._record_failure(
                printer, e, self._failure_context(e, printer, ErrorSeverity.MEDIUM), summary
            )
            return

        summary.reports.append(report)
        for line in report_renderer.render_device_report(report):
            self.logger.emit(line)

    def _failure_context(
        self, error: Exception, printer: DiscoveredPrinter, severity: ErrorSeverity
    ) -> ErrorContext:
        return ErrorContext(
            error_type=classify_error(error),
            severity=severity,
            operation="collect",
            component="DetailCollector",
            target=printer.address,
        )

    def _record_failure(
        self,
        printer: DiscoveredPrinter,
        error: Exception,
        context: ErrorContext,
        summary: ScanSummary,
    ) -> None:
        self.logger.emit(
            report_renderer.format_device_failure(printer.address, error, context.operation)
        )
        summary.failed_devices[printer.address] = str(error)
        self.error_handler.handle_error(error, context)

    def _write_json_report(self, summary: ScanSummary) -> None:
        try:
            report_path = self.json_reporter.generate_report(summary)
            self.logger.success(f"Report saved to: {report_path}")
        except IOError as e:
            self.logger.error("Could not save JSON report", exception=e)
