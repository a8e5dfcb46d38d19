"""
JSON Report Generator for Printer Discovery Module.

This module writes the result of a printer scan to a timestamped JSON file,
with collision handling for scans started within the same second.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.data_models import DeviceReport, ScanSummary
from .logger import Logger, get_logger


class JSONReporter:
    """
    Handles generation of JSON reports from printer scan results.

    This class is responsible for:
    - Converting scan summaries and device reports to JSON format
    - Managing output file naming with timestamp-based collision handling
    """

    def __init__(self, output_directory: str, logger: Optional[Logger] = None):
        """
        Initialize the JSON reporter.

        Args:
            output_directory: Directory where JSON reports will be saved
            logger: Logger instance for progress messages
        """
        self.output_directory = Path(output_directory)
        self.logger = logger or get_logger(__name__)

        self.output_directory.mkdir(parents=True, exist_ok=True)

    def generate_report(self, summary: ScanSummary) -> str:
        """
        Generate a JSON report from a scan summary.

        Args:
            summary: Result of a complete scan

        Returns:
            str: Path to the generated JSON file

        Raises:
            IOError: If file cannot be written
        """
        json_data = self.convert_to_json_format(summary)

        filepath = self.output_directory / self._generate_filename(summary.timestamp)
        filepath = self._handle_file_collision(filepath)

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(json_data, f, indent=2, ensure_ascii=False, default=str)

            self.logger.info(f"JSON report successfully generated: {filepath}")
            return str(filepath)

        except IOError as e:
            self.logger.error(f"Failed to write JSON report to {filepath}: {e}")
            raise

    def convert_to_json_format(self, summary: ScanSummary) -> Dict[str, Any]:
        """
        Convert a ScanSummary to a JSON-serializable dictionary.

        Printers keep discovery order; the community string is never written.
        """
        scan_metadata = {
            "timestamp": summary.timestamp.isoformat(),
            "scan_duration": summary.scan_duration,
            "network_scanned": summary.network,
            "addresses_scanned": summary.addresses_scanned,
            "printers_found": len(summary.printers),
            "scan_status": summary.scan_status.value,
        }

        names = {printer.address: printer.name for printer in summary.printers}
        printers = [
            self._convert_device_report(report, names.get(report.address))
            for report in summary.reports
        ]

        return {
            "scan_metadata": scan_metadata,
            "printers": printers,
            "failed_devices": dict(summary.failed_devices),
        }

    def _convert_device_report(self, report: DeviceReport, discovered_name: Optional[str]) -> Dict[str, Any]:
        supplies = [
            {
                "index": index,
                "description": supply.description,
                "level": supply.level,
                "max_capacity": supply.max_capacity,
                "percent": supply.percent_of_capacity,
                "level_unknown": supply.level_unknown,
            }
            for index, supply in sorted(report.supplies.items())
        ]
        trays = [
            {
                "index": index,
                "name": tray.name,
                "current_level": tray.current_level,
                "max_capacity": tray.max_capacity,
                "percent": tray.percent_of_capacity,
                "level_unknown": tray.level_unknown,
            }
            for index, tray in sorted(report.trays.items())
        ]
        return {
            "ip_address": report.address,
            "discovered_name": discovered_name,
            "system_description": report.system_description,
            "printer_name": report.printer_name,
            "status_code": report.status_code,
            "status": report.status_name,
            "page_count": report.page_count,
            "supplies": supplies,
            "supplies_error": report.supplies_error,
            "trays": trays,
            "trays_error": report.trays_error,
        }

    def _generate_filename(self, timestamp: datetime) -> str:
        # Format: printer_scan_YYYYMMDD_HHMMSS.json
        timestamp_str = timestamp.strftime("%Y%m%d_%H%M%S")
        return f"printer_scan_{timestamp_str}.json"

    def _handle_file_collision(self, filepath: Path) -> Path:
        """
        Handle filename collisions by adding incremental suffix.

        Args:
            filepath: Original file path

        Returns:
            Path: Unique file path
        """
        if not filepath.exists():
            return filepath

        base_name = filepath.stem
        extension = filepath.suffix
        counter = 1

        while True:
            new_name = f"{base_name}_{counter:03d}{extension}"
            new_filepath = filepath.parent / new_name

            if not new_filepath.exists():
                self.logger.debug(f"File collision detected, using filename: {new_name}")
                return new_filepath

            counter += 1

            if counter > 999:
                raise IOError(f"Too many file collisions for {filepath}")
