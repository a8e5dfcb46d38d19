"""Tests for the scan orchestrator."""

import json

import pytest

from conftest import FakeAgent, printer_agent
from printer_discovery.config.config_loader import ScanConfig
from printer_discovery.core import printer_oids
from printer_discovery.core.data_models import ScanStatus, SnmpValue
from printer_discovery.core.detail_collector import DetailCollector
from printer_discovery.core.scan_orchestrator import ScanOrchestrator
from printer_discovery.utils.error_handler import (
    ConfigurationError,
    ConnectError,
    ErrorHandler,
    SNMPResponseError,
)
from printer_discovery.utils.json_reporter import JSONReporter
from printer_discovery.utils.logger import Logger


class RecordingLogger(Logger):
    """Logger that keeps emitted scan lines instead of printing them."""

    def __init__(self):
        super().__init__("test")
        self.lines = []
        self.records = []

    def emit(self, line=""):
        self.lines.append(line)

    def _write(self, text, error=False):
        self.records.append(text)


@pytest.fixture
def recording_logger():
    return RecordingLogger()


def make_orchestrator(network, logger, cidr="10.0.0.0/29", workers=4, **kwargs):
    return ScanOrchestrator(
        ScanConfig(cidr=cidr, community="public", workers=workers),
        logger=logger,
        client_factory=network.client_factory,
        **kwargs,
    )


class TestDiscoveryPhase:
    """Discovery output and summary."""

    def test_banner_is_first_line(self, printer_network, recording_logger):
        make_orchestrator(printer_network, recording_logger, workers=3).execute_scan()
        assert recording_logger.lines[0] == (
            "🔎 Scanning network 10.0.0.0/29 with 3 workers for SNMP-enabled printers..."
        )

    def test_every_address_probed(self, printer_network, recording_logger):
        summary = make_orchestrator(printer_network, recording_logger).execute_scan()
        probed = {client.host for client in printer_network.clients}
        assert probed == {f"10.0.0.{i}" for i in range(8)}
        assert summary.addresses_scanned == 8

    def test_finds_only_printers(self, printer_network, recording_logger):
        summary = make_orchestrator(printer_network, recording_logger).execute_scan()

        assert {printer.address for printer in summary.printers} == {"10.0.0.2", "10.0.0.5"}
        assert summary.scan_status is ScanStatus.COMPLETED

    def test_discovery_lines(self, printer_network, recording_logger):
        make_orchestrator(printer_network, recording_logger).execute_scan()

        lines = recording_logger.lines
        assert "🎯 Found printer: 10.0.0.2 → Front Desk" in lines
        assert "🎯 Found printer: 10.0.0.5 → Brother HL-L2350DW" in lines
        assert "✅ Found 2 SNMP printers:" in lines

    def test_discovery_lines_precede_summary_and_reports(self, printer_network, recording_logger):
        make_orchestrator(printer_network, recording_logger).execute_scan()

        lines = recording_logger.lines
        summary_at = lines.index("✅ Found 2 SNMP printers:")
        found_at = [i for i, line in enumerate(lines) if line.startswith("🎯 Found printer:")]
        report_at = [i for i, line in enumerate(lines) if line.startswith("🖨️ Printer Report for")]

        assert max(found_at) < summary_at < min(report_at)

    def test_no_printers(self, fake_network, recording_logger):
        summary = make_orchestrator(fake_network, recording_logger).execute_scan()

        assert summary.printers == []
        assert summary.scan_status is ScanStatus.NO_PRINTERS
        assert recording_logger.lines[-1] == "❌ No SNMP printers found!"


class TestReportPhase:
    """Sequential per-device reports."""

    def test_one_report_per_printer_in_discovery_order(self, printer_network, recording_logger):
        summary = make_orchestrator(printer_network, recording_logger).execute_scan()

        report_lines = [
            line for line in recording_logger.lines if line.startswith("🖨️ Printer Report for")
        ]
        assert [report.address for report in summary.reports] == [
            printer.address for printer in summary.printers
        ]
        assert report_lines == [
            f"🖨️ Printer Report for {printer.address}:" for printer in summary.printers
        ]

    def test_report_blocks_are_contiguous(self, printer_network, recording_logger):
        make_orchestrator(printer_network, recording_logger).execute_scan()

        lines = recording_logger.lines
        start = lines.index("🖨️ Printer Report for 10.0.0.2:")
        block = lines[start:start + 11]
        assert block == [
            "🖨️ Printer Report for 10.0.0.2:",
            "  System Description: HP ETHERNET MULTI-ENVIRONMENT",
            "  Printer Name: Front Desk",
            "  Printer Status: idle",
            "  Total Pages Printed: 12345",
            "  Supplies:",
            "    - Black Cartridge HP CF259A: 80 (80% of 100)",
            "    - Imaging Drum: -3 (unknown)",
            "  Paper Trays:",
            "    - Tray 1: 50 (50% of 100)",
            "    - Tray 2: 125 (50% of 250)",
        ]

    def test_failing_device_does_not_stop_others(self, printer_network, recording_logger):
        # 10.0.0.5 answers the probe but rejects the detail GET
        agent = printer_network.agents["10.0.0.5"]
        calls = {"count": 0}
        original_factory = printer_network.client_factory

        def client_factory(address):
            client = original_factory(address)
            if address == "10.0.0.5":
                calls["count"] += 1
                if calls["count"] > 1:
                    client.agent = FakeAgent(
                        scalars=agent.scalars, get_error=SNMPResponseError("genErr")
                    )
            return client

        orchestrator = ScanOrchestrator(
            ScanConfig(cidr="10.0.0.0/29", workers=1),
            logger=recording_logger,
            client_factory=client_factory,
        )
        summary = orchestrator.execute_scan()

        assert [report.address for report in summary.reports] == ["10.0.0.2"]
        assert "10.0.0.5" in summary.failed_devices
        assert "❌ SNMP Get error for 10.0.0.5: genErr" in recording_logger.lines
        assert summary.scan_status is ScanStatus.COMPLETED

    def test_unreachable_during_detail_phase(self, printer_network, recording_logger):
        seen = set()
        original_factory = printer_network.client_factory

        def client_factory(address):
            client = original_factory(address)
            if address == "10.0.0.2":
                if address in seen:
                    client.agent = FakeAgent(connect_error=ConnectError("No SNMP response"))
                seen.add(address)
            return client

        error_handler = ErrorHandler(recording_logger)
        summary = ScanOrchestrator(
            ScanConfig(cidr="10.0.0.0/29", workers=2),
            logger=recording_logger,
            client_factory=client_factory,
            error_handler=error_handler,
        ).execute_scan()

        assert "❌ Failed to connect to 10.0.0.2: No SNMP response" in recording_logger.lines
        assert [report.address for report in summary.reports] == ["10.0.0.5"]
        assert error_handler.get_error_summary() == {"connect_error": 1}

    def test_get_timeout_is_reported_as_get_error(self, printer_network, recording_logger):
        seen = set()
        original_factory = printer_network.client_factory

        def client_factory(address):
            client = original_factory(address)
            if address == "10.0.0.2":
                if address in seen:
                    client.agent = FakeAgent(
                        scalars=client.agent.scalars, get_error=ConnectError("timeout")
                    )
                seen.add(address)
            return client

        summary = ScanOrchestrator(
            ScanConfig(cidr="10.0.0.0/29", workers=2),
            logger=recording_logger,
            client_factory=client_factory,
        ).execute_scan()

        assert "❌ SNMP Get error for 10.0.0.2: timeout" in recording_logger.lines
        assert not any(line.startswith("❌ Failed to connect") for line in recording_logger.lines)
        assert summary.failed_devices == {"10.0.0.2": "timeout"}

    def test_unexpected_collector_error_stays_with_device(self, printer_network, recording_logger):
        collector = DetailCollector(printer_network.client_factory)
        original_collect = collector.collect

        def collect(address):
            if address == "10.0.0.2":
                raise RuntimeError("malformed row")
            return original_collect(address)

        collector.collect = collect
        error_handler = ErrorHandler(recording_logger)
        summary = make_orchestrator(
            printer_network, recording_logger, collector=collector, error_handler=error_handler
        ).execute_scan()

        assert [report.address for report in summary.reports] == ["10.0.0.5"]
        assert summary.failed_devices == {"10.0.0.2": "malformed row"}
        assert "❌ SNMP Get error for 10.0.0.2: malformed row" in recording_logger.lines
        assert error_handler.get_error_summary() == {"connect_error": 1}
        assert summary.scan_status is ScanStatus.COMPLETED

    def test_error_summary_logged_at_end(self, printer_network, recording_logger):
        collector = DetailCollector(printer_network.client_factory)
        original_collect = collector.collect

        def collect(address):
            if address == "10.0.0.5":
                raise SNMPResponseError("genErr")
            return original_collect(address)

        collector.collect = collect
        make_orchestrator(printer_network, recording_logger, collector=collector).execute_scan()

        summary_record, = [r for r in recording_logger.records if "device reports failed" in r]
        assert "1 of 2 device reports failed" in summary_record
        assert "response_error=1" in summary_record

    def test_no_error_summary_for_clean_scan(self, printer_network, recording_logger):
        make_orchestrator(printer_network, recording_logger).execute_scan()
        assert not any("device reports failed" in r for r in recording_logger.records)

    def test_partial_tables_still_reported(self, fake_network, recording_logger):
        agent = printer_agent(name="Lobby")
        agent.walk_errors[printer_oids.SUPPLIES_TABLE] = ConnectError("request timed out")
        fake_network.agents["10.0.0.1"] = agent

        summary = make_orchestrator(fake_network, recording_logger).execute_scan()

        assert summary.failed_devices == {}
        assert "  Supplies: (No data available: request timed out)" in recording_logger.lines
        assert "    - Tray 1: 50 (50% of 100)" in recording_logger.lines


class TestFatalErrors:
    """Configuration errors abort before any probe."""

    @pytest.mark.parametrize("cidr", ["not-a-cidr", "10.0.0.0/40", "10.0.0.1"])
    def test_invalid_cidr(self, fake_network, recording_logger, cidr):
        orchestrator = make_orchestrator(fake_network, recording_logger, cidr=cidr)

        with pytest.raises(ConfigurationError):
            orchestrator.execute_scan()

        assert fake_network.clients == []
        assert recording_logger.lines == []

    def test_invalid_worker_count(self, fake_network, recording_logger):
        orchestrator = make_orchestrator(fake_network, recording_logger, workers=0)

        with pytest.raises(ConfigurationError):
            orchestrator.execute_scan()

        assert fake_network.clients == []


class TestJsonOutput:
    """Optional JSON report."""

    def test_writes_report(self, printer_network, recording_logger, temp_dir):
        reporter = JSONReporter(str(temp_dir), logger=recording_logger)
        summary = make_orchestrator(
            printer_network, recording_logger, json_reporter=reporter
        ).execute_scan()

        files = list(temp_dir.glob("printer_scan_*.json"))
        assert len(files) == 1
        data = json.loads(files[0].read_text(encoding="utf-8"))
        assert data["scan_metadata"]["printers_found"] == 2
        assert data["scan_metadata"]["network_scanned"] == "10.0.0.0/29"
        assert [p["ip_address"] for p in data["printers"]] == [
            report.address for report in summary.reports
        ]

    def test_no_reporter_writes_nothing(self, printer_network, recording_logger, temp_dir):
        make_orchestrator(printer_network, recording_logger).execute_scan()
        assert list(temp_dir.iterdir()) == []


def test_non_printer_snmp_host_is_skipped(fake_network, recording_logger):
    fake_network.agents["10.0.0.3"] = FakeAgent(scalars={
        printer_oids.SYS_DESCR: SnmpValue.string("Cisco IOS"),
        printer_oids.SYS_NAME: SnmpValue.string("core-switch"),
    })
    summary = make_orchestrator(fake_network, recording_logger).execute_scan()
    assert summary.printers == []
