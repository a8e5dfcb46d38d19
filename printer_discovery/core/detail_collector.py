"""
Detail collector for the Printer Discovery Module.

Builds a DeviceReport for one confirmed printer in two phases: a single GET
of the scalar objects, then walks of the supplies and input tray tables.
Connection and GET failures abort the report for that device only; a failed
or empty table walk is recorded on the report and leaves the rest intact.
"""

from typing import Callable, Dict, Mapping, Optional, Tuple, TypeVar

from . import printer_oids
from .data_models import (
    PRINTER_STATUS_CODES,
    DeviceReport,
    SnmpValue,
    SupplyRecord,
    TrayRecord,
    ValueKind,
)
from ..scanners.snmp_client import SNMPClient
from ..utils.error_handler import (
    ErrorContext,
    ErrorSeverity,
    PartialDataError,
    PrinterDiscoveryError,
    classify_error,
)
from ..utils.logger import Logger, get_logger

ClientFactory = Callable[[str], SNMPClient]

RecordT = TypeVar("RecordT", SupplyRecord, TrayRecord)

# column -> (record attribute, expected kind)
SUPPLY_COLUMNS: Mapping[int, Tuple[str, ValueKind]] = {
    printer_oids.SUPPLY_DESCRIPTION_COLUMN: ("description", ValueKind.STRING),
    printer_oids.SUPPLY_LEVEL_COLUMN: ("level", ValueKind.INTEGER),
    printer_oids.SUPPLY_MAX_CAPACITY_COLUMN: ("max_capacity", ValueKind.INTEGER),
}

TRAY_COLUMNS: Mapping[int, Tuple[str, ValueKind]] = {
    printer_oids.INPUT_NAME_COLUMN: ("name", ValueKind.STRING),
    printer_oids.INPUT_CURRENT_LEVEL_COLUMN: ("current_level", ValueKind.INTEGER),
    printer_oids.INPUT_MAX_CAPACITY_COLUMN: ("max_capacity", ValueKind.INTEGER),
}

# scalar OID -> (report attribute, expected kind)
SCALAR_FIELDS: Mapping[str, Tuple[str, ValueKind]] = {
    printer_oids.SYS_DESCR: ("system_description", ValueKind.STRING),
    printer_oids.HR_PRINTER_STATUS: ("status_code", ValueKind.INTEGER),
    printer_oids.PRT_GENERAL_PRINTER_NAME: ("printer_name", ValueKind.STRING),
    printer_oids.PRT_MARKER_LIFE_COUNT: ("page_count", ValueKind.INTEGER),
}

NO_ENTRIES = "no entries returned"


class DetailCollector:
    """
    Collects the operational data of a single printer.

    The status code mapping is injected so that it stays an immutable
    value owned by the caller rather than module state.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        status_codes: Mapping[int, str] = PRINTER_STATUS_CODES,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the collector.

        Args:
            client_factory: Builds an unconnected SNMPClient for an address
            status_codes: hrPrinterStatus code -> name
            logger: Logger instance for diagnostics
        """
        self.client_factory = client_factory
        self.status_codes = status_codes
        self.logger = logger or get_logger(__name__)

    def collect(self, address: str) -> DeviceReport:
        """
        Collect a DeviceReport for one printer.

        A raised error carries an ErrorContext whose operation is
        ``connect`` or ``get``, naming the phase that failed.

        Args:
            address: IPv4 address of a discovered printer

        Returns:
            DeviceReport, possibly with empty tables and their diagnostics

        Raises:
            ConnectError: If the device cannot be reached or the scalar GET
                times out
            SNMPResponseError: If the scalar GET is answered with an error
        """
        report = DeviceReport(address=address)
        client = self.client_factory(address)
        operation = "connect"
        try:
            client.connect()
            operation = "get"
            self._collect_scalars(client, report)

            report.supplies, report.supplies_error = self._collect_table(
                client, printer_oids.SUPPLIES_TABLE, SUPPLY_COLUMNS, SupplyRecord
            )
            report.trays, report.trays_error = self._collect_table(
                client, printer_oids.INPUT_TABLE, TRAY_COLUMNS, TrayRecord
            )
        except PrinterDiscoveryError as e:
            if e.error_context is None:
                e.error_context = ErrorContext(
                    error_type=classify_error(e),
                    severity=ErrorSeverity.LOW,
                    operation=operation,
                    component="DetailCollector",
                    target=address,
                )
            raise
        finally:
            client.close()

        return report

    def _collect_scalars(self, client: SNMPClient, report: DeviceReport) -> None:
        """Phase 1: one GET for the four scalar objects."""
        var_binds = client.get(list(printer_oids.DETAIL_OIDS))

        for var_bind in var_binds:
            target = SCALAR_FIELDS.get(var_bind.oid.lstrip("."))
            if target is None:
                continue
            attribute, expected = target
            value = self._expect(var_bind.oid, var_bind.value, expected, report.address)
            if value is None or value == "":
                continue
            setattr(report, attribute, value)

        if report.status_code is not None:
            report.status_name = self.status_codes.get(report.status_code)

    def _collect_table(
        self,
        client: SNMPClient,
        table_root: str,
        columns: Mapping[int, Tuple[str, ValueKind]],
        record_type: Callable[[], RecordT],
    ) -> Tuple[Dict[int, RecordT], Optional[str]]:
        """
        Phase 2: walk one table and merge its cells into records by index.

        Returns:
            (records by index, None) on success, ({}, reason) when the table
            has no usable data
        """
        records: Dict[int, RecordT] = {}
        try:
            for var_bind in client.walk(table_root):
                location = printer_oids.split_table_oid(var_bind.oid, table_root)
                if location is None:
                    continue
                column, index = location
                record = records.setdefault(index, record_type())

                target = columns.get(column)
                if target is None:
                    continue
                attribute, expected = target
                value = self._expect(var_bind.oid, var_bind.value, expected, client.host)
                if value is not None:
                    setattr(record, attribute, value)

            if not records:
                raise PartialDataError(NO_ENTRIES)

        except PartialDataError as e:
            self.logger.debug(f"Table {table_root} on {client.host}: {e}")
            return {}, str(e)
        except PrinterDiscoveryError as e:
            self.logger.warning(f"Walk of {table_root} failed on {client.host}: {e}")
            return {}, str(e)

        return records, None

    def _expect(self, oid: str, value: SnmpValue, expected: ValueKind, host: str):
        """
        Return the decoded payload if it has the expected kind, else None.

        Type mismatches are logged at debug level and otherwise ignored.
        """
        if value.kind is expected:
            return value.value
        if value.kind is not ValueKind.NOT_PRESENT:
            self.logger.debug(
                f"Ignoring {oid} from {host}: expected {expected.value}, got {value.type_name}"
            )
        return None
