"""
Core data models and enums for the Printer Discovery Module.

This module defines the data structures used throughout a printer scan:
decoded SNMP values, discovered printers, per-device reports with their
supply and tray tables, and the summary of a complete scan.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


# Host Resources MIB hrPrinterStatus values
PRINTER_STATUS_CODES: Mapping[int, str] = MappingProxyType({
    1: "other",
    2: "unknown",
    3: "idle",
    4: "printing",
    5: "warmup",
})

# Printer MIB level sentinels (-2 unknown, -3 "some remaining")
UNKNOWN_LEVEL_SENTINELS = frozenset({-2, -3})


class ValueKind(Enum):
    """Closed set of shapes an SNMP value is decoded into."""
    STRING = "string"
    INTEGER = "integer"
    NOT_PRESENT = "not_present"
    WRONG_TYPE = "wrong_type"


@dataclass(frozen=True)
class SnmpValue:
    """
    A decoded SNMP value.

    Attributes:
        kind: Which variant this value is
        value: ``str`` for STRING, ``int`` for INTEGER, otherwise None
        type_name: Name of the original SNMP type, kept for diagnostics
    """
    kind: ValueKind
    value: Any = None
    type_name: str = ""

    @classmethod
    def string(cls, value: str) -> "SnmpValue":
        return cls(ValueKind.STRING, value, "OctetString")

    @classmethod
    def integer(cls, value: int) -> "SnmpValue":
        return cls(ValueKind.INTEGER, value, "Integer")

    @classmethod
    def not_present(cls, type_name: str = "NoSuchObject") -> "SnmpValue":
        return cls(ValueKind.NOT_PRESENT, None, type_name)

    @classmethod
    def wrong_type(cls, type_name: str) -> "SnmpValue":
        return cls(ValueKind.WRONG_TYPE, None, type_name)

    def as_string(self) -> Optional[str]:
        return self.value if self.kind is ValueKind.STRING else None

    def as_int(self) -> Optional[int]:
        return self.value if self.kind is ValueKind.INTEGER else None


@dataclass(frozen=True)
class VarBind:
    """An OID (dotted, without leading dot) paired with its decoded value."""
    oid: str
    value: SnmpValue


@dataclass(frozen=True)
class DiscoveredPrinter:
    """
    A host that answered the printer status probe.

    Attributes:
        address: IPv4 address of the printer
        name: First non-empty naming value, or None when unnamed
    """
    address: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or "(unnamed)"


def percent_of_capacity(level: Optional[int], capacity: Optional[int]) -> Optional[int]:
    """
    Integer percentage of capacity, truncated toward zero.

    Only defined when capacity is positive and level is non-negative;
    sentinel levels and unknown capacities yield None.
    """
    if level is None or capacity is None:
        return None
    if capacity <= 0 or level < 0:
        return None
    return (100 * level) // capacity


@dataclass
class SupplyRecord:
    """
    One printer consumable (toner, ink, drum, waste container...).

    Attributes:
        description: prtMarkerSuppliesDescription
        level: prtMarkerSuppliesLevel, negative values are sentinels
        max_capacity: prtMarkerSuppliesMaxCapacity, <= 0 when not applicable
    """
    description: Optional[str] = None
    level: Optional[int] = None
    max_capacity: Optional[int] = None

    @property
    def percent_of_capacity(self) -> Optional[int]:
        return percent_of_capacity(self.level, self.max_capacity)

    @property
    def level_unknown(self) -> bool:
        return self.level in UNKNOWN_LEVEL_SENTINELS


@dataclass
class TrayRecord:
    """
    One paper input tray.

    Attributes:
        name: Tray name as reported by the device
        current_level: Sheets currently loaded, negative values are sentinels
        max_capacity: Tray capacity, <= 0 when not applicable
    """
    name: Optional[str] = None
    current_level: Optional[int] = None
    max_capacity: Optional[int] = None

    @property
    def percent_of_capacity(self) -> Optional[int]:
        return percent_of_capacity(self.current_level, self.max_capacity)

    @property
    def level_unknown(self) -> bool:
        return self.current_level in UNKNOWN_LEVEL_SENTINELS


@dataclass
class DeviceReport:
    """
    Operational data collected from one discovered printer.

    Attributes:
        address: IPv4 address of the printer
        system_description: sysDescr.0
        printer_name: prtGeneralPrinterName.1
        status_code: Raw hrPrinterStatus value
        status_name: Mapped status name, None when the code is not mapped
        page_count: prtMarkerLifeCount.1
        supplies: Consumables keyed by device-assigned table index
        trays: Paper trays keyed by device-assigned table index
        supplies_error: Why the supplies table has no data, if it has none
        trays_error: Why the trays table has no data, if it has none
    """
    address: str
    system_description: Optional[str] = None
    printer_name: Optional[str] = None
    status_code: Optional[int] = None
    status_name: Optional[str] = None
    page_count: Optional[int] = None
    supplies: Dict[int, SupplyRecord] = field(default_factory=dict)
    trays: Dict[int, TrayRecord] = field(default_factory=dict)
    supplies_error: Optional[str] = None
    trays_error: Optional[str] = None


class ScanStatus(Enum):
    """Enumeration of possible scan outcomes."""
    NOT_STARTED = "not_started"
    COMPLETED = "completed"
    NO_PRINTERS = "no_printers"


@dataclass
class ScanSummary:
    """
    Result of a complete printer scan.

    Attributes:
        network: CIDR block that was scanned
        timestamp: When the scan was started
        addresses_scanned: Number of addresses probed
        printers: Discovered printers in discovery (completion) order
        reports: Device reports, in the same order as ``printers``
        failed_devices: Address -> reason for devices whose report was aborted
        scan_duration: Total duration in seconds
        scan_status: Overall outcome
    """
    network: str
    timestamp: datetime = field(default_factory=datetime.now)
    addresses_scanned: int = 0
    printers: List[DiscoveredPrinter] = field(default_factory=list)
    reports: List[DeviceReport] = field(default_factory=list)
    failed_devices: Dict[str, str] = field(default_factory=dict)
    scan_duration: float = 0.0
    scan_status: ScanStatus = ScanStatus.NOT_STARTED
