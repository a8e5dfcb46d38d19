"""
Core components for printer discovery functionality.
"""

from .data_models import (
    PRINTER_STATUS_CODES,
    ValueKind,
    SnmpValue,
    VarBind,
    DiscoveredPrinter,
    SupplyRecord,
    TrayRecord,
    DeviceReport,
    ScanStatus,
    ScanSummary,
)
from .address_enumerator import enumerate_addresses, parse_network

__all__ = [
    'PRINTER_STATUS_CODES',
    'ValueKind',
    'SnmpValue',
    'VarBind',
    'DiscoveredPrinter',
    'SupplyRecord',
    'TrayRecord',
    'DeviceReport',
    'ScanStatus',
    'ScanSummary',
    'enumerate_addresses',
    'parse_network',
]
