"""
SNMP access for Printer Discovery.

This package contains the SNMP client interface with its pysnmp
implementation, and the printer probe built on top of it.
"""

from .snmp_client import SNMPClient, PySNMPClient, decode_value
from .printer_probe import PrinterProbe

__all__ = [
    'SNMPClient',
    'PySNMPClient',
    'decode_value',
    'PrinterProbe'
]
