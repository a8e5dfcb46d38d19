"""
Printer Discovery Module

Scans an IPv4 network for SNMP v2c printers and reports their status, page
counts, consumable levels and paper tray levels.
"""

__version__ = "1.0.0"
__author__ = "Printer Discovery Team"
