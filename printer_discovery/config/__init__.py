"""
Configuration module for Printer Discovery.
Provides scan configuration loading and the fixed SNMP transport settings.
"""

from .config_loader import ConfigLoader, ScanConfig, SNMPConfig

__all__ = ['ConfigLoader', 'ScanConfig', 'SNMPConfig']
