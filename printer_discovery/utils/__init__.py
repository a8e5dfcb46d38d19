"""
Utility functions and helper classes.
"""

from .logger import Logger, LogLevel, set_log_level, get_logger
from .error_handler import (
    ErrorHandler, ErrorContext, ErrorType, ErrorSeverity,
    PrinterDiscoveryError, ConfigurationError, ConnectError, ProtocolMiss,
    SNMPResponseError, PartialDataError, classify_error
)
from . import network_utils

__all__ = [
    'Logger',
    'LogLevel',
    'set_log_level',
    'get_logger',
    'ErrorHandler',
    'ErrorContext',
    'ErrorType',
    'ErrorSeverity',
    'PrinterDiscoveryError',
    'ConfigurationError',
    'ConnectError',
    'ProtocolMiss',
    'SNMPResponseError',
    'PartialDataError',
    'classify_error',
    'network_utils'
]
