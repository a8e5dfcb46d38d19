"""
Error taxonomy and centralized error handling for the Printer Discovery Module.

Only configuration errors are fatal. Every other failure is contained at the
device or table boundary: it is counted, logged with troubleshooting hints
and turned into a degraded report rather than an aborted scan.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .logger import Logger, get_logger


class ErrorType(Enum):
    """Enumeration for different types of errors."""
    CONFIGURATION_ERROR = "configuration_error"
    CONNECT_ERROR = "connect_error"
    PROTOCOL_MISS = "protocol_miss"
    RESPONSE_ERROR = "response_error"
    PARTIAL_DATA = "partial_data"


class ErrorSeverity(Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class ErrorContext:
    """
    Context information for error handling.

    Attributes:
        error_type: Type of error that occurred
        severity: Severity level of the error
        operation: Operation that was being performed when error occurred
        component: Component/module where error occurred
        target: Address of the device involved, if any
        additional_info: Additional context information
    """
    error_type: ErrorType
    severity: ErrorSeverity
    operation: str
    component: str
    target: Optional[str] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)


class PrinterDiscoveryError(Exception):
    """Base exception class for Printer Discovery Module."""

    def __init__(self, message: str, error_context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.error_context = error_context


class ConfigurationError(PrinterDiscoveryError):
    """Invalid scan configuration (e.g. malformed CIDR). Fatal to the run."""
    pass


class ConnectError(PrinterDiscoveryError):
    """Transport or timeout failure reaching a target."""
    pass


class ProtocolMiss(PrinterDiscoveryError):
    """The target answered but does not implement the queried object."""
    pass


class SNMPResponseError(PrinterDiscoveryError):
    """The target answered a request with a non-zero SNMP error status."""
    pass


class PartialDataError(PrinterDiscoveryError):
    """A table walk produced no usable entries."""
    pass


_ERROR_TYPES = (
    (ConfigurationError, ErrorType.CONFIGURATION_ERROR),
    (ConnectError, ErrorType.CONNECT_ERROR),
    (ProtocolMiss, ErrorType.PROTOCOL_MISS),
    (SNMPResponseError, ErrorType.RESPONSE_ERROR),
    (PartialDataError, ErrorType.PARTIAL_DATA),
)


def classify_error(error: Exception) -> ErrorType:
    """
    Map an exception onto the error taxonomy.

    Unknown exceptions are treated as connect errors: from the scan's point
    of view they are per-device failures.
    """
    for error_class, error_type in _ERROR_TYPES:
        if isinstance(error, error_class):
            return error_type
    return ErrorType.CONNECT_ERROR


class ErrorHandler:
    """
    Centralized error handling.

    Keeps per-type statistics, logs each error at a level matching its
    severity and prints troubleshooting suggestions the first time a given
    error type is seen.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Logger instance for error reporting
        """
        self.logger = logger or get_logger(__name__)
        self.error_statistics: Dict[ErrorType, int] = {
            error_type: 0 for error_type in ErrorType
        }

    def handle_error(self, error: Exception, context: ErrorContext) -> bool:
        """
        Handle an error based on its type and context.

        Args:
            error: The exception that occurred
            context: Error context information

        Returns:
            bool: True if the scan can continue, False if the error is fatal
        """
        first_occurrence = self.error_statistics[context.error_type] == 0
        self.error_statistics[context.error_type] += 1

        self._log_error(error, context)

        if context.error_type == ErrorType.CONFIGURATION_ERROR:
            self._suggest_configuration_fixes()
            return False

        if first_occurrence and context.error_type == ErrorType.CONNECT_ERROR:
            self._suggest_connect_troubleshooting()
        elif first_occurrence and context.error_type == ErrorType.RESPONSE_ERROR:
            self._suggest_response_troubleshooting()
        return True

    def get_error_summary(self) -> Dict[str, int]:
        """Return the non-zero error counts keyed by error type value."""
        return {
            error_type.value: count
            for error_type, count in self.error_statistics.items()
            if count
        }

    def _log_error(self, error: Exception, context: ErrorContext) -> None:
        """
        Log error information with appropriate detail level.

        Args:
            error: The exception that occurred
            context: Error context information
        """
        where = f"{context.component}.{context.operation}"
        if context.target:
            where += f" [{context.target}]"
        error_msg = f"Error in {where}: {str(error)}"

        if context.severity == ErrorSeverity.HIGH:
            self.logger.error(error_msg)
        elif context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(error_msg, exception=type(error).__name__)
        else:
            self.logger.debug(error_msg)

    def _suggest_configuration_fixes(self) -> None:
        self.logger.info("Configuration error solutions:")
        self.logger.info("  • Use CIDR notation for --cidr, e.g. 192.168.1.0/24")
        self.logger.info("  • Only IPv4 networks are supported")
        self.logger.info("  • --workers must be a positive integer")
        self.logger.info("  • Check YAML syntax and indentation of scan_config.yml")

    def _suggest_connect_troubleshooting(self) -> None:
        self.logger.info("Connection troubleshooting suggestions:")
        self.logger.info("  • Verify the printer is powered on and reachable")
        self.logger.info("  • Check that SNMP is enabled on the device (UDP/161)")
        self.logger.info("  • Check firewall rules between this host and the printer")

    def _suggest_response_troubleshooting(self) -> None:
        self.logger.info("SNMP response troubleshooting suggestions:")
        self.logger.info("  • Verify the community string (--community)")
        self.logger.info("  • Make sure the device allows SNMP v2c read access")
