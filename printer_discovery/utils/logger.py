"""
Logging system with colored output for printer discovery operations.

This module provides a Logger class that supports colored console output
using colorama, different log levels with distinct colors, and plain report
lines. Output is serialised across threads so that discovery notifications
printed by concurrent workers never interleave.
"""

import sys
import threading
from datetime import datetime
from enum import Enum
from typing import Optional
from colorama import Fore, Style, init

# Initialize colorama for cross-platform colored output
init(autoreset=True)

# Shared by every Logger instance: workers print concurrently
_output_lock = threading.Lock()


class LogLevel(Enum):
    """Enumeration for different log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}

_default_level = LogLevel.INFO


class Logger:
    """
    Logger class with colored console output.

    Provides structured logging with different levels and colors for
    diagnostics, plus ``emit`` for the human-readable scan output itself.
    """

    # Color mapping for different log levels
    LEVEL_COLORS = {
        LogLevel.DEBUG: Fore.CYAN,
        LogLevel.INFO: Fore.GREEN,
        LogLevel.WARNING: Fore.YELLOW,
        LogLevel.ERROR: Fore.RED,
    }

    # Symbol mapping for different log levels
    LEVEL_SYMBOLS = {
        LogLevel.DEBUG: "🔍",
        LogLevel.INFO: "ℹ️",
        LogLevel.WARNING: "⚠️",
        LogLevel.ERROR: "❌",
    }

    def __init__(
        self, name: str = "PrinterDiscovery", min_level: Optional[LogLevel] = None
    ):
        """
        Initialize the Logger.

        Args:
            name: Name of the logger (default: "PrinterDiscovery")
            min_level: Minimum log level to display. When omitted the
                process-wide level set by ``set_log_level`` is used.
        """
        self.name = name
        self._min_level = min_level

    @property
    def min_level(self) -> LogLevel:
        return self._min_level or _default_level

    @min_level.setter
    def min_level(self, level: LogLevel) -> None:
        self._min_level = level

    def _should_log(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self.min_level]

    def _format_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _write(self, text: str, error: bool = False) -> None:
        stream = sys.stderr if error else sys.stdout
        with _output_lock:
            print(text, file=stream, flush=True)

    def _log(self, level: LogLevel, message: str, **kwargs) -> None:
        """
        Internal logging method that handles formatting and output.

        Args:
            level: Log level
            message: Message to log
            **kwargs: Additional context rendered as ``key=value`` pairs
        """
        if not self._should_log(level):
            return

        timestamp = self._format_timestamp()
        color = self.LEVEL_COLORS[level]
        symbol = self.LEVEL_SYMBOLS[level]

        formatted_message = (
            f"{Style.DIM}[{timestamp}]{Style.RESET_ALL} "
            f"{color}{symbol} {level.value:<7}{Style.RESET_ALL} "
            f"{message}"
        )

        if kwargs:
            details = " | ".join([f"{k}={v}" for k, v in kwargs.items()])
            formatted_message += f" {Style.DIM}({details}){Style.RESET_ALL}"

        self._write(formatted_message, error=level == LogLevel.ERROR)

    def debug(self, message: str, **kwargs) -> None:
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(
        self, message: str, exception: Optional[Exception] = None, **kwargs
    ) -> None:
        """
        Log an error message.

        Args:
            message: Error message
            exception: Optional exception object for additional context
            **kwargs: Additional context information
        """
        if exception:
            kwargs["exception"] = f"{type(exception).__name__}: {str(exception)}"
        self._log(LogLevel.ERROR, message, **kwargs)

    def success(self, message: str, **kwargs) -> None:
        """Log a success message (formatted as INFO with special styling)."""
        if not self._should_log(LogLevel.INFO):
            return

        timestamp = self._format_timestamp()
        formatted_message = (
            f"{Style.DIM}[{timestamp}]{Style.RESET_ALL} "
            f"{Fore.GREEN}✅ SUCCESS {Style.RESET_ALL} "
            f"{Style.BRIGHT}{message}{Style.RESET_ALL}"
        )

        if kwargs:
            details = " | ".join([f"{k}={v}" for k, v in kwargs.items()])
            formatted_message += f" {Style.DIM}({details}){Style.RESET_ALL}"

        self._write(formatted_message)

    def emit(self, line: str = "") -> None:
        """
        Write one line of scan output to stdout, unformatted.

        Scan output (banner, discovery lines, device reports) is the
        program's product rather than a diagnostic, so it is never filtered
        by the log level.

        Args:
            line: Text to print
        """
        self._write(line)


def set_log_level(level: LogLevel) -> None:
    """
    Set the process-wide log level.

    Applies to every logger that was created without an explicit
    ``min_level``, including ones handed out earlier by ``get_logger``.

    Args:
        level: Minimum log level to display
    """
    global _default_level
    _default_level = level


def get_logger(name: str = "PrinterDiscovery") -> Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return Logger(name)
