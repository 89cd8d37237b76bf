"""
Custom exceptions for the logging system.
"""

from typing import Any

from ..exceptions import LoggingError


class LogError(LoggingError):
    """Base exception for logging-related errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, **context)


class InvalidLogLevelError(LogError):
    """Raised when an invalid log level is specified."""

    def __init__(self, level: Any) -> None:
        self.level = level
        super().__init__(f"Invalid log level: {level}")
