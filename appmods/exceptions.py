"""
Unified exception hierarchy for the appmods framework.

Every framework-specific error inherits from AppModsError, so callers can
catch all of them with a single except clause.
"""

from typing import Any


class AppModsError(Exception):
    """
    Base exception for all appmods framework errors.

    Example:
        try:
            await Application.run(srcdir)
        except AppModsError as e:
            lg.error("framework error", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(AppModsError):
    """
    Configuration loading errors.

    Examples:
        - Config file not found or too large
        - Invalid YAML syntax
        - Unresolvable ${variable} reference
    """

    pass


class LoggingError(AppModsError):
    """Logging configuration errors."""

    pass
