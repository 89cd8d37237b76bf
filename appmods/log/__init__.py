"""
Logging for appmods.

Extends the standard logging module with:
- a TRACE level below DEBUG
- structured extra fields rendered as [key:value]
- `/`-separated logger hierarchies sharing the root's handlers
- error records routed to stderr

Example:
    from appmods.log import LogConfig, LoggerFactory

    lg = LoggerFactory.create_root(LogConfig.from_params("debug"))
    app_lg = LoggerFactory.derive(lg, ["infra", "app"])
    app_lg.info("modules started", extra={"count": 3})
"""

import logging

from .config import LogConfig, resolve_level
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import TRACE, Logger

logging.addLevelName(TRACE, "TRACE")


def create_root_lg(level: str | int | bool = "info", colors: bool = False) -> Logger:
    """Create a root logger with the given level."""
    return LoggerFactory.create_root(LogConfig.from_params(level, colors=colors))


__all__ = [
    "InvalidLogLevelError",
    "LogConfig",
    "LogConstants",
    "LogError",
    "LogFormatter",
    "Logger",
    "LoggerFactory",
    "TRACE",
    "create_root_lg",
    "resolve_level",
]
