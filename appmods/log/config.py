"""
Immutable configuration for loggers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


def resolve_level(level: str | int | bool) -> int | bool:
    """
    Resolve a log level from a name, numeric value or boolean.

    Args:
        level: Level name ("info", "trace", ...), number, or False to disable

    Returns:
        Numeric level, or False when logging is disabled

    Raises:
        InvalidLogLevelError: If the name is unknown
    """
    if isinstance(level, bool):
        return logging.INFO if level else False
    if isinstance(level, int):
        return level
    if level.isnumeric():
        return int(level)
    resolved = LogConstants.LEVEL_NAMES.get(level.lower())
    if resolved is None:
        raise InvalidLogLevelError(level)
    return resolved


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging
        colors: Render ANSI colors
        micros: Append sub-second precision to timestamps
    """

    level: int | bool = logging.INFO
    colors: bool = False
    micros: bool = False

    @classmethod
    def from_params(
        cls, level: str | int | bool = "info", colors: bool = False, micros: bool = False
    ) -> LogConfig:
        """Create LogConfig from individual parameters."""
        return cls(level=resolve_level(level), colors=colors, micros=micros)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> LogConfig:
        """
        Create LogConfig from a "logging" config section.

        Example:
            LogConfig.from_config({"level": "debug", "colors": True})
        """
        section = config or {}
        return cls.from_params(
            level=section.get("level", "info"),
            colors=bool(section.get("colors", False)),
            micros=bool(section.get("micros", False)),
        )
