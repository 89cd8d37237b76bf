"""
ANSI color selection for log levels.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    GREEN = "\x1b[32"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def create_gray_level(level: int) -> str:
        """Create a gray color (0-23) used for trace and metadata."""
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"

    @staticmethod
    def get_color_for_level(level: int) -> str:
        """Get color escape sequence for a log level."""
        color = ColorManager.COLORS.get(level)
        if color is not None:
            return color
        if level < logging.DEBUG:
            return ColorManager.create_gray_level(12)
        return ColorManager.DEFAULT
