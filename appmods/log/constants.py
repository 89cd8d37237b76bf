"""
Constants for the logging system.

Format strings, rule widths, custom level numbers and ANSI sequences.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Column where extra fields start, so messages line up
    DEFAULT_RULE_WIDTH: int = 70

    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5}

    LEVEL_NAMES: dict[str, int | bool] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
        "false": False,  # Disables all logging
    }

    RESET: str = "\x1b[0m"

    GRAY_BASE: int = 232
    GRAY_MAX_LEVELS: int = 24
