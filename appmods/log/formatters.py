"""
Log formatter rendering structured extra fields.

Output layout:
    [12:34:56,789] [I] module started          [module:http] [1234] [/infra/app]
"""

import logging
import traceback
from typing import Any

from .. import time as apptime
from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .logger import EXTRA_ATTR


def _format_value(key: str, value: Any, micros: bool) -> str:
    if key == "after" and isinstance(value, float):
        return apptime.delta_str(value, precise=micros)
    if isinstance(value, BaseException):
        return value.__class__.__name__
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _render_exception(exc: BaseException) -> str:
    return "".join(
        traceback.format_exception(type(exc), exc, exc.__traceback__)
    ).rstrip()


class LogFormatter(logging.Formatter):
    """Formatter that renders `extra` as `[key:value]` fields."""

    def __init__(self, config: LogConfig) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT)
        self._config = config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record, datefmt)
        if self._config.micros:
            micros = int((record.created % 1) * 1_000_000) % 1000
            s += f".{micros:03d}"
        return s

    def _fields(self, record: logging.LogRecord) -> tuple[list[str], BaseException | None]:
        extra = getattr(record, EXTRA_ATTR, None) or {}
        fields = []
        exc = None
        if "after" in extra:
            fields.append(f"[{_format_value('after', extra['after'], self._config.micros)}]")
        for key in sorted(extra):
            if key == "after":
                continue
            value = extra[key]
            if key == "exception" and isinstance(value, BaseException):
                exc = value
            fields.append(f"[{key}:{_format_value(key, value, self._config.micros)}]")
        return fields, exc

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record)
        head = f"[{record.asctime}] [{record.levelname[:1]}] {record.message}"
        pad = " " * max(1, LogConstants.DEFAULT_RULE_WIDTH - len(head))

        fields, exc = self._fields(record)
        meta = f"[{record.process}] [{record.name}]"
        tail = " ".join(fields + [meta])

        if self._config.colors:
            col = ColorManager.get_color_for_level(record.levelno) + "m"
            gray = ColorManager.create_gray_level(9) + "m"
            line = f"{col}{head}{pad}{tail[: -len(meta)]}{gray}{meta}{ColorManager.RESET}"
        else:
            line = f"{head}{pad}{tail}"

        if exc is not None:
            line += "\n" + _render_exception(exc)
        elif record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
