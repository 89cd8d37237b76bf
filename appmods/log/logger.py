"""
Logger class with structured extra fields and a trace level.
"""

import logging
from typing import Any

from .config import LogConfig
from .constants import LogConstants

TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]

# Record attribute carrying the structured extra fields
EXTRA_ATTR = "__appmods__extra"


class Logger(logging.Logger):
    """
    Logger that keeps `extra` as structured fields.

    Fields passed via `extra=` are attached to the record as a single dict
    instead of being spread into record attributes, so the formatter can
    render them as `[key:value]` pairs. Derived loggers delegate to the
    handlers of their root.
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        if config is None:
            config = LogConfig()

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # Set for derived loggers

    @property
    def config(self) -> LogConfig:
        return self._config

    def isEnabledFor(self, level: int) -> bool:
        if self._logging_disabled:
            return False
        if not super().isEnabledFor(level):
            return False
        # Derived loggers respect their parent's level
        if self.parent is not None and isinstance(self.parent, Logger):
            return self.parent.isEnabledFor(level)
        return True

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func, None, sinfo
        )
        merged = dict(self._extra)
        if extra:
            merged.update(extra)
        setattr(record, EXTRA_ATTR, merged)
        return record

    def callHandlers(self, record: logging.LogRecord) -> None:
        if self._root_logger is not None:
            self._root_logger.callHandlers(record)
            return
        super().callHandlers(record)

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log at TRACE level (below DEBUG)."""
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)
