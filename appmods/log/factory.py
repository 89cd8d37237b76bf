"""
Factory for creating root loggers and derived "view" loggers.

Logger names are `/`-separated paths: the root is "/", derived loggers are
"/infra", "/infra/app/lifecycle" and so on. Derived loggers have their own
level but share the root's handlers.
"""

import logging
import sys
from typing import Any

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class _BelowLevel(logging.Filter):
    """Passes records strictly below a level."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def _setup_handlers(lg: Logger, config: LogConfig) -> None:
        """Attach stdout (below ERROR) and stderr (ERROR and up) handlers."""
        formatter = LogFormatter(config)

        out = logging.StreamHandler(sys.stdout)
        out.addFilter(_BelowLevel(logging.ERROR))
        out.setFormatter(formatter)

        err = logging.StreamHandler(sys.stderr)
        err.setLevel(logging.ERROR)
        err.setFormatter(formatter)

        lg.addHandler(out)
        lg.addHandler(err)

    @staticmethod
    def create_root(config: LogConfig, extra: dict[str, Any] | None = None) -> Logger:
        """
        Create the root logger "/".

        Example:
            >>> lg = LoggerFactory.create_root(LogConfig.from_params("debug"))
            >>> lg.info("started", extra={"modules": 3})
            [12:34:56,789] [I] started          [modules:3] [1234] [/]
        """
        return LoggerFactory.create("/", config, extra)

    @staticmethod
    def create(
        name: str, config: LogConfig, extra: dict[str, Any] | None = None
    ) -> Logger:
        """
        Create a logger with its own handlers.

        An existing logger registered under the same name is replaced, so a
        new root picks up the new config.
        """
        lg = Logger(name, config, extra)
        LoggerFactory._setup_handlers(lg, config)
        lg.propagate = False
        logging.root.manager.loggerDict[name] = lg
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a view logger below parent.

        Examples:
            >>> LoggerFactory.derive(root, "infra").name
            '/infra'
            >>> LoggerFactory.derive(infra, ["app", "lifecycle"]).name
            '/infra/app/lifecycle'
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        lg = Logger(name, parent.config, dict(parent._extra))
        lg.setLevel(logging.NOTSET)
        lg._root_logger = parent._root_logger or parent
        lg.parent = parent
        lg.propagate = False
        return lg
