"""
Base class and interface for application modules.

A module is any class constructible as `cls(config, app)`. It may expose
`start()` and `stop()` (sync or async) and a numeric `stop_timeout_ms`.
Deriving from Module is optional but binds the usual helpers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..log import LoggerFactory
from .errors import ConfigurationError

if TYPE_CHECKING:
    from ..log import Logger
    from .core.app import Application


@runtime_checkable
class ModuleProtocol(Protocol):
    """Constructor contract every module satisfies."""

    def __init__(self, config: Mapping[str, Any], app: Application) -> None: ...


class Module:
    """
    Convenience base class for modules.

    Binds:
        config: The module's own configuration slice
        app: The hosting Application
        raise_error: The application's namespaced error facility
        lg: Logger at /mod/<class name>

    A `stop_timeout_ms` key in the module config overrides the class
    attribute.

    Example:
        class Http(Module):
            stop_timeout_ms = 5000

            async def start(self):
                self.server = await serve(self.config["port"])

            async def stop(self):
                self.server.close()
                await self.server.wait_closed()
    """

    stop_timeout_ms: int | float | None = None

    def __init__(self, config: Mapping[str, Any], app: Application) -> None:
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"{type(self).__name__} config must be a mapping, "
                f"got {type(config).__name__}"
            )
        self.config = config
        self.app = app
        self.raise_error = app.errors.raise_error
        self.lg: Logger = LoggerFactory.derive(app.lg, ["mod", type(self).__name__.lower()])

        timeout = config.get("stop_timeout_ms")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigurationError("stop_timeout_ms must be a number")
            self.stop_timeout_ms = timeout
