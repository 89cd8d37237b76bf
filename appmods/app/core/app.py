"""
Application: the module lifecycle orchestrator.

Owns the configuration, resolves module classes through ModuleRegistry and
drives every module through require -> init -> start -> stop.
"""

from __future__ import annotations

import argparse
import asyncio
import datetime
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ... import time
from ...log import LogConfig, Logger, LoggerFactory
from ..constants import (
    ERR_MODULE_FUNCTION_NOT_FOUND,
    ERR_MODULE_NOT_FOUND,
    MAIN_APP_NAME,
)
from ..errors import (
    CodedError,
    ConfigurationError,
    InfraAppError,
    LifecycleError,
    ModuleInitError,
)
from ..registry import ModuleRegistry, validate_module_name
from ..reporter import ErrorReporter, code_prefix
from .config import get_config_from_pkg
from .fanout import StopResult, start_all, stop_all
from .lifecycle import Lifecycle, LifecycleState
from .shutdown import ShutdownCoordinator

# States in which subsets of modules may be started or stopped
_RUNNING_STATES = (
    LifecycleState.INITIALIZED,
    LifecycleState.STARTED,
    LifecycleState.FAILED,
)


def _names_arg(names: Sequence[str] | None, default: list[str]) -> list[str]:
    if names is None:
        return list(default)
    if isinstance(names, str):
        raise TypeError("names must be a sequence of module names, not a string")
    return list(names)


class Application:
    """
    Loads, starts and stops the modules named in a configuration map.

    The configuration maps module names to per-module configuration. The
    reserved key "app" holds the main application entry; its name is the
    error-code prefix ("my-app" -> "MY_APP") and it is not a module.

    Example:
        app = Application(
            {"app": {"name": "my-app"}, "http": {"port": 8080}},
            "src/modules",
        )
        app.require()
        app.init()
        await app.start()
        ...
        result = await app.stop()
        sys.exit(result.exit_code)
    """

    main_app_name = MAIN_APP_NAME

    def __init__(
        self,
        config: Mapping[str, Any],
        srcdir: str | os.PathLike[str],
        lg: Logger | None = None,
    ) -> None:
        """
        Create an application.

        Args:
            config: Module name -> module config, including the "app" entry
            srcdir: Directory module files are loaded from
            lg: Root logger (created from app.logging when omitted)

        Raises:
            ConfigurationError: If config or srcdir have the wrong shape
        """
        if not isinstance(config, Mapping):
            raise ConfigurationError("config must be a mapping")
        if not isinstance(srcdir, (str, os.PathLike)):
            raise ConfigurationError("srcdir must be a string or path")

        app_config = config.get(MAIN_APP_NAME)
        if not isinstance(app_config, Mapping):
            raise ConfigurationError(f"'{MAIN_APP_NAME}' entry is missing")

        # Kept by reference: require() registers new names in place
        self.config: dict[str, Any] = config if isinstance(config, dict) else dict(config)
        self.srcdir = Path(srcdir)
        self.app_config = app_config
        self.errors = ErrorReporter(code_prefix(app_config.get("name")))

        self.modules: list[str] = [name for name in self.config if name != MAIN_APP_NAME]
        for name in self.modules:
            self._check_name(name)

        self.registry = ModuleRegistry(self.srcdir)
        self.instances: dict[str, Any] = {}
        self.args: argparse.Namespace | None = None

        if lg is None:
            lg = LoggerFactory.create_root(LogConfig.from_config(app_config.get("logging")))
        self.lg = lg
        self._lifecycle_lg = LoggerFactory.derive(lg, ["infra", "app", "lifecycle"])
        self.lifecycle = Lifecycle(self._lifecycle_lg)
        self._coordinator: ShutdownCoordinator | None = None

    @staticmethod
    def _check_name(name: Any) -> None:
        try:
            validate_module_name(name)
        except InfraAppError as e:
            raise ConfigurationError(str(e)) from e

    @property
    def state(self) -> LifecycleState:
        return self.lifecycle.state

    @property
    def name(self) -> str:
        return self.app_config["name"]

    def raise_error(
        self, code: str, message: str = "Error", just_return: bool = False, **context: Any
    ) -> CodedError:
        """Raise (or return) a CodedError namespaced to this application."""
        return self.errors.raise_error(code, message, just_return, **context)

    def instance(self, name: str) -> Any:
        """Get the live instance of a module, or raise MODULE_NOT_FOUND."""
        if name not in self.instances:
            self.raise_error(ERR_MODULE_NOT_FOUND, f"module '{name}' not found", module=name)
        return self.instances[name]

    # -- lifecycle ----------------------------------------------------------

    def require(
        self, names: Sequence[str] | None = None, conf: Mapping[str, Any] | None = None
    ) -> None:
        """
        Resolve module classes.

        Names missing from the configuration are registered on the fly: they
        get `conf` (an empty dict by default) as configuration and are
        appended to the module list.

        Raises:
            ModuleResolutionError: If a module cannot be found or loaded
        """
        self.lifecycle.move_to(LifecycleState.REQUIRING, "require")
        for name in _names_arg(names, self.modules):
            if name == MAIN_APP_NAME:
                raise ConfigurationError(f"'{MAIN_APP_NAME}' is reserved")
            self._check_name(name)
            if name not in self.config:
                self.config[name] = dict(conf) if conf is not None else {}
            if name not in self.modules:
                self.modules.append(name)
            self.registry.resolve(name)
            self._lifecycle_lg.trace("module required", extra={"module": name})

    def init(self, names: Sequence[str] | None = None) -> None:
        """
        Instantiate modules as `cls(config[name], app)`.

        Raises:
            LifecycleError: If a module was not required first
            ModuleInitError: If a constructor fails
        """
        self.lifecycle.expect("init", LifecycleState.REQUIRING, LifecycleState.INITIALIZED)
        for name in _names_arg(names, self.modules):
            cls = self.registry.get(name)
            if cls is None:
                raise LifecycleError(f"module '{name}' was not required")
            try:
                self.instances[name] = cls(self.config[name], self)
            except Exception as e:
                self._lifecycle_lg.error(
                    "module init failed", extra={"module": name, "exception": e}
                )
                raise ModuleInitError(name, e) from e
            self._lifecycle_lg.trace("module initialized", extra={"module": name})
        self.lifecycle.move_to(LifecycleState.INITIALIZED, "init")

    def _items(self, names: list[str]) -> list[tuple[str, Any]]:
        items = []
        for name in names:
            if name not in self.instances:
                raise LifecycleError(f"module '{name}' was not initialized")
            items.append((name, self.instances[name]))
        return items

    async def start(self, names: Sequence[str] | None = None) -> list[Any]:
        """
        Start modules concurrently; all must succeed.

        Without names this starts the whole application and installs the
        bound shutdown coordinator, if any.

        Returns:
            Results of the start calls, in module order

        Raises:
            ModuleStartError: If any module fails to start
        """
        if names is not None:
            self.lifecycle.expect("start modules", *_RUNNING_STATES)
            return await start_all(self._items(_names_arg(names, [])), self.lg)

        self.lifecycle.move_to(LifecycleState.STARTING, "start")
        if self._coordinator is not None and not self._coordinator.installed:
            self._coordinator.install()

        start_t = time.start()
        try:
            results = await start_all(self._items(self.modules), self._lifecycle_lg)
        except BaseException:
            self.lifecycle.move_to(LifecycleState.FAILED, "start")
            raise
        self.lifecycle.move_to(LifecycleState.STARTED, "start")
        self._lifecycle_lg.info(
            "modules started",
            extra={"after": time.since(start_t), "modules": len(self.modules)},
        )
        return results

    async def stop(self, names: Sequence[str] | None = None) -> StopResult:
        """
        Stop modules concurrently and wait for all of them to settle.

        Without names this stops the whole application; the shutdown
        coordinator is unbound first so further signals are not handled.

        Returns:
            StopResult with one Outcome per module, in module order
        """
        if names is not None:
            self.lifecycle.expect("stop modules", *_RUNNING_STATES)
            return await stop_all(
                self._items(_names_arg(names, [])), self.errors, self._lifecycle_lg
            )

        self.lifecycle.move_to(LifecycleState.STOPPING, "stop")
        self.unbind_shutdown()

        start_t = time.start()
        self._lifecycle_lg.debug("stopping modules...", extra={"modules": len(self.modules)})
        result = await stop_all(self._items(self.modules), self.errors, self._lifecycle_lg)
        self.lifecycle.move_to(LifecycleState.STOPPED, "stop")

        log = self._lifecycle_lg.info if result.ok else self._lifecycle_lg.warning
        log(
            "modules stopped",
            extra={
                "after": time.since(start_t),
                "failed": [o.name for o in result.failed],
                "return": result.exit_code,
            },
        )
        return result

    # -- dispatch -----------------------------------------------------------

    def module(self, name: str | Sequence[str], func: str, *params: Any, **kwargs: Any) -> Any:
        """
        Call a function on one module or on a list of modules.

        A single name is strict: a missing function raises
        MODULE_FUNCTION_NOT_FOUND. A list is best-effort: modules without the
        function are skipped. Unknown module names always raise
        MODULE_NOT_FOUND.

        Args:
            name: Module name, or sequence of module names
            func: Name of the function to call
            *params, **kwargs: Passed to the function

        Returns:
            The single result, or a list of results for a sequence of names
        """
        if not isinstance(func, str):
            raise TypeError("func must be a string")

        batch = not isinstance(name, str)
        names = list(name) if batch else [name]

        results = []
        for sec in names:
            if sec not in self.instances:
                self.raise_error(ERR_MODULE_NOT_FOUND, f"module '{sec}' not found", module=sec)
            target = getattr(self.instances[sec], func, None)
            if callable(target):
                results.append(target(*params, **kwargs))
            elif not batch:
                self.raise_error(
                    ERR_MODULE_FUNCTION_NOT_FOUND,
                    f"module '{sec}' has no function '{func}'",
                    module=sec,
                    function=func,
                )
        return results if batch else results[0]

    # -- cli & shutdown -----------------------------------------------------

    def configure_cli(self, parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
        """
        Describe the application on parser and let modules add their options.

        Every module exposing `set_cli(parser)` is called with parser.
        """
        year = datetime.date.today().year
        parser.prog = self.name
        parser.description = self.app_config.get("description")
        author = self.app_config.get("author")
        if author:
            parser.epilog = f"Copyright {year} {author}"
        parser.add_argument(
            "-v", "--verbose", action="count", default=0, help="increase verbosity"
        )
        parser.add_argument(
            "-f", "--force", action="store_true", help="force the command execution"
        )
        self.module(self.modules, "set_cli", parser)
        return parser

    def bind_shutdown(self, coordinator: ShutdownCoordinator) -> None:
        """Use coordinator for signal handling; installed by start()."""
        self._coordinator = coordinator

    def unbind_shutdown(self) -> None:
        if self._coordinator is not None:
            self._coordinator.uninstall()

    async def wait_for_shutdown(self) -> int:
        """
        Wait until the bound coordinator receives a shutdown signal.

        Returns:
            The signal number
        """
        if self._coordinator is None:
            raise LifecycleError("no shutdown coordinator bound")
        return await self._coordinator.wait()

    # -- entry points -------------------------------------------------------

    @classmethod
    def _prepare(
        cls,
        srcdir: str | os.PathLike[str],
        conf: Mapping[str, Any] | None,
        argv: Sequence[str] | None,
        lg: Logger | None,
    ) -> Application:
        """Build, require and init an application and parse its arguments."""
        if conf is None:
            conf = get_config_from_pkg(srcdir)

        app = cls(conf, srcdir, lg=lg)
        app.require()
        app.init()

        parser = app.configure_cli(argparse.ArgumentParser())
        app.args = parser.parse_args(list(argv) if argv is not None else [])
        return app

    @classmethod
    async def main(
        cls,
        srcdir: str | os.PathLike[str],
        conf: Mapping[str, Any] | None = None,
        argv: Sequence[str] | None = None,
        lg: Logger | None = None,
        handle_signals: bool = True,
    ) -> Application:
        """
        Build and start an application.

        Args:
            srcdir: Directory module files are loaded from
            conf: Configuration map; read from the nearest pyproject.toml
                  at or above srcdir when omitted
            argv: Arguments parsed with the parser built by configure_cli
            lg: Root logger
            handle_signals: Bind a ShutdownCoordinator for SIGINT/SIGTERM

        Returns:
            The started application
        """
        app = cls._prepare(srcdir, conf, argv, lg)
        if handle_signals:
            app.bind_shutdown(ShutdownCoordinator(app._lifecycle_lg))
        try:
            await app.start()
        except BaseException:
            app.unbind_shutdown()
            raise
        return app

    @classmethod
    async def run(
        cls,
        srcdir: str | os.PathLike[str],
        conf: Mapping[str, Any] | None = None,
        argv: Sequence[str] | None = None,
        lg: Logger | None = None,
    ) -> int:
        """
        Start the application, wait for SIGINT/SIGTERM, then stop it.

        A signal received while modules are still starting cancels the
        pending starts and goes straight to the stop.

        Returns:
            Exit code: 0 if every module stopped cleanly, 1 otherwise

        Raises:
            ModuleStartError: If a module fails to start before any signal
        """
        app = cls._prepare(srcdir, conf, argv, lg)
        coordinator = ShutdownCoordinator(app._lifecycle_lg)
        app.bind_shutdown(coordinator)

        starting = asyncio.ensure_future(app.start())
        signalled = asyncio.ensure_future(coordinator.wait())
        try:
            await asyncio.wait({starting, signalled}, return_when=asyncio.FIRST_COMPLETED)
            if not signalled.done():
                starting.result()
                await signalled
            elif not starting.done():
                app._lifecycle_lg.info("shutdown requested while starting")
                starting.cancel()
            await asyncio.gather(starting, return_exceptions=True)
        except BaseException:
            starting.cancel()
            signalled.cancel()
            app.unbind_shutdown()
            raise

        result = await app.stop()
        return result.exit_code
