"""
Shutdown coordination for process signals.

ShutdownCoordinator binds SIGINT and SIGTERM to the running event loop.
The first signal unbinds the handlers again, so repeated signals during
shutdown do not re-trigger it, and wakes whoever awaits `wait()`. Only one
coordinator can be installed per process at a time.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, ClassVar

from ..errors import LifecycleError

if TYPE_CHECKING:
    from ...log import Logger


class ShutdownCoordinator:
    """
    Turns the first SIGINT/SIGTERM into a single awaited shutdown request.

    Usage:
        coordinator = ShutdownCoordinator(lg)
        coordinator.install()
        signum = await coordinator.wait()
        result = await app.stop()
    """

    SIGNALS: ClassVar[tuple[signal.Signals, ...]] = (signal.SIGINT, signal.SIGTERM)

    _active: ClassVar[ShutdownCoordinator | None] = None

    def __init__(self, lg: Logger | None = None) -> None:
        self._lg = lg
        self._loop: asyncio.AbstractEventLoop | None = None
        self._event: asyncio.Event | None = None
        self._signum: int | None = None
        self._installed = False

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """
        Bind the shutdown signals to loop (default: the running loop).

        Raises:
            LifecycleError: If a coordinator is already installed
        """
        if ShutdownCoordinator._active is not None:
            raise LifecycleError("a shutdown coordinator is already installed")

        self._loop = loop or asyncio.get_running_loop()
        if self._event is None:
            self._event = asyncio.Event()
        for sig in self.SIGNALS:
            self._loop.add_signal_handler(sig, self._handle_signal, sig)

        self._installed = True
        ShutdownCoordinator._active = self
        if self._lg is not None:
            self._lg.trace("signal handlers installed")

    def uninstall(self) -> bool:
        """
        Unbind the signal handlers. Safe to call repeatedly.

        Returns:
            True if handlers were removed by this call
        """
        if not self._installed:
            return False

        assert self._loop is not None
        for sig in self.SIGNALS:
            self._loop.remove_signal_handler(sig)

        self._installed = False
        if ShutdownCoordinator._active is self:
            ShutdownCoordinator._active = None
        if self._lg is not None:
            self._lg.trace("signal handlers removed")
        return True

    def _handle_signal(self, signum: int) -> None:
        if self._signum is not None:
            return  # Ignore duplicate signals

        self._signum = signum
        self.uninstall()
        if self._lg is not None:
            self._lg.info(
                "shutdown requested", extra={"signal": signal.Signals(signum).name}
            )
        assert self._event is not None
        self._event.set()

    def request_shutdown(self, signum: int = signal.SIGTERM) -> None:
        """Trigger shutdown as if signum had been received."""
        if self._event is None:
            self._event = asyncio.Event()
        self._handle_signal(signum)

    async def wait(self) -> int:
        """
        Wait for the shutdown request.

        Returns:
            The signal number that triggered it
        """
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()
        assert self._signum is not None
        return self._signum

    @property
    def installed(self) -> bool:
        return self._installed
