"""
Concurrent fan-out over module instances.

start_all is a fail-fast join: the first failing start cancels the starts
still pending and aborts. stop_all is a settle-all join: every stop runs to
an outcome, each bounded by its own timeout, and nothing short-circuits.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ... import time
from ..constants import (
    DEFAULT_STOP_TIMEOUT_MS,
    ERR_INVALID_STOP_TIMEOUT,
    ERR_STOP_TIMED_OUT,
)
from ..errors import ModuleStartError

if TYPE_CHECKING:
    from ...log import Logger
    from ..reporter import ErrorReporter

FULFILLED = "fulfilled"
REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome:
    """Final state of one module's stop."""

    name: str
    status: str
    value: Any = None
    error: BaseException | None = None
    skipped: bool = False  # module had no stop capability

    @property
    def ok(self) -> bool:
        return self.status == FULFILLED

    @classmethod
    def fulfilled(cls, name: str, value: Any = None, skipped: bool = False) -> Outcome:
        return cls(name, FULFILLED, value=value, skipped=skipped)

    @classmethod
    def rejected(cls, name: str, error: BaseException) -> Outcome:
        return cls(name, REJECTED, error=error)


@dataclass(frozen=True)
class StopResult(Sequence):
    """Ordered stop outcomes, one per module, in input order."""

    outcomes: tuple[Outcome, ...] = field(default_factory=tuple)

    def __getitem__(self, index: Any) -> Any:
        return self.outcomes[index]

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.outcomes)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def failed(self) -> list[Outcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def exit_code(self) -> int:
        """0 if every module stopped cleanly, 1 otherwise."""
        return 0 if self.ok else 1


def stop_timeout_ms(instance: Any) -> float:
    """Per-module stop timeout, falling back to the default."""
    timeout = getattr(instance, "stop_timeout_ms", None)
    if timeout is None:
        return DEFAULT_STOP_TIMEOUT_MS
    return timeout


def valid_timeout(timeout: Any) -> bool:
    """True for a non-negative number of milliseconds."""
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        return False
    return timeout >= 0


async def _call(func: Any) -> Any:
    result = func()
    if inspect.isawaitable(result):
        result = await result
    return result


async def _cancel_pending(tasks: Sequence[asyncio.Future]) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


async def start_all(items: Sequence[tuple[str, Any]], lg: Logger) -> list[Any]:
    """
    Start every instance exposing `start`, concurrently.

    Returns:
        Start results in module order (modules without start are left out)

    Raises:
        ModuleStartError: For the first failing module in module order
    """
    tasks: list[tuple[str, asyncio.Task]] = []
    for name, instance in items:
        start = getattr(instance, "start", None)
        if not callable(start):
            continue
        tasks.append((name, asyncio.ensure_future(_call(start))))

    if not tasks:
        return []

    try:
        await asyncio.wait([t for _, t in tasks], return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_pending([t for _, t in tasks])
        raise

    failed = next(
        (
            (name, task)
            for name, task in tasks
            if task.done() and not task.cancelled() and task.exception() is not None
        ),
        None,
    )
    if failed is None:
        return [task.result() for _, task in tasks]

    await _cancel_pending([t for _, t in tasks])

    name, task = failed
    exc = task.exception()
    assert exc is not None
    lg.error("module failed to start", extra={"module": name, "exception": exc})
    raise ModuleStartError(name, exc) from exc


class _StopRace:
    """
    Races one module's stop against a cancellable timer.

    The slot future settles exactly once; whichever of "stop finished" and
    "deadline elapsed" comes second is discarded.
    """

    def __init__(self, name: str, instance: Any, reporter: ErrorReporter, lg: Logger):
        self.name = name
        self.instance = instance
        self.reporter = reporter
        self.lg = lg
        self.timeout_ms = stop_timeout_ms(instance)
        self._timer: asyncio.TimerHandle | None = None
        self._slot: asyncio.Future | None = None

    def _settle(self, value: Any = None, error: BaseException | None = None) -> bool:
        assert self._slot is not None
        if self._slot.done():
            return False
        if error is not None:
            self._slot.set_exception(error)
        else:
            self._slot.set_result(value)
        return True

    def _on_timeout(self) -> None:
        msg = f"Stopping of {self.name} timed out after {self.timeout_ms} ms!"
        er = self.reporter.raise_error(
            ERR_STOP_TIMED_OUT, msg, True, module=self.name, timeout_ms=self.timeout_ms
        )
        if self._settle(error=er):
            self.lg.error(msg, extra={"module": self.name})

    def _on_done(self, task: asyncio.Future) -> None:
        if self._timer is not None:
            self._timer.cancel()

        if task.cancelled():
            error: BaseException | None = RuntimeError(f"stop of {self.name} was cancelled")
            value = None
        else:
            error = task.exception()
            value = None if error is not None else task.result()

        if not self._settle(value, error):
            self.lg.debug(
                "stop finished after timeout, result discarded",
                extra={"module": self.name},
            )
            return

        if error is not None:
            self.lg.error(
                f"{self.name} could not be stopped!",
                extra={"module": self.name, "exception": error},
            )

    async def run(self) -> Outcome:
        stop = getattr(self.instance, "stop", None)
        if not callable(stop):
            return Outcome.fulfilled(self.name, skipped=True)

        if not valid_timeout(self.timeout_ms):
            msg = f"{self.name} has an invalid stop timeout: {self.timeout_ms!r}"
            er = self.reporter.raise_error(
                ERR_INVALID_STOP_TIMEOUT, msg, True, module=self.name
            )
            self.lg.error(msg, extra={"module": self.name})
            return Outcome.rejected(self.name, er)

        loop = asyncio.get_running_loop()
        self._slot = loop.create_future()
        self._timer = loop.call_later(time.ms_to_secs(self.timeout_ms), self._on_timeout)

        task = asyncio.ensure_future(_call(stop))
        task.add_done_callback(self._on_done)

        try:
            value = await self._slot
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Outcome.rejected(self.name, e)
        return Outcome.fulfilled(self.name, value)


async def stop_all(
    items: Sequence[tuple[str, Any]], reporter: ErrorReporter, lg: Logger
) -> StopResult:
    """
    Stop every instance concurrently and wait for all of them to settle.

    Never raises for module failures; each one becomes a rejected Outcome.
    """
    races = [_StopRace(name, instance, reporter, lg) for name, instance in items]
    outcomes = await asyncio.gather(*(race.run() for race in races))
    return StopResult(tuple(outcomes))
