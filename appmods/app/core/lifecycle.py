r"""
Application lifecycle state tracking.

States move forward only:

    constructed -> requiring -> initialized -> starting -> started
                                                        \-> failed
    initialized | started | failed -> stopping -> stopped
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from ... import time
from ..errors import LifecycleError

if TYPE_CHECKING:
    from ...log import Logger


class LifecycleState(enum.Enum):
    CONSTRUCTED = "constructed"
    REQUIRING = "requiring"
    INITIALIZED = "initialized"
    STARTING = "starting"
    STARTED = "started"
    FAILED = "failed"
    STOPPING = "stopping"
    STOPPED = "stopped"


_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.CONSTRUCTED: frozenset({LifecycleState.REQUIRING}),
    LifecycleState.REQUIRING: frozenset(
        {LifecycleState.REQUIRING, LifecycleState.INITIALIZED}
    ),
    LifecycleState.INITIALIZED: frozenset(
        {
            LifecycleState.REQUIRING,
            LifecycleState.INITIALIZED,
            LifecycleState.STARTING,
            LifecycleState.STOPPING,
        }
    ),
    LifecycleState.STARTING: frozenset({LifecycleState.STARTED, LifecycleState.FAILED}),
    LifecycleState.STARTED: frozenset({LifecycleState.STOPPING}),
    LifecycleState.FAILED: frozenset({LifecycleState.STOPPING}),
    LifecycleState.STOPPING: frozenset({LifecycleState.STOPPED}),
    LifecycleState.STOPPED: frozenset(),
}


class Lifecycle:
    """Tracks the application state and rejects out-of-order operations."""

    def __init__(self, lg: Logger | None = None) -> None:
        self._state = LifecycleState.CONSTRUCTED
        self._lg = lg
        self._start_time = time.start()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def uptime(self) -> float:
        """Seconds since construction."""
        return time.since(self._start_time)

    def can_move_to(self, target: LifecycleState) -> bool:
        return target in _TRANSITIONS[self._state]

    def move_to(self, target: LifecycleState, op: str) -> None:
        """
        Move to target state.

        Raises:
            LifecycleError: If target is not reachable from the current state
        """
        if not self.can_move_to(target):
            raise LifecycleError(
                f"cannot {op} while {self._state.value} "
                f"(allowed from: {self._allowed_from(target)})"
            )
        previous, self._state = self._state, target
        if self._lg is not None and previous is not target:
            self._lg.trace(
                "state changed",
                extra={"from": previous.value, "to": target.value, "after": self.uptime},
            )

    def expect(self, op: str, *states: LifecycleState) -> None:
        """
        Check the current state is one of states without moving.

        Raises:
            LifecycleError: If it is not
        """
        if self._state not in states:
            allowed = ", ".join(s.value for s in states)
            raise LifecycleError(
                f"cannot {op} while {self._state.value} (allowed in: {allowed})"
            )

    @staticmethod
    def _allowed_from(target: LifecycleState) -> str:
        sources = [s.value for s, targets in _TRANSITIONS.items() if target in targets]
        return ", ".join(sources) or "nowhere"
