"""Hot edge controller -- reveal/leave state machine for the top panel."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Callable

from peekbar.core.barrier import (
    DEFAULT_PRESSURE_THRESHOLD,
    DEFAULT_PRESSURE_TIMEOUT_MS,
    EdgeBarrier,
    TriggerMode,
)
from peekbar.core.geometry import Direction, leave_line, top_edge_line
from peekbar.core.leave import LEAVE_POLL_MS, LeaveWatcher
from peekbar.log import get_logger

if TYPE_CHECKING:
    from peekbar.core.geometry import Monitor
    from peekbar.core.host import BarrierBackend
    from peekbar.core.scheduler import Scheduler

log = get_logger(name="hot_edge")


class EdgeState(enum.Enum):
    IDLE = "idle"
    TRIGGERED = "triggered"
    DISPOSED = "disposed"


class HotEdgeController:
    """Reveals the panel on top-edge pressure and hides it once the pointer leaves.

    Hot edge state machine:

      ┌──────┐  barrier fires  ┌───────────┐
      │ IDLE │────on_enter────->│ TRIGGERED │
      └──────┘                 └───────────┘
          ^                          │
          └────────on_leave──────────┘
                (pointer below the panel and leave condition true)

      dispose() from either state -> DISPOSED (terminal)

    Entering is precise and debounced (pressure barrier). Leaving is coarse
    and polled, and can be vetoed by the leave condition (open menus,
    overview) without touching the barrier.
    """

    def __init__(
        self,
        monitor: Monitor,
        leave_offset: int,
        trigger_action: Callable[[], None],
        leave_action: Callable[[], None],
        leave_condition: Callable[[], bool],
        *,
        backend: BarrierBackend,
        scheduler: Scheduler,
        pointer: Callable[[], tuple[int, int]],
        poll_ms: int = LEAVE_POLL_MS,
        pressure_threshold: int = DEFAULT_PRESSURE_THRESHOLD,
        pressure_timeout_ms: int = DEFAULT_PRESSURE_TIMEOUT_MS,
    ) -> None:
        self.monitor = monitor
        self.leave_offset = leave_offset
        self._trigger_action = trigger_action
        self._leave_action = leave_action
        self._leave_condition = leave_condition
        self._backend = backend
        self._scheduler = scheduler
        self._pointer = pointer
        self._poll_ms = poll_ms
        self._pressure_threshold = pressure_threshold
        self._pressure_timeout_ms = pressure_timeout_ms

        self.state = EdgeState.IDLE
        self.barrier: EdgeBarrier | None = None
        self.leave_watcher: LeaveWatcher | None = None

    def initialize(self) -> None:
        """Install the delayed-trigger barrier along the top of the monitor."""
        if self.state == EdgeState.DISPOSED or self.barrier is not None:
            return
        self.barrier = EdgeBarrier(
            self._backend,
            top_edge_line(self.monitor),
            Direction.FROM_BOTTOM,
            TriggerMode.DELAYED,
            self.on_enter,
            threshold=self._pressure_threshold,
            timeout_ms=self._pressure_timeout_ms,
        )
        self.barrier.activate()

    def on_enter(self) -> None:
        if self.state != EdgeState.IDLE:
            return
        log.debug("on_enter: monitor=%d", self.monitor.index)
        self.state = EdgeState.TRIGGERED
        self.leave_watcher = LeaveWatcher(
            self._scheduler, self._pointer, interval_ms=self._poll_ms
        )
        self.leave_watcher.activate(
            leave_line(self.monitor, self.leave_offset),
            Direction.FROM_TOP,
            self.on_leave,
            self._leave_condition,
        )
        self._trigger_action()

    def on_leave(self) -> None:
        if self.state != EdgeState.TRIGGERED:
            return
        log.debug("on_leave: monitor=%d", self.monitor.index)
        self.state = EdgeState.IDLE
        self._dispose_leave_watcher()
        self._leave_action()

    def dispose(self) -> None:
        """Tear down barrier and watcher; the controller cannot be reused."""
        if self.barrier is not None:
            self.barrier.dispose()
            self.barrier = None
        self._dispose_leave_watcher()
        self.state = EdgeState.DISPOSED

    def _dispose_leave_watcher(self) -> None:
        if self.leave_watcher is not None:
            self.leave_watcher.dispose()
            self.leave_watcher = None
