"""Visibility enforcer -- periodic reconciliation keeping the panel shown."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from peekbar.core.geometry import covers_monitor
from peekbar.core.scheduler import (
    SOURCE_CONTINUE,
    SOURCE_REMOVE,
    Priority,
    clear_source,
)
from peekbar.log import get_logger

if TYPE_CHECKING:
    from peekbar.core.host import Panel, Shell
    from peekbar.core.scheduler import Scheduler

log = get_logger(name="enforcer")

ENFORCE_INTERVAL_MS = 1000


class VisibilityEnforcer:
    """Forces the panel visible over a focused fullscreen window.

    Idempotent check-and-correct on a low-priority timer, so any other code
    path that hid the panel is undone within one period while enforcement
    is on. Each enforcing tick also raises the panel above the window.
    When the flag is off the tick does nothing but reschedule.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        shell: Shell,
        panel: Panel,
        is_enforced: Callable[[], bool],
        interval_ms: int = ENFORCE_INTERVAL_MS,
    ) -> None:
        self._scheduler = scheduler
        self._shell = shell
        self._panel = panel
        self._is_enforced = is_enforced
        self.interval_ms = interval_ms
        self._timer_id: int = 0

    @property
    def running(self) -> bool:
        return self._timer_id != 0

    def start(self) -> None:
        if self._timer_id:
            return
        self._timer_id = self._scheduler.timeout_add(
            self.interval_ms, self.reconcile, Priority.LOW
        )

    def stop(self) -> None:
        self._timer_id = clear_source(self._scheduler, self._timer_id)

    def reconcile(self) -> bool:
        """One tick of the loop; reschedules for as long as the enforcer runs."""
        if not self._timer_id:
            return SOURCE_REMOVE
        if not self._is_enforced():
            return SOURCE_CONTINUE

        if covers_monitor(self._shell.focused_window(), self._shell.primary_monitor()):
            if not self._panel.visible:
                log.debug("fullscreen focus with panel hidden, showing it")
            self._panel.visible = True
            # a visible dock can still be stacked below the fullscreen window
            self._panel.raise_top()
        return SOURCE_CONTINUE
