"""GLib-backed scheduler with live-source accounting."""

from __future__ import annotations

from typing import Callable

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import GLib  # noqa: E402

from peekbar.core.scheduler import Priority, Scheduler
from peekbar.log import get_logger

log = get_logger(name="scheduler")


def _source_exists(source_id: int) -> bool:
    """Return True when a GLib source id is still active."""
    if source_id <= 0:
        return False
    try:
        ctx = GLib.MainContext.default()
        return bool(ctx and ctx.find_source_by_id(source_id))
    except Exception as exc:
        log.debug("Could not query GLib source id %s: %s", source_id, exc)
        # If runtime doesn't expose the check, fall back to best effort.
        return True


def glib_priority(priority: Priority) -> int:
    """Map a scheduler priority tier to the GLib constant of the same name."""
    return getattr(GLib, f"PRIORITY_{priority.name}", GLib.PRIORITY_DEFAULT)


class GLibScheduler(Scheduler):
    """Schedules on the default GLib main context.

    Tracks the ids it handed out until they are removed or their callback
    returns False, so `live_sources` tells how many timers are outstanding.
    """

    def __init__(self) -> None:
        self._live: set[int] = set()

    @property
    def live_sources(self) -> int:
        return len(self._live)

    def timeout_add(
        self,
        interval_ms: int,
        callback: Callable[[], bool],
        priority: Priority = Priority.DEFAULT,
    ) -> int:
        source_id = 0

        def dispatch() -> bool:
            keep = bool(callback())
            if not keep:
                self._live.discard(source_id)
            return keep

        source_id = GLib.timeout_add(
            interval_ms, dispatch, priority=glib_priority(priority)
        )
        self._live.add(source_id)
        return source_id

    def source_remove(self, source_id: int) -> None:
        if source_id not in self._live:
            return
        self._live.discard(source_id)
        if _source_exists(source_id=source_id):
            GLib.source_remove(source_id)
