"""Timer scheduling interface used by every timed component in the core."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Callable

# Callback return values, matching GLib.SOURCE_CONTINUE / GLib.SOURCE_REMOVE
SOURCE_CONTINUE = True
SOURCE_REMOVE = False


class Priority(enum.IntEnum):
    """Priority tiers; values match the GLib constants of the same name."""

    HIGH = -100
    DEFAULT = 0
    LOW = 300


class Scheduler(ABC):
    """Registers repeating or one-shot callbacks on the host event loop.

    A callback returning SOURCE_CONTINUE is invoked again after the same
    interval; returning SOURCE_REMOVE drops the source. Ids are positive
    and never reused while the source is alive.
    """

    @abstractmethod
    def timeout_add(
        self,
        interval_ms: int,
        callback: Callable[[], bool],
        priority: Priority = Priority.DEFAULT,
    ) -> int:
        """Schedule `callback` every `interval_ms` and return its source id."""

    @abstractmethod
    def source_remove(self, source_id: int) -> None:
        """Cancel a source. Unknown or already-removed ids are ignored."""

    def once(
        self,
        delay_ms: int,
        callback: Callable[[], None],
        priority: Priority = Priority.DEFAULT,
    ) -> int:
        """Schedule `callback` to run a single time after `delay_ms`."""

        def fire() -> bool:
            callback()
            return SOURCE_REMOVE

        return self.timeout_add(delay_ms, fire, priority)


def clear_source(scheduler: Scheduler, source_id: int) -> int:
    """Remove a source if the id is set and return the zero id."""
    if source_id > 0:
        scheduler.source_remove(source_id)
    return 0
