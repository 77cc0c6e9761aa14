"""Leave watcher -- polls the pointer until it exits the revealed zone."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from peekbar.core.geometry import Direction
from peekbar.core.scheduler import SOURCE_CONTINUE, SOURCE_REMOVE, clear_source
from peekbar.log import get_logger

if TYPE_CHECKING:
    from peekbar.core.geometry import Rect
    from peekbar.core.scheduler import Scheduler

log = get_logger(name="leave")

LEAVE_POLL_MS = 400


def is_out_of_bounds(rect: Rect, direction: Direction, pointer_y: float) -> bool:
    """Direction-specific test against the rectangle's near edge."""
    if direction == Direction.FROM_TOP:
        return rect.y1 < pointer_y
    return rect.y1 > pointer_y


class LeaveWatcher:
    """Fires `on_leave` once when the pointer is out of bounds and allowed.

    The condition is consulted on every tick, so a caller can hold the
    panel open (e.g. while a menu is open) without restarting the watch.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        pointer: Callable[[], tuple[int, int]],
        interval_ms: int = LEAVE_POLL_MS,
    ) -> None:
        self._scheduler = scheduler
        self._pointer = pointer
        self.interval_ms = interval_ms
        self._source_id: int = 0
        self._alive = False
        self._rect: Rect | None = None
        self._direction = Direction.FROM_TOP
        self._on_leave: Callable[[], None] | None = None
        self._condition: Callable[[], bool] | None = None

    @property
    def active(self) -> bool:
        return self._alive

    def activate(
        self,
        position: Rect,
        direction: Direction,
        on_leave: Callable[[], None],
        condition: Callable[[], bool] | None = None,
    ) -> None:
        """Start polling; any earlier watch on this instance is cancelled."""
        self.dispose()
        self._rect = position
        self._direction = direction
        self._on_leave = on_leave
        self._condition = condition
        self._alive = True
        self._source_id = self._scheduler.timeout_add(self.interval_ms, self._tick)

    def dispose(self) -> None:
        """Cancel the poll. Idempotent."""
        self._alive = False
        self._source_id = clear_source(self._scheduler, self._source_id)

    def _tick(self) -> bool:
        if not self._alive or self._rect is None:
            return SOURCE_REMOVE

        _x, y = self._pointer()
        if not is_out_of_bounds(self._rect, self._direction, y):
            return SOURCE_CONTINUE
        if self._condition is not None and not self._condition():
            log.debug("pointer out at y=%s but leave is held", y)
            return SOURCE_CONTINUE

        # The source ends with this return; drop the id first so a dispose()
        # from inside on_leave does not remove it a second time.
        self._alive = False
        self._source_id = 0
        log.debug("pointer left at y=%s", y)
        if self._on_leave is not None:
            self._on_leave()
        return SOURCE_REMOVE
