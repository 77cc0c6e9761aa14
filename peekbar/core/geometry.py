"""Screen geometry types and the fullscreen coverage test."""

from __future__ import annotations

import enum
from typing import NamedTuple


class Rect(NamedTuple):
    """Monitored screen region; a horizontal line when y1 == y2."""

    x1: int
    x2: int
    y1: int
    y2: int


class Monitor(NamedTuple):
    """Monitor geometry in logical pixels plus its index in the display."""

    x: int
    y: int
    width: int
    height: int
    index: int


class Direction(enum.Enum):
    """Which side of a boundary line counts as outside.

    FROM_BOTTOM: the pointer arrives from below (pushing up against a top edge).
    FROM_TOP: the pointer is inside above the line and leaves downward.
    """

    FROM_TOP = "from-top"
    FROM_BOTTOM = "from-bottom"


class WindowType(enum.Enum):
    NORMAL = "normal"
    DIALOG = "dialog"
    DOCK = "dock"
    DESKTOP = "desktop"
    OTHER = "other"


class FocusedWindow(NamedTuple):
    """Snapshot of the focused window's type, placement and frame."""

    window_type: WindowType
    monitor_index: int
    x: int
    y: int
    width: int
    height: int
    fullscreen: bool = False


def covers_monitor(window: FocusedWindow | None, monitor: Monitor | None) -> bool:
    """True when a normal window on the monitor fills at least its bounds."""
    if window is None or monitor is None:
        return False
    return (
        window.window_type == WindowType.NORMAL
        and window.monitor_index == monitor.index
        and window.width >= monitor.width
        and window.height >= monitor.height
    )


def top_edge_line(monitor: Monitor) -> Rect:
    """Barrier line one pixel below the top of the monitor, full width."""
    return Rect(
        x1=monitor.x,
        x2=monitor.x + monitor.width,
        y1=monitor.y + 1,
        y2=monitor.y + 1,
    )


def leave_line(monitor: Monitor, offset: int) -> Rect:
    """Line `offset` pixels below the top of the monitor, full width."""
    return Rect(
        x1=monitor.x,
        x2=monitor.x + monitor.width,
        y1=monitor.y + offset,
        y2=monitor.y + offset,
    )
