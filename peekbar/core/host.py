"""Collaborator interfaces the core expects the host shell to provide."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, NamedTuple

from peekbar.core.geometry import Direction, FocusedWindow, Monitor, Rect

# Input button codes
BUTTON_PRIMARY = 1
BUTTON_MIDDLE = 2
BUTTON_SECONDARY = 3


class BarrierEvent(NamedTuple):
    """One pointer contact with a barrier line.

    dx/dy are the pointer motion (or attempted motion) of this contact;
    for a horizontal line dy is the push across it and dx the slide along it.
    """

    time_ms: int
    dx: float
    dy: float


class NativeBarrier(ABC):
    """Host-side boundary line reporting hits until destroyed."""

    @abstractmethod
    def destroy(self) -> None:
        """Release the boundary and stop delivering events."""


class BarrierBackend(ABC):
    """Creates native boundary lines on the host."""

    @abstractmethod
    def create_barrier(
        self,
        rect: Rect,
        direction: Direction,
        on_hit: Callable[[BarrierEvent], None],
        on_left: Callable[[], None],
    ) -> NativeBarrier:
        """Install a boundary; `on_hit` per contact, `on_left` when released."""


class Panel(ABC):
    """The top panel whose visibility is being controlled."""

    visible: bool
    # 0 (transparent) .. 255 (opaque)
    opacity: int

    @property
    @abstractmethod
    def height(self) -> int:
        """Current panel thickness in pixels."""

    @abstractmethod
    def raise_top(self) -> None:
        """Stack the panel above other windows."""

    @abstractmethod
    def status_items(self) -> Iterable[Any]:
        """Status area items; those with a menu expose a boolean `is_open`."""

    @abstractmethod
    def connect_button_press(self, handler: Callable[[int], bool]) -> int:
        """Deliver button presses as `handler(button)`; True stops propagation."""

    @abstractmethod
    def disconnect(self, handler_id: int) -> None:
        """Drop a subscription made through connect_button_press."""


class Shell(ABC):
    """Window-manager state queries and monitor-layout notifications."""

    @abstractmethod
    def primary_monitor(self) -> Monitor | None: ...

    @abstractmethod
    def monitor_in_fullscreen(self, monitor: Monitor) -> bool:
        """True when a fullscreen window occupies the monitor."""

    @abstractmethod
    def focused_window(self) -> FocusedWindow | None: ...

    @abstractmethod
    def pointer_position(self) -> tuple[int, int]:
        """Current pointer (x, y) in logical screen coordinates."""

    @abstractmethod
    def in_overview(self) -> bool: ...

    @abstractmethod
    def connect_monitors_changed(self, handler: Callable[[], None]) -> int: ...

    @abstractmethod
    def disconnect(self, handler_id: int) -> None: ...


def any_menu_open(panel: Panel) -> bool:
    """True when any status item with a menu currently has it open."""
    return any(bool(getattr(item, "is_open", False)) for item in panel.status_items())
