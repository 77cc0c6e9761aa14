"""Window-manager state via Gdk (monitors, pointer) and libwnck (windows)."""

from __future__ import annotations

from typing import Any, Callable

import gi

gi.require_version("Wnck", "3.0")
gi.require_version("Gdk", "3.0")
gi.require_version("Gtk", "3.0")
from gi.repository import Gdk, Wnck  # noqa: E402

from peekbar.core.geometry import FocusedWindow, Monitor, WindowType
from peekbar.core.host import Shell
from peekbar.log import get_logger

log = get_logger(name="gdk_shell")


def _window_type(wnck_type: Any) -> WindowType:
    """Map a Wnck.WindowType to the core enum."""
    mapping = {
        Wnck.WindowType.NORMAL: WindowType.NORMAL,
        Wnck.WindowType.DIALOG: WindowType.DIALOG,
        Wnck.WindowType.DOCK: WindowType.DOCK,
        Wnck.WindowType.DESKTOP: WindowType.DESKTOP,
    }
    return mapping.get(wnck_type, WindowType.OTHER)


def monitor_index(display: Gdk.Display, monitor: Gdk.Monitor) -> int:
    """Position of `monitor` in the display's monitor list (0 if not found)."""
    for i in range(display.get_n_monitors()):
        if display.get_monitor(i) == monitor:
            return i
    return 0


class GdkShell(Shell):
    """Answers the core's host queries for an X11 session."""

    def __init__(self, display: Gdk.Display | None = None) -> None:
        self._display = display or Gdk.Display.get_default()
        self._wnck: Wnck.Screen | None = None
        # handler id -> object it was connected on
        self._handlers: dict[int, Any] = {}

    def _screen(self) -> Wnck.Screen | None:
        if self._wnck is None:
            self._wnck = Wnck.Screen.get_default()
            if self._wnck is None:
                log.debug("no Wnck screen available")
                return None
            self._wnck.force_update()
        return self._wnck

    def primary_monitor(self) -> Monitor | None:
        if self._display is None:
            return None
        gdk_monitor = self._display.get_primary_monitor() or self._display.get_monitor(0)
        if gdk_monitor is None:
            return None
        geom = gdk_monitor.get_geometry()
        return Monitor(
            x=geom.x,
            y=geom.y,
            width=geom.width,
            height=geom.height,
            index=monitor_index(self._display, gdk_monitor),
        )

    def _scale(self) -> int:
        """Device pixels per logical pixel; X11 applies one factor to every monitor."""
        gdk_monitor = self._display.get_primary_monitor() or self._display.get_monitor(0)
        if gdk_monitor is None:
            return 1
        return max(1, gdk_monitor.get_scale_factor())

    def _logical(self, window: Wnck.Window) -> tuple[int, int, int, int]:
        """Wnck geometry in device pixels, converted to Gdk logical pixels."""
        scale = self._scale()
        return tuple(v // scale for v in window.get_geometry())

    def _monitor_of(self, x: int, y: int, width: int, height: int) -> int:
        """Index of the monitor holding the centre of a logical-pixel rectangle."""
        gdk_monitor = self._display.get_monitor_at_point(x + width // 2, y + height // 2)
        return monitor_index(self._display, gdk_monitor)

    def monitor_in_fullscreen(self, monitor: Monitor) -> bool:
        screen = self._screen()
        if screen is None or self._display is None:
            return False
        for window in screen.get_windows():
            if not window.is_fullscreen() or window.is_minimized():
                continue
            if self._monitor_of(*self._logical(window)) == monitor.index:
                return True
        return False

    def focused_window(self) -> FocusedWindow | None:
        screen = self._screen()
        if screen is None or self._display is None:
            return None
        active = screen.get_active_window()
        if active is None:
            return None
        x, y, width, height = self._logical(active)
        return FocusedWindow(
            window_type=_window_type(active.get_window_type()),
            monitor_index=self._monitor_of(x, y, width, height),
            x=x,
            y=y,
            width=width,
            height=height,
            fullscreen=bool(active.is_fullscreen()),
        )

    def pointer_position(self) -> tuple[int, int]:
        if self._display is None:
            return (0, 0)
        seat = self._display.get_default_seat()
        pointer = seat.get_pointer() if seat else None
        if pointer is None:
            return (0, 0)
        _screen, x, y = pointer.get_position()
        return (x, y)

    def in_overview(self) -> bool:
        """Showing-desktop mode stands in for the shell overview."""
        screen = self._screen()
        return bool(screen and screen.get_showing_desktop())

    def connect_monitors_changed(self, handler: Callable[[], None]) -> int:
        return self._connect(Gdk.Screen.get_default(), "monitors-changed", handler)

    def connect_focus_changed(self, handler: Callable[[], None]) -> int:
        """Notify when the active window changes."""
        return self._connect(self._screen(), "active-window-changed", handler)

    def _connect(self, emitter: Any, signal_name: str, handler: Callable[[], None]) -> int:
        if emitter is None:
            return 0
        handler_id = emitter.connect(signal_name, lambda *_args: handler())
        self._handlers[handler_id] = emitter
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        emitter = self._handlers.pop(handler_id, None)
        if emitter is not None:
            emitter.disconnect(handler_id)
