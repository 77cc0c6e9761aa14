"""Top panel window -- GTK window with X11 dock hints, struts and status menus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, NamedTuple

import cairo
import gi

gi.require_version("Gtk", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, GdkX11, Gtk  # noqa: E402

from peekbar.core.host import Panel
from peekbar.log import get_logger
from peekbar.platform.struts import clear_struts, set_panel_struts

_log = get_logger("panel_window")

if TYPE_CHECKING:
    from peekbar.core.config import Config

# Panel background, RGBA 0.0-1.0
BACKGROUND_RGBA = (0.0, 0.0, 0.0, 0.85)
OPACITY_MAX = 255


class Geometry(NamedTuple):
    """Window placement with named x, y, w, h fields."""

    x: int
    y: int
    w: int
    h: int


def compute_panel_geometry(monitor_geom: Gdk.Rectangle, height: int) -> Geometry:
    """Full monitor width, `height` tall, flush with the monitor's top edge."""
    return Geometry(monitor_geom.x, monitor_geom.y, monitor_geom.width, height)


class StatusItem:
    """A status-area menu button; `is_open` while its menu is shown."""

    def __init__(self, button: Gtk.MenuButton) -> None:
        self.button = button

    @property
    def is_open(self) -> bool:
        return bool(self.button.get_active())


class TopPanelWindow(Gtk.Window):
    """Panel window spanning the top of the primary monitor."""

    def __init__(self, config: Config) -> None:
        super().__init__(type=Gtk.WindowType.TOPLEVEL)
        self.config = config
        self.status_items: list[StatusItem] = []
        self._struts_set = False

        self._setup_window()
        self._box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
        self.add(self._box)
        self._add_session_menu()

    def _setup_window(self) -> None:
        """Configure the window as an undecorated, always-on-top X11 dock."""
        self.set_title("Peekbar")
        self.set_decorated(False)
        self.set_skip_taskbar_hint(True)
        self.set_skip_pager_hint(True)
        self.stick()
        self.set_keep_above(True)
        self.set_type_hint(Gdk.WindowTypeHint.DOCK)
        self.set_app_paintable(True)
        self.set_resizable(False)

        # Enable RGBA visual for transparency
        screen = self.get_screen()
        visual = screen.get_rgba_visual() or screen.get_system_visual()
        self.set_visual(visual)

        self.add_events(Gdk.EventMask.BUTTON_PRESS_MASK)
        self.connect("realize", self._on_realize)
        self.connect("draw", self._on_draw)
        self.connect("destroy", Gtk.main_quit)

    def _add_session_menu(self) -> None:
        menu = Gtk.Menu()
        quit_item = Gtk.MenuItem(label="Quit")
        quit_item.connect("activate", lambda _item: Gtk.main_quit())
        menu.append(quit_item)
        menu.show_all()
        self.add_status_item("Session", menu)

    def add_status_item(self, label: str, menu: Gtk.Menu) -> StatusItem:
        """Append a menu button to the panel's status area."""
        button = Gtk.MenuButton(label=label)
        button.set_popup(menu)
        button.set_relief(Gtk.ReliefStyle.NONE)
        self._box.pack_end(button, False, False, 0)
        item = StatusItem(button)
        self.status_items.append(item)
        return item

    def _monitor_geometry(self) -> Gdk.Rectangle:
        display = self.get_display()
        monitor = display.get_primary_monitor() or display.get_monitor(0)
        return monitor.get_geometry()

    def _on_realize(self, _widget: Gtk.Widget) -> None:
        geom = compute_panel_geometry(self._monitor_geometry(), self.config.panel_height)
        self.set_size_request(geom.w, geom.h)
        self.resize(geom.w, geom.h)
        self.move(geom.x, geom.y)
        self.update_struts(reserve=True)

    def _on_draw(self, _widget: Gtk.Widget, cr: cairo.Context) -> bool:
        cr.set_operator(cairo.OPERATOR_SOURCE)
        cr.set_source_rgba(*BACKGROUND_RGBA)
        cr.paint()
        cr.set_operator(cairo.OPERATOR_OVER)
        return False  # let the child widgets draw on top

    def update_struts(self, reserve: bool) -> None:
        """Reserve the top band while shown; release it while hidden."""
        gdk_window = self.get_window()
        if not gdk_window or not isinstance(gdk_window, GdkX11.X11Window):
            return
        if reserve:
            set_panel_struts(gdk_window, self.config.panel_height, self._monitor_geometry())
        elif self._struts_set:
            clear_struts(gdk_window)
        self._struts_set = reserve


class GtkPanel(Panel):
    """Panel interface over a TopPanelWindow."""

    def __init__(self, window: TopPanelWindow, config: Config) -> None:
        self._window = window
        self._config = config
        self._opacity = OPACITY_MAX

    @property
    def visible(self) -> bool:
        return bool(self._window.get_visible())

    @visible.setter
    def visible(self, value: bool) -> None:
        if value == self.visible:
            return
        _log.debug("panel visible -> %s", value)
        if value:
            self._window.show_all()
        else:
            self._window.hide()
        self._window.update_struts(reserve=value)

    @property
    def opacity(self) -> int:
        return self._opacity

    @opacity.setter
    def opacity(self, value: int) -> None:
        self._opacity = max(0, min(OPACITY_MAX, int(value)))
        self._window.set_opacity(self._opacity / OPACITY_MAX)

    @property
    def height(self) -> int:
        allocated = self._window.get_allocated_height()
        return allocated if allocated > 1 else self._config.panel_height

    def raise_top(self) -> None:
        gdk_window = self._window.get_window()
        if gdk_window is not None:
            gdk_window.raise_()

    def status_items(self) -> list[StatusItem]:
        return list(self._window.status_items)

    def connect_button_press(self, handler: Callable[[int], bool]) -> int:
        return self._window.connect(
            "button-press-event", lambda _widget, event: handler(event.button)
        )

    def disconnect(self, handler_id: int) -> None:
        self._window.disconnect(handler_id)
