"""Application entry point -- bootstraps the panel and runs the GTK main loop."""

from __future__ import annotations

import faulthandler
import signal

# Print Python traceback on SIGSEGV/SIGABRT/SIGFPE to stderr.
# Also dumps on SIGUSR1 for on-demand debugging (kill -USR1 <pid>).
faulthandler.enable()
faulthandler.register(signal.SIGUSR1)

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import GLib, Gtk  # noqa: E402

from peekbar.core.config import Config
from peekbar.core.host import any_menu_open
from peekbar.core.hot_edge import EdgeState
from peekbar.core.service import PanelVisibilityService
from peekbar.log import get_logger
from peekbar.platform.gdk_shell import GdkShell
from peekbar.platform.glib_scheduler import GLibScheduler
from peekbar.platform.pointer_barrier import SampledBarrierBackend
from peekbar.ui.panel_window import GtkPanel, TopPanelWindow

log = get_logger(name="app")


def main() -> None:
    """Entry point for the peekbar application."""
    config = Config.from_env()
    scheduler = GLibScheduler()
    shell = GdkShell()
    window = TopPanelWindow(config)
    panel = GtkPanel(window, config)
    backend = SampledBarrierBackend(
        scheduler, shell.pointer_position, sample_ms=config.barrier_sample_ms
    )
    service = PanelVisibilityService(shell, panel, scheduler, backend, config)

    # Graceful shutdown on SIGINT/SIGTERM
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGINT, _quit)
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGTERM, _quit)

    focus_handler = shell.connect_focus_changed(
        lambda: sync_with_focus(shell, panel, service)
    )

    window.show_all()
    service.enable()
    sync_with_focus(shell, panel, service)
    Gtk.main()

    service.disable()
    shell.disconnect(focus_handler)
    if scheduler.live_sources:
        log.warning("%d timers still live after disable", scheduler.live_sources)


def sync_with_focus(
    shell: GdkShell, panel: GtkPanel, service: PanelVisibilityService
) -> None:
    """Follow the active window: shown over normal windows, hidden over fullscreen."""
    restore_when_windowed(shell, panel)
    hide_when_fullscreen(panel, service)


def restore_when_windowed(shell: GdkShell, panel: GtkPanel) -> None:
    """Show the panel again once the primary monitor has no fullscreen window."""
    monitor = shell.primary_monitor()
    if monitor is not None and not shell.monitor_in_fullscreen(monitor):
        panel.visible = True


def hide_when_fullscreen(panel: GtkPanel, service: PanelVisibilityService) -> None:
    """Hide the panel under a fullscreen focused window unless it is enforced.

    A hot edge reveal in progress or an open panel menu keeps it shown.
    """
    if service.enforce_visible or not service.focus_is_fullscreen():
        return
    hot_edge = service.hot_edge
    if hot_edge is not None and hot_edge.state == EdgeState.TRIGGERED:
        return
    if any_menu_open(panel):
        return
    panel.visible = False


def _quit() -> bool:
    Gtk.main_quit()
    return False


if __name__ == "__main__":
    main()
