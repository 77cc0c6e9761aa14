"""Panel visibility service -- lifecycle, enforcement toggle and hot edge wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from peekbar.core.config import Config
from peekbar.core.enforcer import VisibilityEnforcer
from peekbar.core.geometry import covers_monitor
from peekbar.core.host import BUTTON_SECONDARY, any_menu_open
from peekbar.core.hot_edge import HotEdgeController
from peekbar.log import get_logger

if TYPE_CHECKING:
    from peekbar.core.geometry import Monitor
    from peekbar.core.host import BarrierBackend, Panel, Shell
    from peekbar.core.scheduler import Scheduler

log = get_logger(name="service")

OPACITY_FULL = 255
# Number of flashes signalling the new enforcement state
FLASHES_ENFORCE_ON = 1
FLASHES_ENFORCE_OFF = 2


class PanelVisibilityService:
    """Keeps the top panel hidden over fullscreen windows, with a hot edge.

    Owns the hot edge controller, the enforcement loop, the panel click
    subscription, the monitor-layout subscription and every one-shot timer
    it schedules, so that disable() leaves nothing behind.
    """

    def __init__(
        self,
        shell: Shell,
        panel: Panel,
        scheduler: Scheduler,
        backend: BarrierBackend,
        config: Config | None = None,
    ) -> None:
        self._shell = shell
        self._panel = panel
        self._scheduler = scheduler
        self._backend = backend
        self._config = config or Config()

        self.enforce_visible: bool = self._config.enforce_visible
        self.hot_edge: HotEdgeController | None = None
        self._enforcer = VisibilityEnforcer(
            scheduler,
            shell,
            panel,
            lambda: self.enforce_visible,
            interval_ms=self._config.enforce_interval_ms,
        )
        self._click_handler_id: int = 0
        self._monitors_handler_id: int = 0
        self._pending: set[int] = set()
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending_timers(self) -> int:
        """One-shot timers (hide confirmation, flashes) not yet fired."""
        return len(self._pending)

    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        self._enforcer.start()
        self._click_handler_id = self._panel.connect_button_press(self.on_button_press)
        self._monitors_handler_id = self._shell.connect_monitors_changed(
            self._setup_hot_edge
        )
        self._setup_hot_edge()
        log.debug("enabled (enforce_visible=%s)", self.enforce_visible)

    def disable(self) -> None:
        """Release every timer, subscription and barrier. Safe in any state."""
        self._enforcer.stop()
        if self._click_handler_id:
            self._panel.disconnect(self._click_handler_id)
            self._click_handler_id = 0
        if self._monitors_handler_id:
            self._shell.disconnect(self._monitors_handler_id)
            self._monitors_handler_id = 0
        self._dispose_hot_edge()
        for source_id in list(self._pending):
            self._scheduler.source_remove(source_id)
        self._pending.clear()
        if self._enabled:
            self._panel.opacity = OPACITY_FULL
        self._enabled = False
        log.debug("disabled")

    # -- enforcement toggle ------------------------------------------------

    def on_button_press(self, button: int) -> bool:
        """Secondary click flips enforcement; True stops event propagation."""
        if button != BUTTON_SECONDARY:
            return False
        self.toggle_enforcement()
        return True

    def toggle_enforcement(self) -> None:
        self.enforce_visible = not self.enforce_visible
        log.debug("enforce_visible -> %s", self.enforce_visible)
        self.flash_panel(
            FLASHES_ENFORCE_ON if self.enforce_visible else FLASHES_ENFORCE_OFF
        )
        if not self.enforce_visible and self.focus_is_fullscreen():
            self._panel.visible = False

    def focus_is_fullscreen(self) -> bool:
        """True when the focused normal window fills the primary monitor."""
        return covers_monitor(
            self._shell.focused_window(), self._shell.primary_monitor()
        )

    def flash_panel(self, count: int) -> None:
        """Dim and restore the panel opacity `count` times (1 or 2)."""
        if count < 1:
            return
        self._flash_once()
        if count >= 2:
            self._schedule(self._config.flash_gap_ms, self._flash_once)

    def _flash_once(self) -> None:
        self._panel.opacity = self._config.flash_opacity
        self._schedule(self._config.flash_dim_ms, self._restore_opacity)

    def _restore_opacity(self) -> None:
        self._panel.opacity = OPACITY_FULL

    # -- hot edge ------------------------------------------------------------

    def _setup_hot_edge(self) -> None:
        """(Re)build the hot edge on the current primary monitor."""
        self._dispose_hot_edge()
        monitor = self._shell.primary_monitor()
        if monitor is None:
            log.debug("no primary monitor, hot edge not installed")
            return

        self.hot_edge = HotEdgeController(
            monitor,
            self._panel.height,
            lambda: self._on_reveal(monitor),
            lambda: self._on_conceal(monitor),
            self.leave_allowed,
            backend=self._backend,
            scheduler=self._scheduler,
            pointer=self._shell.pointer_position,
            poll_ms=self._config.leave_poll_ms,
            pressure_threshold=self._config.pressure_threshold,
            pressure_timeout_ms=self._config.pressure_timeout_ms,
        )
        self.hot_edge.initialize()

    def _dispose_hot_edge(self) -> None:
        if self.hot_edge is not None:
            self.hot_edge.dispose()
            self.hot_edge = None

    def leave_allowed(self) -> bool:
        """No panel menu open and not in overview; read fresh on every call."""
        return not any_menu_open(self._panel) and not self._shell.in_overview()

    def _on_reveal(self, monitor: Monitor) -> None:
        if not self._shell.monitor_in_fullscreen(monitor):
            return
        self._panel.visible = True
        self._panel.raise_top()

    def _on_conceal(self, monitor: Monitor) -> None:
        if not self._hide_allowed(monitor):
            return
        self._schedule(self._config.hide_confirm_ms, lambda: self._confirm_hide(monitor))

    def _confirm_hide(self, monitor: Monitor) -> None:
        if not self._hide_allowed(monitor) or any_menu_open(self._panel):
            return
        self._panel.visible = False

    def _hide_allowed(self, monitor: Monitor) -> bool:
        return (
            self._shell.monitor_in_fullscreen(monitor)
            and not self._shell.in_overview()
            and not self.enforce_visible
        )

    # -- one-shot timers -----------------------------------------------------

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Run `callback` once after `delay_ms`, tracked for disable()."""
        source_id = 0

        def fire() -> None:
            if source_id not in self._pending:
                return
            self._pending.discard(source_id)
            callback()

        source_id = self._scheduler.once(delay_ms, fire)
        self._pending.add(source_id)
