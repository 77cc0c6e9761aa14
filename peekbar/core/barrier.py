"""Edge barrier -- a boundary line that fires after sustained pointer pressure."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Callable

from peekbar.log import get_logger

if TYPE_CHECKING:
    from peekbar.core.geometry import Direction, Rect
    from peekbar.core.host import BarrierBackend, BarrierEvent, NativeBarrier

log = get_logger(name="barrier")

DEFAULT_PRESSURE_THRESHOLD = 15
DEFAULT_PRESSURE_TIMEOUT_MS = 200
# Cap on the pressure a single contact contributes
MAX_CONTACT_PRESSURE = 15


class TriggerMode(enum.Enum):
    """IMMEDIATE fires on first contact; DELAYED needs accumulated pressure."""

    IMMEDIATE = "immediate"
    DELAYED = "delayed"


class PressureBarrier:
    """Accumulates contact pressure and triggers once per crossing.

    Pressure is the pointer push across the line. Contacts that slide along
    the line more than they push across it are grazes and are ignored.
    Contacts older than `timeout_ms` relative to the latest one drop out of
    the sum. After triggering the barrier stays latched until the pointer
    leaves it.

        pressure ▲
        threshold│- - - - - - - -╭── trigger (latched)
                 │          ╭────╯
                 │     ╭────╯
                 │╭────╯
               0 │╯
                 └──────────────────→ contacts within timeout window
    """

    def __init__(
        self,
        threshold: int,
        timeout_ms: int,
        on_trigger: Callable[[], None],
        horizontal: bool = True,
    ) -> None:
        self.threshold = threshold
        self.timeout_ms = timeout_ms
        self._on_trigger = on_trigger
        self._horizontal = horizontal
        self._events: list[tuple[int, float]] = []
        self._pressure: float = 0.0
        self._last_time: int = 0
        self._is_hit = False
        self._triggered = False
        self._destroyed = False

    @property
    def pressure(self) -> float:
        return self._pressure

    @property
    def triggered(self) -> bool:
        return self._triggered

    def hit(self, event: BarrierEvent) -> None:
        """Register one contact with the line."""
        self._is_hit = True
        if self._destroyed or self._triggered:
            return

        if self._horizontal:
            slide, distance = abs(event.dx), abs(event.dy)
        else:
            slide, distance = abs(event.dy), abs(event.dx)

        if distance >= self.threshold:
            self._trigger()
            return

        if slide > distance:
            return

        self._last_time = event.time_ms
        self._trim()
        distance = min(MAX_CONTACT_PRESSURE, distance)
        self._events.append((event.time_ms, distance))
        self._pressure += distance

        if self._pressure >= self.threshold:
            self._trigger()

    def left(self) -> None:
        """The pointer moved off the line; re-arm for the next crossing."""
        self._is_hit = False
        self._reset()
        self._triggered = False

    def destroy(self) -> None:
        self._destroyed = True
        self._reset()

    def _trigger(self) -> None:
        self._triggered = True
        self._reset()
        self._on_trigger()

    def _reset(self) -> None:
        self._events = []
        self._pressure = 0.0
        self._last_time = 0

    def _trim(self) -> None:
        cutoff = self._last_time - self.timeout_ms
        while self._events and self._events[0][0] < cutoff:
            _time, distance = self._events.pop(0)
            self._pressure -= distance


class EdgeBarrier:
    """Native boundary line plus pressure accumulator, with explicit lifetime.

    One instance serves one activation; disposal is final.
    """

    def __init__(
        self,
        backend: BarrierBackend,
        rect: Rect,
        direction: Direction,
        mode: TriggerMode,
        on_trigger: Callable[[], None],
        threshold: int = DEFAULT_PRESSURE_THRESHOLD,
        timeout_ms: int = DEFAULT_PRESSURE_TIMEOUT_MS,
    ) -> None:
        self._backend = backend
        self.rect = rect
        self.direction = direction
        self.mode = mode
        self._on_trigger = on_trigger
        self._threshold = threshold
        self._timeout_ms = timeout_ms
        self._native: NativeBarrier | None = None
        self._pressure: PressureBarrier | None = None
        self._disposed = False

    @property
    def active(self) -> bool:
        return self._native is not None

    def activate(self) -> None:
        """Install the boundary and start accumulating pressure."""
        if self._native is not None or self._disposed:
            return
        if self.mode == TriggerMode.DELAYED:
            threshold, timeout_ms = self._threshold, self._timeout_ms
        else:
            threshold, timeout_ms = 0, 0

        self._pressure = PressureBarrier(
            threshold,
            timeout_ms,
            self._fire,
            horizontal=self.rect.y1 == self.rect.y2,
        )
        self._native = self._backend.create_barrier(
            self.rect, self.direction, self._pressure.hit, self._pressure.left
        )
        log.debug(
            "barrier active at %s (%s, threshold=%d, timeout=%dms)",
            self.rect,
            self.mode.value,
            threshold,
            timeout_ms,
        )

    def dispose(self) -> None:
        """Destroy the native boundary and the accumulator. Idempotent."""
        if self._native is None:
            return
        self._native.destroy()
        self._native = None
        if self._pressure is not None:
            self._pressure.destroy()
            self._pressure = None
        self._disposed = True
        log.debug("barrier at %s disposed", self.rect)

    def _fire(self) -> None:
        if self._native is None:
            return
        self._on_trigger()
