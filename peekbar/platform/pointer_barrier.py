"""Pointer-sampling barrier backend.

Compositor pointer barriers are not available to a regular client, so the
top edge is watched by sampling the pointer instead. Every sample where
the pointer rests on (or beyond) the barrier line inside its span is
reported as a contact:

    y ▲ screen top
    0 │ ● ● ● ●        <- pointer pinned at the edge: one contact per sample
    1 │═══════════════ barrier line (y1)
      │       ●        <- below the line: released, on_left fires once
      │
      └──────────────→ x   (x1 .. x2 span)

The push across the line is the pointer travel past the line since the
previous sample, with a floor of DWELL_PRESSURE because a pinned pointer
cannot move any further. Travel before reaching the line does not count,
so a fast flick into the edge still has to dwell. Horizontal travel is
passed through as the slide, so brushing along the edge is not pressure.
"""

from __future__ import annotations

from typing import Callable

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import GLib  # noqa: E402

from peekbar.core.geometry import Direction, Rect
from peekbar.core.host import BarrierBackend, BarrierEvent, NativeBarrier
from peekbar.core.scheduler import (
    SOURCE_CONTINUE,
    SOURCE_REMOVE,
    Scheduler,
    clear_source,
)

SAMPLE_INTERVAL_MS = 16  # ~60Hz
# Pressure credited per sample while the pointer is pinned on the line
DWELL_PRESSURE = 2.0


def monotonic_ms() -> int:
    return GLib.get_monotonic_time() // 1000


class SampledBarrier(NativeBarrier):
    """One barrier line fed by pointer samples."""

    def __init__(
        self,
        rect: Rect,
        direction: Direction,
        on_hit: Callable[[BarrierEvent], None],
        on_left: Callable[[], None],
        scheduler: Scheduler | None = None,
    ) -> None:
        self.rect = rect
        self.direction = direction
        self._on_hit = on_hit
        self._on_left = on_left
        self._last: tuple[float, float] | None = None
        self._on_line = False
        self.alive = True
        self.source_id: int = 0
        self._scheduler = scheduler

    def feed(self, x: float, y: float, time_ms: int) -> None:
        """Process one pointer sample."""
        if not self.alive:
            return
        prev = self._last
        self._last = (x, y)

        if not (self._in_span(x) and self._pressed(y)):
            if self._on_line:
                self._on_line = False
                self._on_left()
            return

        self._on_line = True
        if prev is None:
            slide, push = 0.0, DWELL_PRESSURE
        else:
            slide = x - prev[0]
            push = max(DWELL_PRESSURE, self._overshoot(prev[1], y))
        self._on_hit(BarrierEvent(time_ms=time_ms, dx=slide, dy=push))

    def destroy(self) -> None:
        self.alive = False
        if self._scheduler is not None:
            self.source_id = clear_source(self._scheduler, self.source_id)

    def _in_span(self, x: float) -> bool:
        return self.rect.x1 <= x < self.rect.x2

    def _pressed(self, y: float) -> bool:
        if self.direction == Direction.FROM_BOTTOM:
            return y <= self.rect.y1
        return y >= self.rect.y1

    def _overshoot(self, prev_y: float, y: float) -> float:
        """Travel past the line between two samples."""
        if self.direction == Direction.FROM_BOTTOM:
            return min(prev_y, self.rect.y1) - y
        return y - max(prev_y, self.rect.y1)


class SampledBarrierBackend(BarrierBackend):
    """Creates SampledBarrier lines driven by a scheduler timer each."""

    def __init__(
        self,
        scheduler: Scheduler,
        pointer: Callable[[], tuple[int, int]],
        sample_ms: int = SAMPLE_INTERVAL_MS,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self._scheduler = scheduler
        self._pointer = pointer
        self._sample_ms = sample_ms
        self._clock = clock

    def create_barrier(
        self,
        rect: Rect,
        direction: Direction,
        on_hit: Callable[[BarrierEvent], None],
        on_left: Callable[[], None],
    ) -> NativeBarrier:
        barrier = SampledBarrier(rect, direction, on_hit, on_left, self._scheduler)

        def sample() -> bool:
            if not barrier.alive:
                return SOURCE_REMOVE
            x, y = self._pointer()
            barrier.feed(x, y, self._clock())
            return SOURCE_CONTINUE

        barrier.source_id = self._scheduler.timeout_add(self._sample_ms, sample)
        return barrier
