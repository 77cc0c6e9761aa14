"""Shared fakes for the host collaborators: virtual-clock scheduler, panel, shell."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pytest

from peekbar.core.geometry import Direction, FocusedWindow, Monitor, Rect, WindowType
from peekbar.core.host import BarrierBackend, BarrierEvent, NativeBarrier, Panel, Shell
from peekbar.core.scheduler import Priority, Scheduler

MONITOR = Monitor(x=0, y=0, width=1920, height=1080, index=0)
FULLSCREEN_WINDOW = FocusedWindow(
    window_type=WindowType.NORMAL,
    monitor_index=0,
    x=0,
    y=0,
    width=1920,
    height=1080,
    fullscreen=True,
)


@dataclass
class _Source:
    source_id: int
    due: int
    interval: int
    callback: Callable[[], bool]
    priority: Priority


class FakeScheduler(Scheduler):
    """Deterministic scheduler driven by advance(ms) on a virtual clock."""

    def __init__(self) -> None:
        self.now = 0
        self._next_id = 1
        self._sources: dict[int, _Source] = {}

    @property
    def live_sources(self) -> int:
        return len(self._sources)

    def intervals(self) -> list[int]:
        return sorted(s.interval for s in self._sources.values())

    def priorities(self) -> list[Priority]:
        return [s.priority for s in self._sources.values()]

    def timeout_add(self, interval_ms, callback, priority=Priority.DEFAULT) -> int:
        source_id = self._next_id
        self._next_id += 1
        self._sources[source_id] = _Source(
            source_id, self.now + interval_ms, interval_ms, callback, priority
        )
        return source_id

    def source_remove(self, source_id: int) -> None:
        self._sources.pop(source_id, None)

    def advance(self, ms: int) -> None:
        """Run every callback falling due within the next `ms` milliseconds."""
        target = self.now + ms
        while True:
            due = [s for s in self._sources.values() if s.due <= target]
            if not due:
                break
            source = min(due, key=lambda s: (s.due, s.source_id))
            self.now = source.due
            keep = source.callback()
            if source.source_id not in self._sources:
                continue
            if keep:
                source.due += max(source.interval, 1)
            else:
                del self._sources[source.source_id]
        self.now = target


class FakeNativeBarrier(NativeBarrier):
    def __init__(self, rect, direction, on_hit, on_left) -> None:
        self.rect = rect
        self.direction = direction
        self.on_hit = on_hit
        self.on_left = on_left
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True

    def push(self, count: int, start_ms: int = 0, step_ms: int = 16, dy: float = 2.0):
        """Deliver `count` contacts pushing `dy` across the line."""
        for i in range(count):
            self.on_hit(BarrierEvent(time_ms=start_ms + i * step_ms, dx=0.0, dy=dy))


class FakeBarrierBackend(BarrierBackend):
    def __init__(self) -> None:
        self.created: list[FakeNativeBarrier] = []

    @property
    def live(self) -> list[FakeNativeBarrier]:
        return [b for b in self.created if not b.destroyed]

    def create_barrier(self, rect: Rect, direction: Direction, on_hit, on_left):
        barrier = FakeNativeBarrier(rect, direction, on_hit, on_left)
        self.created.append(barrier)
        return barrier


class FakeMenuItem:
    def __init__(self, is_open: bool = False) -> None:
        self.is_open = is_open


class FakePanel(Panel):
    def __init__(self, height: int = 32) -> None:
        self.visible = True
        self.opacity = 255
        self._height = height
        self.raised = 0
        self.items: list[object] = []
        self.handlers: dict[int, Callable[[int], bool]] = {}
        self.opacity_log: list[int] = []
        self._next_id = 1

    def __setattr__(self, name, value):
        if name == "opacity" and "opacity_log" in self.__dict__:
            self.opacity_log.append(value)
        super().__setattr__(name, value)

    @property
    def height(self) -> int:
        return self._height

    def raise_top(self) -> None:
        self.raised += 1

    def status_items(self):
        return list(self.items)

    def connect_button_press(self, handler) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self.handlers[handler_id] = handler
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self.handlers.pop(handler_id, None)

    def press(self, button: int) -> bool:
        return any([handler(button) for handler in list(self.handlers.values())])


class FakeShell(Shell):
    def __init__(self) -> None:
        self.monitor: Monitor | None = MONITOR
        self.fullscreen = True
        self.focused: FocusedWindow | None = FULLSCREEN_WINDOW
        self.pointer = (960, 500)
        self.overview = False
        self.handlers: dict[int, Callable[[], None]] = {}
        self._next_id = 1

    def primary_monitor(self):
        return self.monitor

    def monitor_in_fullscreen(self, monitor) -> bool:
        return self.fullscreen

    def focused_window(self):
        return self.focused

    def pointer_position(self):
        return self.pointer

    def in_overview(self) -> bool:
        return self.overview

    def connect_monitors_changed(self, handler) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self.handlers[handler_id] = handler
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self.handlers.pop(handler_id, None)

    def change_monitors(self, monitor: Monitor | None) -> None:
        self.monitor = monitor
        for handler in list(self.handlers.values()):
            handler()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def backend() -> FakeBarrierBackend:
    return FakeBarrierBackend()


@pytest.fixture
def panel() -> FakePanel:
    return FakePanel()


@pytest.fixture
def shell() -> FakeShell:
    return FakeShell()
