"""Tests for the pressure accumulator and the edge barrier lifecycle."""

from unittest.mock import MagicMock

import pytest

from peekbar.core.barrier import (
    MAX_CONTACT_PRESSURE,
    EdgeBarrier,
    PressureBarrier,
    TriggerMode,
)
from peekbar.core.geometry import Direction, Rect
from peekbar.core.host import BarrierEvent

LINE = Rect(x1=0, x2=1920, y1=1, y2=1)


def _hit(time_ms: int, dy: float = 2.0, dx: float = 0.0) -> BarrierEvent:
    return BarrierEvent(time_ms=time_ms, dx=dx, dy=dy)


class TestPressureAccumulation:
    def test_below_threshold_does_not_trigger(self):
        # Given
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        # When -- 7 contacts * 2px = 14
        for t in range(0, 7 * 16, 16):
            pb.hit(_hit(t))
        # Then
        fired.assert_not_called()
        assert pb.pressure == pytest.approx(14.0)

    def test_reaching_threshold_triggers_once(self):
        # Given
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        # When
        for t in range(0, 20 * 16, 16):
            pb.hit(_hit(t))
        # Then -- latched after the first trigger
        fired.assert_called_once()
        assert pb.triggered is True

    def test_single_hard_push_triggers(self):
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.hit(_hit(0, dy=20))
        fired.assert_called_once()

    def test_contact_pressure_is_capped(self):
        # Given -- threshold above the cap so the first contact cannot fire
        fired = MagicMock()
        pb = PressureBarrier(40, 200, fired)
        # When
        pb.hit(_hit(0, dy=30))
        # Then
        assert pb.pressure == pytest.approx(MAX_CONTACT_PRESSURE)
        fired.assert_not_called()

    def test_old_contacts_are_trimmed(self):
        # Given
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.hit(_hit(0, dy=8))
        # When -- next contact arrives after the timeout window
        pb.hit(_hit(300, dy=8))
        # Then
        fired.assert_not_called()
        assert pb.pressure == pytest.approx(8.0)

    def test_contacts_within_window_add_up(self):
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.hit(_hit(0, dy=8))
        pb.hit(_hit(150, dy=8))
        fired.assert_called_once()

    def test_grazing_contacts_are_ignored(self):
        # Given -- sliding along the edge more than pushing into it
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        # When
        for t in range(0, 30 * 16, 16):
            pb.hit(_hit(t, dy=2, dx=40))
        # Then
        fired.assert_not_called()
        assert pb.pressure == 0.0

    def test_vertical_barrier_uses_dx_as_push(self):
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired, horizontal=False)
        pb.hit(_hit(0, dy=0, dx=20))
        fired.assert_called_once()


class TestPressureRearm:
    def test_left_rearms_after_trigger(self):
        # Given
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.hit(_hit(0, dy=20))
        # When
        pb.left()
        pb.hit(_hit(500, dy=20))
        # Then
        assert fired.call_count == 2

    def test_left_discards_partial_pressure(self):
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.hit(_hit(0, dy=10))
        pb.left()
        pb.hit(_hit(16, dy=10))
        fired.assert_not_called()

    def test_zero_threshold_fires_on_any_contact(self):
        fired = MagicMock()
        pb = PressureBarrier(0, 0, fired)
        pb.hit(_hit(0, dy=0))
        fired.assert_called_once()

    def test_destroyed_never_fires(self):
        fired = MagicMock()
        pb = PressureBarrier(15, 200, fired)
        pb.destroy()
        pb.hit(_hit(0, dy=20))
        fired.assert_not_called()


class TestEdgeBarrier:
    def test_activate_installs_native_line(self, backend):
        # Given
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, MagicMock()
        )
        # When
        barrier.activate()
        # Then
        assert barrier.active is True
        assert len(backend.created) == 1
        native = backend.created[0]
        assert native.rect == LINE
        assert native.direction == Direction.FROM_BOTTOM

    def test_delayed_mode_needs_sustained_pressure(self, backend):
        # Given
        fired = MagicMock()
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, fired
        )
        barrier.activate()
        native = backend.created[0]
        # When -- a brief touch
        native.push(2)
        # Then
        fired.assert_not_called()
        # When -- sustained pressure
        native.push(8, start_ms=32)
        # Then
        fired.assert_called_once()

    def test_immediate_mode_fires_on_contact(self, backend):
        fired = MagicMock()
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.IMMEDIATE, fired
        )
        barrier.activate()
        backend.created[0].push(1, dy=0.5)
        fired.assert_called_once()

    def test_fires_once_per_crossing(self, backend):
        # Given
        fired = MagicMock()
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.IMMEDIATE, fired
        )
        barrier.activate()
        native = backend.created[0]
        # When -- pointer stays on the line
        native.push(5)
        # Then
        fired.assert_called_once()
        # When -- pointer leaves and comes back
        native.on_left()
        native.push(1, start_ms=1000)
        # Then
        assert fired.call_count == 2

    def test_custom_threshold(self, backend):
        fired = MagicMock()
        barrier = EdgeBarrier(
            backend,
            LINE,
            Direction.FROM_BOTTOM,
            TriggerMode.DELAYED,
            fired,
            threshold=4,
            timeout_ms=100,
        )
        barrier.activate()
        backend.created[0].push(2)
        fired.assert_called_once()

    def test_dispose_destroys_native_line(self, backend):
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, MagicMock()
        )
        barrier.activate()
        barrier.dispose()
        assert backend.created[0].destroyed is True
        assert barrier.active is False

    def test_dispose_is_idempotent(self, backend):
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, MagicMock()
        )
        barrier.activate()
        barrier.dispose()
        barrier.dispose()
        assert len(backend.created) == 1

    def test_dispose_before_activate_is_noop(self, backend):
        # Given
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, MagicMock()
        )
        # When
        barrier.dispose()
        # Then
        assert backend.created == []
        assert barrier.active is False

    def test_hit_after_dispose_is_ignored(self, backend):
        # Given -- backend still holds the callbacks of a disposed barrier
        fired = MagicMock()
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.IMMEDIATE, fired
        )
        barrier.activate()
        native = backend.created[0]
        barrier.dispose()
        # When
        native.push(3)
        # Then
        fired.assert_not_called()

    def test_not_reusable_after_dispose(self, backend):
        barrier = EdgeBarrier(
            backend, LINE, Direction.FROM_BOTTOM, TriggerMode.DELAYED, MagicMock()
        )
        barrier.activate()
        barrier.dispose()
        barrier.activate()
        assert len(backend.created) == 1
        assert barrier.active is False
