from __future__ import annotations

from conftest import FakeClock
from cursor_history.history import MomentumTracker


def test_unset_tracker_is_not_moving(clock: FakeClock) -> None:
    momentum = MomentumTracker(decay_window_ms=250, clock=clock)

    assert momentum.is_moving() is False
    assert momentum.touched_at is None


def test_touch_is_moving_until_window_elapses(clock: FakeClock) -> None:
    momentum = MomentumTracker(decay_window_ms=250, clock=clock)

    momentum.touch()
    assert momentum.is_moving() is True

    clock.advance(0.125)
    assert momentum.is_moving() is True

    clock.advance(0.125)  # exactly the window: strictly-less fails
    assert momentum.is_moving() is False


def test_reset_clears_momentum(clock: FakeClock) -> None:
    momentum = MomentumTracker(decay_window_ms=250, clock=clock)

    momentum.touch()
    momentum.reset()

    assert momentum.is_moving() is False


def test_touch_restarts_the_window(clock: FakeClock) -> None:
    momentum = MomentumTracker(decay_window_ms=250, clock=clock)

    momentum.touch()
    clock.advance(0.5)
    assert momentum.is_moving() is False

    momentum.touch()
    assert momentum.is_moving() is True
    assert momentum.touched_at == 0.5
