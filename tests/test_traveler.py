from __future__ import annotations

from typing import Optional

import pytest

from conftest import FakeClock
from cursor_history.config import HistoryConfig
from cursor_history.history import SurfaceTraveler
from cursor_history.host.memory import EditorSurface, MemoryWorkspace
from cursor_history.host.protocols import Position, Surface

SAMPLE = "\n".join(f"line {n}" for n in range(100))


def make_traveler(
    clock: FakeClock,
    *,
    config: Optional[HistoryConfig] = None,
    workspace: Optional[MemoryWorkspace] = None,
    start_row: int = 9,
) -> tuple[SurfaceTraveler, EditorSurface, MemoryWorkspace]:
    workspace = workspace or MemoryWorkspace()
    surface = workspace.open(SAMPLE)
    surface.buffer.set_cursor(start_row, 0)
    traveler = SurfaceTraveler(workspace, surface, config=config, clock=clock)
    workspace.on_cursor_moved(surface, traveler.handle_cursor_moved)
    return traveler, surface, workspace


def move(surface: EditorSurface, clock: FakeClock, row: int, *, ms: int = 50) -> None:
    clock.advance(ms / 1000.0)
    surface.buffer.set_cursor(row, 0)


def run_momentum_scenario(surface: EditorSurface, clock: FakeClock) -> None:
    move(surface, clock, 10)
    move(surface, clock, 12)
    move(surface, clock, 20)
    move(surface, clock, 25)


def test_momentum_scenario_collapses_continuous_motion(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock)

    move(surface, clock, 10)
    assert traveler.snapshot().positions == ((9, 0),)

    move(surface, clock, 12)
    assert traveler.snapshot().positions == ((9, 0),)

    move(surface, clock, 20)
    assert traveler.snapshot().positions == ((9, 0), (20, 0))

    move(surface, clock, 25)
    assert traveler.snapshot().positions == ((9, 0), (25, 0))
    assert traveler.timeline.index == 1


def test_first_move_records_only_the_baseline(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock, start_row=0)

    move(surface, clock, 50)

    assert traveler.snapshot().positions == ((0, 0),)
    assert traveler.momentum.is_moving() is False

    move(surface, clock, 52, ms=400)

    assert traveler.snapshot().positions == ((0, 0), (52, 0))


def test_settled_motion_appends_new_waypoint(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock)
    run_momentum_scenario(surface, clock)

    move(surface, clock, 60, ms=400)

    assert traveler.snapshot().positions == ((9, 0), (25, 0), (60, 0))


def test_noise_threshold_uses_screen_rows(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock)
    run_momentum_scenario(surface, clock)
    surface.fold(26, 40)

    move(surface, clock, 41, ms=400)  # screen row 27, two rows from 25

    assert traveler.snapshot().positions == ((9, 0), (25, 0))


def test_move_to_past_and_future_moves_host_cursor(clock: FakeClock) -> None:
    traveler, surface, workspace = make_traveler(clock)
    run_momentum_scenario(surface, clock)

    assert traveler.move_to_past() == (9, 0)
    assert surface.buffer.cursor == (9, 0)
    assert traveler.pending_move is None
    assert traveler.snapshot().positions == ((9, 0), (25, 0))

    assert traveler.move_to_future() == (25, 0)
    assert surface.buffer.cursor == (25, 0)
    assert workspace.cursor_commands == [
        (surface.id, (9, 0)),
        (surface.id, (25, 0)),
    ]


def test_navigation_at_boundary_does_not_touch_host(clock: FakeClock) -> None:
    traveler, surface, workspace = make_traveler(clock)
    run_momentum_scenario(surface, clock)

    assert traveler.move_to_future() is None
    traveler.move_to_past()
    assert traveler.move_to_past() is None

    assert traveler.timeline.index == 0
    assert workspace.cursor_commands == [(surface.id, (9, 0))]


def test_navigation_resets_momentum_so_landing_spot_survives(
    clock: FakeClock,
) -> None:
    traveler, surface, _ = make_traveler(clock)
    run_momentum_scenario(surface, clock)

    traveler.move_to_past()
    move(surface, clock, 40, ms=10)

    assert traveler.snapshot().positions == ((9, 0), (40, 0))


def test_record_current_position_ignores_debounce(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock)
    run_momentum_scenario(surface, clock)
    surface.buffer.set_cursor(26, 0)  # moving: overwrites 25 with 26

    traveler.record_current_position()

    assert traveler.snapshot().positions == ((9, 0), (26, 0), (26, 0))
    assert traveler.momentum.is_moving() is False


def test_clear_history_then_navigation_is_noop(clock: FakeClock) -> None:
    traveler, surface, workspace = make_traveler(clock)
    run_momentum_scenario(surface, clock)

    traveler.clear_history()

    assert traveler.move_to_past() is None
    assert traveler.move_to_future() is None
    assert traveler.timeline.is_empty
    assert workspace.cursor_commands == []
    assert len(surface.buffer.anchors) == 0


def test_missing_echo_does_not_swallow_next_user_move(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock, start_row=0)
    traveler.timeline.record((0, 0))
    traveler.timeline.record((50, 0))

    assert traveler.move_to_past() == (0, 0)  # cursor already there, no echo
    assert traveler.pending_move is None

    move(surface, clock, 40)

    assert traveler.snapshot().positions == ((0, 0), (40, 0))


def test_deferred_echo_is_matched_by_target(clock: FakeClock) -> None:
    config = HistoryConfig(synchronous_echo=False)
    traveler, surface, workspace = make_traveler(
        clock, config=config, workspace=MemoryWorkspace(deferred_echo=True)
    )
    run_momentum_scenario(surface, clock)

    traveler.move_to_past()
    assert traveler.pending_move is not None
    assert traveler.pending_move.target == (9, 0)

    assert workspace.flush_events() == 1
    assert traveler.pending_move is None
    assert traveler.snapshot().positions == ((9, 0), (25, 0))
    assert traveler.timeline.index == 0


def test_deferred_echo_budget_abandons_stale_guard(clock: FakeClock) -> None:
    config = HistoryConfig(synchronous_echo=False, echo_budget=2)
    traveler, surface, _ = make_traveler(
        clock, config=config, workspace=MemoryWorkspace(deferred_echo=True)
    )
    run_momentum_scenario(surface, clock)
    traveler.move_to_past()
    generation = traveler.pending_move.generation  # type: ignore[union-attr]

    move(surface, clock, 40)
    assert traveler.pending_move is not None
    assert traveler.pending_move.generation == generation

    move(surface, clock, 60)
    assert traveler.pending_move is None
    assert traveler.snapshot().positions == ((9, 0), (60, 0))


def test_dispose_releases_anchors(clock: FakeClock) -> None:
    traveler, surface, _ = make_traveler(clock)
    run_momentum_scenario(surface, clock)
    assert len(surface.buffer.anchors) == 2

    traveler.dispose()

    assert len(surface.buffer.anchors) == 0
    assert surface.buffer.anchors.created == surface.buffer.anchors.released


class RefusingWorkspace(MemoryWorkspace):
    """Host whose programmatic cursor moves always fail."""

    def set_cursor_position(self, surface: Surface, position: Position) -> None:
        raise RuntimeError("cursor is locked")


@pytest.mark.parametrize("synchronous_echo", [True, False])
def test_failed_host_move_leaves_no_guard_behind(
    clock: FakeClock, synchronous_echo: bool
) -> None:
    config = HistoryConfig(synchronous_echo=synchronous_echo)
    traveler, surface, _ = make_traveler(
        clock, config=config, workspace=RefusingWorkspace(), start_row=0
    )
    traveler.timeline.record((0, 0))
    traveler.timeline.record((50, 0))

    with pytest.raises(RuntimeError):
        traveler.move_to_past()

    assert traveler.pending_move is None
    assert traveler.timeline.index == 1

    move(surface, clock, 80, ms=1000)

    assert traveler.snapshot().positions == ((0, 0), (50, 0), (80, 0))
