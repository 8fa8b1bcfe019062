"""Per-surface recording policy and navigation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from cursor_history.config import HistoryConfig
from cursor_history.host.protocols import (
    CursorMoveEvent,
    HistoryHost,
    Position,
    Surface,
)
from cursor_history.runtime import telemetry

from .anchors import AnchoredPosition
from .momentum import Clock, MomentumTracker
from .timeline import Timeline, TimelineView

LOGGER_NAME = "cursor_history.traveler"


@dataclass(slots=True)
class PendingMove:
    """A programmatic cursor move whose echo has not been seen yet."""

    generation: int
    target: Position
    budget: int


class SurfaceTraveler:
    """Turns cursor notifications for one surface into timeline entries.

    Continuous motion (notifications arriving inside the momentum window)
    keeps overwriting the newest waypoint. A fresh motion appends a new
    waypoint unless it stays within ``noise_rows`` screen rows of the
    current one.
    """

    def __init__(
        self,
        host: HistoryHost,
        surface: Surface,
        *,
        config: Optional[HistoryConfig] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.host = host
        self.surface = surface
        self.config = config or HistoryConfig()
        self.timeline = Timeline(
            self._make_anchor, capacity=self.config.max_history_size
        )
        self.momentum = MomentumTracker(
            decay_window_ms=self.config.decay_window_ms, clock=clock
        )
        self._pending: Optional[PendingMove] = None
        self._generation = 0

    @property
    def pending_move(self) -> Optional[PendingMove]:
        return self._pending

    def handle_cursor_moved(self, event: CursorMoveEvent) -> bool:
        """Apply the recording policy; returns True when the timeline changed."""

        if self._consume_echo(event):
            return False

        if self.timeline.is_empty:
            # baseline only; the next move is judged against it at rest
            self.timeline.record(event.old_position, overwrite=False)
            self.momentum.reset()
            return True

        moving = self.momentum.is_moving()
        if not moving and self._is_noise(event.new_screen_row):
            return False

        self.timeline.record(event.new_position, overwrite=moving)
        self.momentum.touch()
        return True

    def move_to_past(self) -> Optional[Position]:
        return self._travel("past")

    def move_to_future(self) -> Optional[Position]:
        return self._travel("future")

    def record_current_position(self) -> Position:
        position = self.host.get_cursor_position(self.surface)
        self.timeline.record(position, overwrite=False)
        self.momentum.reset()
        return position

    def clear_history(self) -> None:
        self.timeline.clear()
        self.momentum.reset()

    def dispose(self) -> None:
        self.clear_history()
        self._pending = None

    def snapshot(self) -> TimelineView:
        return self.timeline.snapshot()

    def _make_anchor(self, position: Position) -> AnchoredPosition:
        return AnchoredPosition.create(self.host, self.surface, position)

    def _is_noise(self, new_screen_row: int) -> bool:
        current = self.timeline.current()
        if current is None:
            return False
        current_row = self.host.screen_row_of(self.surface, current)
        return abs(new_screen_row - current_row) <= self.config.noise_rows

    def _travel(self, direction: str) -> Optional[Position]:
        self.momentum.reset()
        before = self.timeline.index
        if direction == "past":
            target = self.timeline.rewind()
        else:
            target = self.timeline.advance()
        if target is None or self.timeline.index == before:
            return None

        with telemetry.span(
            f"traveler::{direction}",
            logger_name=LOGGER_NAME,
            component="traveler",
            metadata={"surface": self.surface.id, "index": self.timeline.index},
        ):
            self._arm(target)
            try:
                self.host.set_cursor_position(self.surface, target)
            except Exception:
                # the cursor never moved, so neither does the index
                self._abandon("host_failed")
                self._step_back(direction)
                raise
            if self.config.synchronous_echo and self._pending is not None:
                # the host moved the cursor without notifying us
                self._abandon("echo_missing")
        return target

    def _step_back(self, direction: str) -> None:
        if direction == "past":
            self.timeline.advance()
        else:
            self.timeline.rewind()

    def _arm(self, target: Position) -> None:
        self._generation += 1
        self._pending = PendingMove(
            generation=self._generation,
            target=target,
            budget=self.config.echo_budget,
        )

    def _consume_echo(self, event: CursorMoveEvent) -> bool:
        pending = self._pending
        if pending is None:
            return False
        if self.config.synchronous_echo or event.new_position == pending.target:
            self._pending = None
            return True
        pending.budget -= 1
        if pending.budget <= 0:
            self._abandon("echo_budget_spent")
        return False

    def _abandon(self, reason: str) -> None:
        pending = self._pending
        self._pending = None
        if pending is None:
            return
        telemetry.record_event(
            "traveler.guard_dropped",
            level="warning",
            data={
                "surface": self.surface.id,
                "generation": pending.generation,
                "reason": reason,
            },
            logger_name=LOGGER_NAME,
        )


__all__ = ["PendingMove", "SurfaceTraveler"]
