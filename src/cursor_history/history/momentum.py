"""Elapsed-time momentum used to collapse continuous motion."""

from __future__ import annotations

import time
from typing import Callable, Optional

from cursor_history.config import DEFAULT_DECAY_WINDOW_MS

Clock = Callable[[], float]  # seconds, monotonic


class MomentumTracker:
    """Answers "is the user still moving?" from the last touch time.

    Pure time policy: no knowledge of timelines or surfaces. ``clock`` is
    injectable so tests never sleep.
    """

    def __init__(
        self,
        *,
        decay_window_ms: int = DEFAULT_DECAY_WINDOW_MS,
        clock: Clock = time.monotonic,
    ) -> None:
        self.decay_window_ms = decay_window_ms
        self._clock = clock
        self._touched_at: Optional[float] = None

    @property
    def touched_at(self) -> Optional[float]:
        return self._touched_at

    def touch(self) -> None:
        self._touched_at = self._clock()

    def reset(self) -> None:
        self._touched_at = None

    def is_moving(self) -> bool:
        if self._touched_at is None:
            return False
        elapsed_ms = (self._clock() - self._touched_at) * 1000.0
        return elapsed_ms < self.decay_window_ms


__all__ = ["Clock", "MomentumTracker"]
