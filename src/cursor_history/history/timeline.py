"""Bounded, index-addressed timeline of anchored cursor positions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from cursor_history.config import DEFAULT_MAX_HISTORY_SIZE
from cursor_history.errors import ConfigurationError
from cursor_history.host.protocols import Position

from .anchors import AnchoredPosition

AnchorFactory = Callable[[Position], AnchoredPosition]


@dataclass(frozen=True, slots=True)
class TimelineView:
    """Resolved snapshot of a timeline, safe to hand to UI code."""

    positions: tuple[Position, ...]
    index: Optional[int]
    capacity: int

    @property
    def current(self) -> Optional[Position]:
        if self.index is None:
            return None
        return self.positions[self.index]


class Timeline:
    """Linear cursor history with branch pruning and capacity trimming.

    Entries after ``index`` form a future branch that survives only until
    the next ``record``. Every entry owns its anchor; anything dropped from
    the sequence is released on the way out.
    """

    def __init__(
        self,
        anchor_factory: AnchorFactory,
        *,
        capacity: int = DEFAULT_MAX_HISTORY_SIZE,
    ) -> None:
        self._anchor_factory = anchor_factory
        self._entries: List[AnchoredPosition] = []
        self._index: Optional[int] = None
        self._capacity = _validated_capacity(capacity)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def can_rewind(self) -> bool:
        return self._index is not None and self._index > 0

    def can_advance(self) -> bool:
        return self._index is not None and self._index < len(self._entries) - 1

    def record(self, position: Position, *, overwrite: bool = False) -> None:
        index = self._index
        if index is not None:
            if overwrite:
                index -= 1
            self._release_all(self._entries[index + 1 :])
            del self._entries[index + 1 :]

        self._entries.append(self._anchor_factory(position))
        self._index = len(self._entries) - 1
        self._trim()

    def rewind(self) -> Optional[Position]:
        if self._index is None:
            return None
        self._index = max(self._index - 1, 0)
        return self._entries[self._index].position

    def advance(self) -> Optional[Position]:
        if self._index is None:
            return None
        self._index = min(self._index + 1, len(self._entries) - 1)
        return self._entries[self._index].position

    def current(self) -> Optional[Position]:
        if self._index is None:
            return None
        return self._entries[self._index].position

    def set_capacity(self, capacity: int) -> int:
        """Change the bound and trim right away; returns entries dropped."""

        self._capacity = _validated_capacity(capacity)
        return self._trim()

    def clear(self) -> None:
        self._release_all(self._entries)
        self._entries = []
        self._index = None

    def snapshot(self) -> TimelineView:
        return TimelineView(
            positions=tuple(entry.position for entry in self._entries),
            index=self._index,
            capacity=self._capacity,
        )

    def _trim(self) -> int:
        overflow = len(self._entries) - self._capacity
        if overflow <= 0 or self._index is None:
            return 0
        self._release_all(self._entries[:overflow])
        del self._entries[:overflow]
        self._index = max(self._index - overflow, 0)
        return overflow

    @staticmethod
    def _release_all(entries: List[AnchoredPosition]) -> None:
        for entry in entries:
            entry.release()


def _validated_capacity(capacity: int) -> int:
    if capacity < 1:
        raise ConfigurationError(
            f"History capacity must be at least 1, got {capacity}",
            option="max_history_size",
        )
    return capacity


__all__ = ["AnchorFactory", "Timeline", "TimelineView"]
