"""Anchors that keep buffer positions logically stationary across edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator

from cursor_history.host.protocols import Position


@dataclass(frozen=True, slots=True)
class AnchorId:
    """Handle returned to callers; only meaningful to its ``AnchorTable``."""

    buffer: str
    serial: int


def _end_of_insert(start: Position, text: str) -> Position:
    lines = text.split("\n")
    if len(lines) == 1:
        return (start[0], start[1] + len(text))
    return (start[0] + len(lines) - 1, len(lines[-1]))


def shift_position(
    position: Position, start: Position, end: Position, text: str
) -> Position:
    """Where ``position`` lands after ``[start, end)`` is replaced by ``text``.

    Positions before ``start`` stay. Positions inside a deleted span collapse
    onto ``start``. Positions at or after ``end`` move with the text that
    follows the edit, so an insertion exactly at an anchor pushes it forward.
    """

    if position < start:
        return position
    if position < end:
        return start
    new_end = _end_of_insert(start, text)
    if position[0] == end[0]:
        return (new_end[0], new_end[1] + position[1] - end[1])
    return (position[0] + new_end[0] - end[0], position[1])


class AnchorTable:
    """Live anchors for one buffer."""

    def __init__(self, buffer_name: str) -> None:
        self.buffer_name = buffer_name
        self._positions: Dict[AnchorId, Position] = {}
        self._serial = 0
        self.created = 0
        self.released = 0

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, anchor: object) -> bool:
        return anchor in self._positions

    def __iter__(self) -> Iterator[AnchorId]:
        return iter(list(self._positions))

    def create(self, position: Position) -> AnchorId:
        self._serial += 1
        anchor = AnchorId(buffer=self.buffer_name, serial=self._serial)
        self._positions[anchor] = position
        self.created += 1
        return anchor

    def resolve(self, anchor: AnchorId) -> Position:
        try:
            return self._positions[anchor]
        except KeyError as exc:
            raise KeyError(f"Anchor {anchor} is not live") from exc

    def release(self, anchor: AnchorId) -> None:
        if self._positions.pop(anchor, None) is None:
            raise KeyError(f"Anchor {anchor} released twice or never created")
        self.released += 1

    def apply_edit(self, start: Position, end: Position, text: str) -> None:
        for anchor, position in self._positions.items():
            self._positions[anchor] = shift_position(position, start, end, text)


__all__ = ["AnchorId", "AnchorTable", "shift_position"]
