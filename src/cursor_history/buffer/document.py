"""Line storage for the reference in-memory host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from cursor_history.host.protocols import Position


@dataclass(slots=True)
class BufferDocument:
    """List-of-lines text model; every edit returns a new version."""

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        lines = text.split("\n")
        return cls(_lines=lines, version=version)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def snapshot(self) -> Sequence[str]:
        return tuple(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def offset_of(self, position: Position) -> int:
        row, col = position
        return sum(len(line) + 1 for line in self._lines[:row]) + col

    def position_of(self, offset: int) -> Position:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        return (len(self._lines) - 1, len(self._lines[-1]))

    def splice(self, start: Position, end: Position, text: str) -> "BufferDocument":
        """Return a new document with ``[start, end)`` replaced by ``text``."""

        flat = self.text
        start_offset = self.offset_of(start)
        end_offset = self.offset_of(end)
        updated = flat[:start_offset] + text + flat[end_offset:]
        return BufferDocument.from_text(updated, version=self.version + 1)


__all__ = ["BufferDocument"]
