"""Editable buffer with a cursor and anchors, used by the in-memory host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from cursor_history.host.protocols import Position
from cursor_history.runtime import telemetry

from .anchors import AnchorTable
from .document import BufferDocument
from .validation import clip_position, ensure_position

CursorListener = Callable[[Position, Position], None]


@dataclass(slots=True)
class BufferView:
    version: int
    text: str
    cursor: Position


@dataclass(slots=True)
class BufferDelta:
    version: int
    start: Position
    old_end: Position
    text: str
    cursor: Position
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.anchors = AnchorTable(name)
        self._cursor: Position = (0, 0)
        self._listeners: List[CursorListener] = []

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @property
    def cursor(self) -> Position:
        return self._cursor

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def add_cursor_listener(self, listener: CursorListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def snapshot(self) -> BufferView:
        return BufferView(
            version=self.document.version,
            text=self.document.text,
            cursor=self._cursor,
        )

    def set_cursor(self, row: int, col: int) -> Position:
        """Move the cursor, clipping into the document like an editor would.

        Listeners are only notified when the clipped position differs.
        """

        return self._move_cursor(clip_position(self.document, (row, col)))

    def move_cursor_by(self, rows: int = 0, cols: int = 0) -> Position:
        row, col = self._cursor
        return self.set_cursor(row + rows, col + cols)

    def replace_range(
        self, start: Position, end: Position, text: str, *, label: str
    ) -> BufferDelta:
        start = ensure_position(self.document, start)
        end = ensure_position(self.document, end)
        if end < start:
            start, end = end, start
        with telemetry.span(
            f"buffer::{label}",
            component="buffer",
            metadata={"buffer": self.name},
        ):
            start_offset = self.document.offset_of(start)
            self.document = self.document.splice(start, end, text)
            self.anchors.apply_edit(start, end, text)
            cursor = self.document.position_of(start_offset + len(text))
            self._move_cursor(cursor)

        return BufferDelta(
            version=self.document.version,
            start=start,
            old_end=end,
            text=text,
            cursor=self._cursor,
            label=label,
        )

    def insert_text(self, text: str, *, at: Optional[Position] = None) -> BufferDelta:
        position = at or self._cursor
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: Position, end: Position) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def _move_cursor(self, position: Position) -> Position:
        previous = self._cursor
        self._cursor = position
        if previous != position:
            for listener in list(self._listeners):
                listener(previous, position)
        return position


__all__ = ["Buffer", "BufferDelta", "BufferView", "CursorListener"]
