"""Position checks shared by buffer services."""

from __future__ import annotations

from cursor_history.host.protocols import Position

from .document import BufferDocument


class BufferValidationError(ValueError):
    """Raised when a caller provides an out-of-bounds position."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: BufferDocument, position: Position) -> Position:
    row, col = position
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", position=position)
    if col < 0 or col > len(document.get_line(row)):
        raise BufferValidationError("Column out of range", position=position)
    return position


def clip_position(document: BufferDocument, position: Position) -> Position:
    """Clamp ``position`` into the document, the way hosts clip cursor moves."""

    row = min(max(position[0], 0), document.line_count - 1)
    col = min(max(position[1], 0), len(document.get_line(row)))
    return (row, col)


__all__ = ["BufferValidationError", "clip_position", "ensure_position"]
