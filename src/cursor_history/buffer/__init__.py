"""Buffer model backing the reference in-memory host."""

from .anchors import AnchorId, AnchorTable, shift_position
from .buffer import Buffer, BufferDelta, BufferView, CursorListener
from .document import BufferDocument
from .validation import BufferValidationError, clip_position, ensure_position

__all__ = [
    "AnchorId",
    "AnchorTable",
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferValidationError",
    "BufferView",
    "CursorListener",
    "clip_position",
    "ensure_position",
    "shift_position",
]
