"""Host boundary: the capability contract plus subscription helpers.

The in-memory reference host lives in ``cursor_history.host.memory``.
"""

from .events import CompositeDisposable, EventBus, Subscription
from .protocols import (
    AnchorHandle,
    CursorMoveEvent,
    CursorMovedCallback,
    Disposable,
    HistoryHost,
    Position,
    Surface,
    SurfaceCallback,
)

__all__ = [
    "AnchorHandle",
    "CompositeDisposable",
    "CursorMoveEvent",
    "CursorMovedCallback",
    "Disposable",
    "EventBus",
    "HistoryHost",
    "Position",
    "Subscription",
    "Surface",
    "SurfaceCallback",
]
