"""In-memory workspace implementing the host contract over ``Buffer``s.

Used by the Textual demo and as the test double for the history engine.
Cursor notifications are synchronous by default; ``deferred_echo=True``
queues the notifications caused by ``set_cursor_position`` until
``flush_events`` so asynchronous hosts can be simulated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Callable, Dict, Hashable, List, Optional

from cursor_history.buffer import AnchorId, Buffer

from .events import EventBus, Subscription
from .protocols import CursorMoveEvent, Position, Surface

SURFACE_ADDED = "surface.added"
SURFACE_CLOSED = "surface.closed"
CURSOR_MOVED = "cursor.moved"


@dataclass(eq=False)
class EditorSurface:
    """One open document view inside a pane."""

    id: str
    buffer: Buffer
    pane_id: Hashable = "main"
    folds: List[tuple[int, int]] = field(default_factory=list)

    def fold(self, start_row: int, end_row: int) -> None:
        """Hide rows ``start_row + 1`` through ``end_row`` on screen."""

        if end_row <= start_row:
            raise ValueError("fold must cover at least one hidden row")
        self.folds.append((start_row, end_row))
        self.folds.sort()

    def unfold_all(self) -> None:
        self.folds.clear()

    def screen_row(self, row: int) -> int:
        hidden = 0
        for start, end in self.folds:
            if row > end:
                hidden += end - start
            elif row > start:
                hidden += row - start
        return row - hidden


class MemoryWorkspace:
    """A tiny editor workspace: surfaces, an active surface and events."""

    def __init__(self, *, deferred_echo: bool = False) -> None:
        self.bus = EventBus()
        self.deferred_echo = deferred_echo
        self._surfaces: Dict[str, EditorSurface] = {}
        self._detach: Dict[str, Callable[[], None]] = {}
        self._active: Optional[str] = None
        self._serial = count(1)
        self._programmatic = False
        self._queued: List[tuple[str, CursorMoveEvent]] = []
        self.cursor_commands: List[tuple[str, Position]] = []

    # -- workspace lifecycle -------------------------------------------------
    def open(
        self,
        text: str = "",
        *,
        surface_id: Optional[str] = None,
        pane_id: Hashable = "main",
        activate: bool = True,
    ) -> EditorSurface:
        sid = surface_id or f"surface-{next(self._serial)}"
        if sid in self._surfaces:
            raise ValueError(f"Surface '{sid}' is already open")
        surface = EditorSurface(
            id=sid, buffer=Buffer.from_text(text, name=sid), pane_id=pane_id
        )
        self._surfaces[sid] = surface
        self._detach[sid] = surface.buffer.add_cursor_listener(
            lambda old, new, s=surface: self._cursor_changed(s, old, new)
        )
        if activate or self._active is None:
            self._active = sid
        self.bus.emit(SURFACE_ADDED, surface)
        return surface

    def close(self, surface: EditorSurface) -> None:
        if surface.id not in self._surfaces:
            return
        self.bus.emit(SURFACE_CLOSED, topic=surface.id)
        self._detach.pop(surface.id)()
        del self._surfaces[surface.id]
        self._queued = [item for item in self._queued if item[0] != surface.id]
        if self._active == surface.id:
            self._active = next(reversed(self._surfaces), None)

    def activate(self, surface: Optional[EditorSurface]) -> None:
        self._active = surface.id if surface is not None else None

    def surfaces(self) -> tuple[EditorSurface, ...]:
        return tuple(self._surfaces.values())

    def flush_events(self) -> int:
        queued, self._queued = self._queued, []
        for surface_id, event in queued:
            self.bus.emit(CURSOR_MOVED, event, topic=surface_id)
        return len(queued)

    # -- host contract -------------------------------------------------------
    def observe_surfaces(self, callback: Callable[[Surface], None]) -> Subscription:
        for surface in list(self._surfaces.values()):
            callback(surface)
        return self.bus.subscribe(SURFACE_ADDED, callback)

    def on_cursor_moved(
        self, surface: Surface, callback: Callable[[CursorMoveEvent], None]
    ) -> Subscription:
        return self.bus.subscribe(CURSOR_MOVED, callback, topic=surface.id)

    def on_surface_closed(
        self, surface: Surface, callback: Callable[[], None]
    ) -> Subscription:
        return self.bus.subscribe(SURFACE_CLOSED, callback, topic=surface.id)

    def create_anchor(self, surface: Surface, position: Position) -> AnchorId:
        return self._surface(surface.id).buffer.anchors.create(position)

    def resolve(self, handle: AnchorId) -> Position:
        return self._surface(handle.buffer).buffer.anchors.resolve(handle)

    def release(self, handle: AnchorId) -> None:
        self._surface(handle.buffer).buffer.anchors.release(handle)

    def get_cursor_position(self, surface: Surface) -> Position:
        return self._surface(surface.id).buffer.cursor

    def set_cursor_position(self, surface: Surface, position: Position) -> None:
        target = self._surface(surface.id)
        self.cursor_commands.append((target.id, position))
        self._programmatic = True
        try:
            target.buffer.set_cursor(*position)
        finally:
            self._programmatic = False

    def screen_row_of(self, surface: Surface, position: Position) -> int:
        return self._surface(surface.id).screen_row(position[0])

    def active_surface(self) -> Optional[EditorSurface]:
        if self._active is None:
            return None
        return self._surfaces.get(self._active)

    # -- internals -----------------------------------------------------------
    def _surface(self, surface_id: str) -> EditorSurface:
        try:
            return self._surfaces[surface_id]
        except KeyError as exc:
            raise KeyError(f"Surface '{surface_id}' is not open") from exc

    def _cursor_changed(
        self, surface: EditorSurface, old: Position, new: Position
    ) -> None:
        event = CursorMoveEvent(
            old_position=old,
            new_position=new,
            old_screen_position=(surface.screen_row(old[0]), old[1]),
            new_screen_position=(surface.screen_row(new[0]), new[1]),
        )
        if self._programmatic and self.deferred_echo:
            self._queued.append((surface.id, event))
            return
        self.bus.emit(CURSOR_MOVED, event, topic=surface.id)


__all__ = [
    "CURSOR_MOVED",
    "EditorSurface",
    "MemoryWorkspace",
    "SURFACE_ADDED",
    "SURFACE_CLOSED",
]
