"""Capability contract the history engine expects from a host editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Optional, Protocol, Tuple

Position = Tuple[int, int]  # (row, column)


@dataclass(frozen=True, slots=True)
class CursorMoveEvent:
    """One cursor-move notification, buffer and screen coordinates."""

    old_position: Position
    new_position: Position
    old_screen_position: Position
    new_screen_position: Position

    @property
    def new_screen_row(self) -> int:
        return self.new_screen_position[0]


class Disposable(Protocol):
    def dispose(self) -> None:
        """Detach the subscription this object represents."""
        ...


class Surface(Protocol):
    """An editing surface (one open document view)."""

    @property
    def id(self) -> Hashable: ...

    @property
    def pane_id(self) -> Hashable: ...


class AnchorHandle(Protocol):
    """Opaque host anchor; the engine only passes it back to the host."""


CursorMovedCallback = Callable[[CursorMoveEvent], None]
SurfaceCallback = Callable[[Surface], None]


class HistoryHost(Protocol):
    """Everything the engine needs from the editor it runs inside."""

    def observe_surfaces(self, callback: SurfaceCallback) -> Disposable:
        """Call ``callback`` for every existing and every future surface."""
        ...

    def on_cursor_moved(
        self, surface: Surface, callback: CursorMovedCallback
    ) -> Disposable: ...

    def on_surface_closed(
        self, surface: Surface, callback: Callable[[], None]
    ) -> Disposable: ...

    def create_anchor(self, surface: Surface, position: Position) -> AnchorHandle:
        """Return a handle that stays logically put while text is edited."""
        ...

    def resolve(self, handle: AnchorHandle) -> Position: ...

    def release(self, handle: AnchorHandle) -> None: ...

    def get_cursor_position(self, surface: Surface) -> Position: ...

    def set_cursor_position(self, surface: Surface, position: Position) -> None: ...

    def screen_row_of(self, surface: Surface, position: Position) -> int: ...

    def active_surface(self) -> Optional[Surface]: ...


__all__ = [
    "AnchorHandle",
    "CursorMoveEvent",
    "CursorMovedCallback",
    "Disposable",
    "HistoryHost",
    "Position",
    "Surface",
    "SurfaceCallback",
]
