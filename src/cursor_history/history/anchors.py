"""Owning wrapper around host anchors with exactly-once release."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cursor_history.errors import AnchorReleasedError
from cursor_history.host.protocols import AnchorHandle, Position

if TYPE_CHECKING:
    from cursor_history.host.protocols import HistoryHost, Surface


class AnchoredPosition:
    """A recorded position that follows text edits until released.

    The resolved row/column is read from the host on every access since
    edits may have moved it.
    """

    __slots__ = ("_host", "_handle", "_released")

    def __init__(self, host: "HistoryHost", handle: AnchorHandle) -> None:
        self._host = host
        self._handle = handle
        self._released = False

    @classmethod
    def create(
        cls, host: "HistoryHost", surface: "Surface", position: Position
    ) -> "AnchoredPosition":
        return cls(host, host.create_anchor(surface, position))

    @property
    def released(self) -> bool:
        return self._released

    @property
    def position(self) -> Position:
        if self._released:
            raise AnchorReleasedError(
                "Anchored position read after release", handle=self._handle
            )
        return self._host.resolve(self._handle)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._host.release(self._handle)

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"AnchoredPosition({self._handle!r}, {state})"


__all__ = ["AnchoredPosition"]
