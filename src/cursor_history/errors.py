"""Exception types raised for programming defects.

Structural boundaries (empty timeline, index at an end, no active surface)
are never errors; they are silent no-ops. These types cover misuse only.
"""

from __future__ import annotations

from typing import Any, Optional


class CursorHistoryError(RuntimeError):
    """Base class for every defect raised by the package."""


class AnchorReleasedError(CursorHistoryError):
    """Raised when a released anchored position is read."""

    def __init__(self, message: str, *, handle: Any = None) -> None:
        super().__init__(message)
        self.handle = handle


class ConfigurationError(CursorHistoryError, ValueError):
    """Raised for invalid configuration values."""

    def __init__(self, message: str, *, option: Optional[str] = None) -> None:
        super().__init__(message)
        self.option = option


class UnknownCommandError(CursorHistoryError, KeyError):
    """Raised when dispatching a command that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command '{name}' is not registered")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class PackageStateError(CursorHistoryError):
    """Raised when the package lifecycle is driven out of order."""


__all__ = [
    "CursorHistoryError",
    "AnchorReleasedError",
    "ConfigurationError",
    "UnknownCommandError",
    "PackageStateError",
]
