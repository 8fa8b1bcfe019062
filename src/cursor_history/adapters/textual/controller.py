"""Textual-friendly adapter translating key names into edits and commands."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from cursor_history.buffer import BufferView
from cursor_history.commands import COMMAND_PREFIX, CursorHistoryPackage
from cursor_history.host.memory import EditorSurface, MemoryWorkspace


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


DEFAULT_COMMAND_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "ctrl+o": f"{COMMAND_PREFIX}:previous",
        "ctrl+i": f"{COMMAND_PREFIX}:next",
        "tab": f"{COMMAND_PREFIX}:next",
        "ctrl+p": f"{COMMAND_PREFIX}:push",
        "ctrl+l": f"{COMMAND_PREFIX}:clear",
    }
)

MOTION_KEYS: Mapping[str, tuple[int, int]] = MappingProxyType(
    {
        "up": (-1, 0),
        "down": (1, 0),
        "left": (0, -1),
        "right": (0, 1),
        "pageup": (-20, 0),
        "pagedown": (20, 0),
    }
)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferView], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualHistoryAdapter:
    """Bridges key presses to the workspace buffer and the history commands."""

    def __init__(
        self,
        package: CursorHistoryPackage,
        workspace: MemoryWorkspace,
        hooks: TextualUIHooks,
        *,
        command_keys: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.package = package
        self.workspace = workspace
        self.hooks = hooks
        self.command_keys: Dict[str, str] = dict(command_keys or DEFAULT_COMMAND_KEYS)
        self.refresh()

    def handle_key(self, key: str, *, text: Optional[str] = None) -> bool:
        """Apply one key; returns False when the key was not understood."""

        surface = self.workspace.active_surface()
        if surface is None:
            return False

        handled = True
        command = self.command_keys.get(key)
        if command is not None:
            self.package.commands.dispatch(command)
        elif key in MOTION_KEYS:
            surface.buffer.move_cursor_by(*MOTION_KEYS[key])
        elif key == "home":
            surface.buffer.set_cursor(surface.buffer.cursor[0], 0)
        elif key == "end":
            row = surface.buffer.cursor[0]
            surface.buffer.set_cursor(row, len(surface.buffer.document.get_line(row)))
        elif key == "ctrl+home":
            surface.buffer.set_cursor(0, 0)
        elif key == "ctrl+end":
            surface.buffer.set_cursor(surface.buffer.line_count - 1, 0)
        elif key == "enter":
            surface.buffer.insert_text("\n")
        elif key == "backspace":
            self._backspace(surface)
        elif text is not None and len(text) == 1 and text.isprintable():
            surface.buffer.insert_text(text)
        else:
            handled = False

        self._log("key", key=key, handled=handled, command=command)
        self.refresh()
        return handled

    def refresh(self) -> None:
        surface = self.workspace.active_surface()
        if surface is None:
            self.hooks.update_status("no surface")
            return
        self.hooks.update_buffer(surface.buffer.snapshot())
        self.hooks.update_status(self.status_line(surface))

    def status_line(self, surface: EditorSurface) -> str:
        row, col = surface.buffer.cursor
        location = f"{surface.id} {row + 1}:{col + 1}"
        if not self.package.active:
            return location
        traveler = self.package.registry.get(surface)
        if traveler is None or traveler.timeline.is_empty:
            return f"{location}  history 0/0"
        timeline = traveler.timeline
        index = (timeline.index or 0) + 1
        return f"{location}  history {index}/{len(timeline)}"

    def _backspace(self, surface: EditorSurface) -> None:
        buffer = surface.buffer
        row, col = buffer.cursor
        if col > 0:
            buffer.delete_range((row, col - 1), (row, col))
        elif row > 0:
            previous = len(buffer.document.get_line(row - 1))
            buffer.delete_range((row - 1, previous), (row, 0))

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        parts.extend(f"{key}={value!r}" for key, value in fields.items() if value is not None)
        self.hooks.log(" ".join(parts))


__all__ = [
    "DEFAULT_COMMAND_KEYS",
    "MOTION_KEYS",
    "TextualHistoryAdapter",
    "TextualUIHooks",
]
