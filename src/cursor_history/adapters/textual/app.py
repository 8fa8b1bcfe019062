"""Executable Textual app demonstrating cursor history navigation."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use cursor_history.adapters.textual.app"
    ) from exc

from cursor_history.buffer import BufferView
from cursor_history.commands import CursorHistoryPackage
from cursor_history.config import HistoryConfig
from cursor_history.host.memory import MemoryWorkspace
from cursor_history.runtime import telemetry

from .controller import TextualHistoryAdapter, TextualUIHooks

CURSOR_GLYPH = "▏"
SAMPLE_TEXT = "\n".join(
    f"{n:>4}  line {n}: arrows move, ctrl+o back, tab forward, ctrl+p push"
    for n in range(1, 201)
)


def render_buffer(view: BufferView) -> str:
    """Plain-text rendering with the cursor drawn as a thin bar."""

    lines = view.text.split("\n")
    row, col = view.cursor
    line = lines[row]
    lines[row] = line[:col] + CURSOR_GLYPH + line[col:]
    return "\n".join(lines)


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class CursorHistoryApp(App[None]):
    """Single-buffer Textual UI wired to the history package."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        text: str = SAMPLE_TEXT,
        title: str = "scratch",
        config: Optional[HistoryConfig] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._text = text
        self._surface_title = title
        self.workspace = MemoryWorkspace()
        self.package = CursorHistoryPackage(
            self.workspace, config=config or HistoryConfig.from_env()
        )
        self.adapter: TextualHistoryAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._telemetry = telemetry.get_logger("cursor_history.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.package.activate()
        self.workspace.open(self._text, surface_id=self._surface_title)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            log=self._telemetry.debug,
        )
        self.adapter = TextualHistoryAdapter(self.package, self.workspace, hooks)

    def on_unmount(self) -> None:
        self.package.deactivate()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+c", "ctrl+q"}:
            return
        if self.adapter.handle_key(event.key, text=event.character):
            event.stop()

    def _update_buffer(self, view: BufferView) -> None:
        self._state.buffer_text = render_buffer(view)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Browse a file and step through cursor history."
    )
    parser.add_argument("path", nargs="?", help="File to open (default: sample text)")
    parser.add_argument(
        "--max-history",
        type=int,
        default=HistoryConfig.from_env().max_history_size,
        help="Maximum positions remembered per surface "
        "(default: CURSOR_HISTORY_MAX_HISTORY_SIZE or 1000)",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="Telemetry preset to activate before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = HistoryConfig.from_env().with_overrides(max_history_size=args.max_history)
    if args.path:
        path = Path(args.path)
        app = CursorHistoryApp(
            text=path.read_text(encoding="utf-8"), title=path.name, config=config
        )
    else:
        app = CursorHistoryApp(config=config)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
