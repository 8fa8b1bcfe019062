from __future__ import annotations

from typing import List

import pytest

from conftest import FakeClock
from cursor_history.buffer import Buffer, BufferValidationError, shift_position
from cursor_history.commands import CursorHistoryPackage
from cursor_history.host.memory import MemoryWorkspace
from cursor_history.host.protocols import CursorMoveEvent


@pytest.mark.parametrize(
    ("position", "start", "end", "text", "expected"),
    [
        ((1, 4), (2, 0), (2, 0), "x", (1, 4)),  # edit after anchor
        ((3, 2), (1, 0), (1, 0), "new\n", (4, 2)),  # line inserted above
        ((1, 5), (1, 2), (1, 2), "abc", (1, 8)),  # insertion earlier on same row
        ((1, 2), (1, 2), (1, 2), "abc", (1, 5)),  # insertion exactly at anchor
        ((2, 3), (1, 0), (2, 1), "", (1, 2)),  # join lines across anchor row
        ((1, 3), (1, 1), (1, 6), "", (1, 1)),  # anchor inside deletion
        ((5, 0), (1, 0), (3, 0), "", (3, 0)),  # rows deleted above
    ],
)
def test_shift_position(position, start, end, text, expected) -> None:
    assert shift_position(position, start, end, text) == expected


def test_buffer_edits_move_anchors() -> None:
    buffer = Buffer.from_text("alpha\nbeta\ngamma")
    anchor = buffer.anchors.create((2, 3))

    buffer.insert_text("zero\n", at=(0, 0))
    assert buffer.anchors.resolve(anchor) == (3, 3)

    buffer.delete_range((0, 0), (2, 0))
    assert buffer.anchors.resolve(anchor) == (1, 3)
    assert buffer.document.text == "beta\ngamma"


def test_buffer_rejects_out_of_range_edits() -> None:
    buffer = Buffer.from_text("one")

    with pytest.raises(BufferValidationError):
        buffer.insert_text("x", at=(3, 0))


def test_set_cursor_clips_and_notifies_on_change() -> None:
    buffer = Buffer.from_text("ab\ncdef")
    seen: List[tuple] = []
    buffer.add_cursor_listener(lambda old, new: seen.append((old, new)))

    buffer.set_cursor(9, 9)
    buffer.set_cursor(1, 4)

    assert buffer.cursor == (1, 4)
    assert seen == [((0, 0), (1, 4))]


def test_anchor_table_rejects_double_release() -> None:
    buffer = Buffer.from_text("text")
    anchor = buffer.anchors.create((0, 1))
    buffer.anchors.release(anchor)

    with pytest.raises(KeyError):
        buffer.anchors.release(anchor)


def test_workspace_emits_screen_positions_with_folds() -> None:
    workspace = MemoryWorkspace()
    surface = workspace.open("\n".join(str(n) for n in range(30)))
    surface.fold(5, 10)
    events: List[CursorMoveEvent] = []
    workspace.on_cursor_moved(surface, events.append)

    surface.buffer.set_cursor(12, 0)

    assert events[-1].new_position == (12, 0)
    assert events[-1].new_screen_row == 7
    assert workspace.screen_row_of(surface, (8, 0)) == 5


def test_observe_surfaces_sees_existing_and_future() -> None:
    workspace = MemoryWorkspace()
    first = workspace.open("a")
    seen: List[str] = []

    subscription = workspace.observe_surfaces(lambda surface: seen.append(surface.id))
    second = workspace.open("b")
    subscription.dispose()
    workspace.open("c")

    assert seen == [first.id, second.id]


def test_closing_active_surface_activates_the_latest_remaining() -> None:
    workspace = MemoryWorkspace()
    first = workspace.open("a")
    second = workspace.open("b")

    workspace.close(second)

    assert workspace.active_surface() is first
    workspace.close(first)
    assert workspace.active_surface() is None


def test_history_follows_text_edits(clock: FakeClock) -> None:
    workspace = MemoryWorkspace()
    package = CursorHistoryPackage(workspace, clock=clock)
    package.activate()
    surface = workspace.open("\n".join(f"row {n}" for n in range(50)))
    for row, col in ((5, 0), (20, 2), (40, 0)):
        clock.advance(0.5)
        surface.buffer.set_cursor(row, col)

    clock.advance(0.5)
    surface.buffer.insert_text("one\ntwo\nthree\n", at=(10, 0))

    traveler = package.registry.get_or_create(surface)
    assert traveler.snapshot().positions == ((0, 0), (23, 2), (43, 0), (13, 0))
    assert package.previous() == (43, 0)
    assert package.previous() == (23, 2)
    assert surface.buffer.cursor == (23, 2)
