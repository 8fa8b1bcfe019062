"""Package lifecycle and the four outward-facing history commands."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Hashable, Iterator, Mapping, Optional

from .config import HistoryConfig
from .errors import PackageStateError, UnknownCommandError
from .history import Clock, SurfaceTraveler, TravelerRegistry
from .host.events import CompositeDisposable
from .host.protocols import CursorMoveEvent, HistoryHost, Position, Surface
from .runtime.telemetry import record_event, span

COMMAND_PREFIX = "cursor-history"
LOGGER_NAME = "cursor_history.commands"


@dataclass(frozen=True, slots=True)
class CommandRef:
    """A named, argument-free command."""

    id: str
    handler: Callable[[], object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CommandRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self) -> object:
        return self.handler()


class CommandRegistry:
    """Name -> command table the host binds keys against."""

    def __init__(self) -> None:
        self._commands: Dict[str, CommandRef] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandRef]:
        return iter(self._commands.values())

    def register(self, command: CommandRef, *, replace: bool = False) -> CommandRef:
        if not replace and command.id in self._commands:
            raise ValueError(f"Command '{command.id}' already registered")
        self._commands[command.id] = command
        return command

    def unregister(self, name: str) -> Optional[CommandRef]:
        return self._commands.pop(name, None)

    def dispatch(self, name: str) -> object:
        command = self._commands.get(name)
        if command is None:
            raise UnknownCommandError(name)
        with span(
            "commands::dispatch",
            logger_name=LOGGER_NAME,
            component="commands",
            metadata={"command": name},
        ):
            return command()


class CursorHistoryPackage:
    """Explicitly owned context wiring a host to a ``TravelerRegistry``.

    ``activate`` subscribes to the host and registers the commands;
    ``deactivate`` clears every timeline (releasing anchors) and detaches.
    """

    def __init__(
        self,
        host: HistoryHost,
        *,
        config: Optional[HistoryConfig] = None,
        commands: Optional[CommandRegistry] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.host = host
        self.config = config or HistoryConfig()
        self.commands = commands or CommandRegistry()
        self._clock = clock
        self._registry: Optional[TravelerRegistry] = None
        self._disposables: Optional[CompositeDisposable] = None
        self._surface_subscriptions: Dict[Hashable, CompositeDisposable] = {}

    @property
    def active(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> TravelerRegistry:
        if self._registry is None:
            raise PackageStateError("cursor history package is not active")
        return self._registry

    def activate(self) -> None:
        if self._registry is not None:
            raise PackageStateError("cursor history package is already active")
        self._registry = TravelerRegistry(
            self.host, config=self.config, clock=self._clock
        )
        self._disposables = CompositeDisposable()
        self._disposables.add(self.host.observe_surfaces(self._watch_surface))
        for name, handler, description in (
            ("previous", self.previous, "Jump to the previous cursor position"),
            ("next", self.next, "Jump to the next cursor position"),
            ("push", self.push, "Record the current cursor position"),
            ("clear", self.clear, "Forget this surface's cursor history"),
        ):
            self.commands.register(
                CommandRef(
                    id=f"{COMMAND_PREFIX}:{name}",
                    handler=handler,
                    description=description,
                ),
                replace=True,
            )
        record_event(
            "package.activate",
            data={"capacity": self.config.max_history_size, "scope": self.config.scope},
            logger_name=LOGGER_NAME,
        )

    def deactivate(self) -> None:
        if self._registry is None:
            return
        for name in ("previous", "next", "push", "clear"):
            self.commands.unregister(f"{COMMAND_PREFIX}:{name}")
        self._registry.clear()
        for subscriptions in self._surface_subscriptions.values():
            subscriptions.dispose()
        self._surface_subscriptions.clear()
        if self._disposables is not None:
            self._disposables.dispose()
        self._registry = None
        self._disposables = None
        record_event("package.deactivate", logger_name=LOGGER_NAME)

    def on_capacity_changed(self, capacity: int) -> None:
        self.config = self.config.with_overrides(max_history_size=capacity)
        if self._registry is not None:
            self._registry.set_capacity(capacity)

    # -- commands ------------------------------------------------------------
    def previous(self) -> Optional[Position]:
        traveler = self._active_traveler()
        return traveler.move_to_past() if traveler else None

    def next(self) -> Optional[Position]:
        traveler = self._active_traveler()
        return traveler.move_to_future() if traveler else None

    def push(self) -> Optional[Position]:
        traveler = self._active_traveler()
        return traveler.record_current_position() if traveler else None

    def clear(self) -> None:
        traveler = self._active_traveler()
        if traveler is not None:
            traveler.clear_history()

    # -- host wiring ---------------------------------------------------------
    def _active_traveler(self) -> Optional[SurfaceTraveler]:
        if self._registry is None:
            return None
        surface = self.host.active_surface()
        if surface is None:
            return None
        return self._registry.get_or_create(surface)

    def _watch_surface(self, surface: Surface) -> None:
        if surface.id in self._surface_subscriptions:
            return
        subscriptions = CompositeDisposable()
        subscriptions.add(
            self.host.on_cursor_moved(
                surface, lambda event: self._on_cursor_moved(surface, event)
            )
        )
        subscriptions.add(
            self.host.on_surface_closed(surface, lambda: self._on_closed(surface))
        )
        self._surface_subscriptions[surface.id] = subscriptions

    def _on_cursor_moved(self, surface: Surface, event: CursorMoveEvent) -> None:
        if self._registry is None:
            return
        self._registry.get_or_create(surface).handle_cursor_moved(event)

    def _on_closed(self, surface: Surface) -> None:
        subscriptions = self._surface_subscriptions.pop(surface.id, None)
        if subscriptions is not None:
            subscriptions.dispose()
        if self._registry is not None:
            self._registry.remove(surface)


__all__ = [
    "COMMAND_PREFIX",
    "CommandRef",
    "CommandRegistry",
    "CursorHistoryPackage",
]
