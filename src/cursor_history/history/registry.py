"""Registry mapping surfaces to their travelers."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Hashable, Iterator, Optional

from cursor_history.config import HistoryConfig
from cursor_history.host.protocols import HistoryHost, Surface
from cursor_history.runtime.telemetry import record_event, span

from .momentum import Clock
from .traveler import SurfaceTraveler

LOGGER_NAME = "cursor_history.registry"


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    traveler_count: int
    entry_count: int
    capacity: int
    scope: str


class TravelerRegistry:
    """Owns every live traveler; one per history key.

    The key is the surface id, or ``(pane_id, surface_id)`` when the config
    scope is ``"pane"``.
    """

    def __init__(
        self,
        host: HistoryHost,
        *,
        config: Optional[HistoryConfig] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.host = host
        self.config = config or HistoryConfig()
        self._clock = clock
        self._travelers: Dict[Hashable, SurfaceTraveler] = {}

    def __len__(self) -> int:
        return len(self._travelers)

    def __iter__(self) -> Iterator[SurfaceTraveler]:
        return iter(list(self._travelers.values()))

    def key_for(self, surface: Surface) -> Hashable:
        if self.config.scope == "pane":
            return (surface.pane_id, surface.id)
        return surface.id

    def get(self, surface: Surface) -> Optional[SurfaceTraveler]:
        return self._travelers.get(self.key_for(surface))

    def get_or_create(self, surface: Surface) -> SurfaceTraveler:
        key = self.key_for(surface)
        traveler = self._travelers.get(key)
        if traveler is None:
            traveler = SurfaceTraveler(
                self.host, surface, config=self.config, clock=self._clock
            )
            self._travelers[key] = traveler
            record_event(
                "registry.create",
                level="debug",
                data={"key": key, "capacity": self.config.max_history_size},
                logger_name=LOGGER_NAME,
            )
        return traveler

    def remove(self, surface: Surface) -> int:
        """Dispose every traveler belonging to ``surface``; returns how many."""

        doomed = [
            key
            for key, traveler in self._travelers.items()
            if traveler.surface.id == surface.id
        ]
        for key in doomed:
            self._travelers.pop(key).dispose()
        if doomed:
            record_event(
                "registry.remove",
                level="debug",
                data={"surface": surface.id, "count": len(doomed)},
                logger_name=LOGGER_NAME,
            )
        return len(doomed)

    def set_capacity(self, capacity: int) -> None:
        with span(
            "registry::set_capacity",
            logger_name=LOGGER_NAME,
            component="registry",
            metadata={"capacity": capacity},
        ) as handle:
            self.config = self.config.with_overrides(max_history_size=capacity)
            trimmed = 0
            for traveler in self._travelers.values():
                traveler.config = self.config
                trimmed += traveler.timeline.set_capacity(capacity)
            handle.add_metadata("trimmed", trimmed)

    def clear(self) -> None:
        with span(
            "registry::clear",
            logger_name=LOGGER_NAME,
            component="registry",
            metadata={"travelers": len(self._travelers)},
        ):
            for traveler in self._travelers.values():
                traveler.dispose()
            self._travelers.clear()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            traveler_count=len(self._travelers),
            entry_count=sum(len(t.timeline) for t in self._travelers.values()),
            capacity=self.config.max_history_size,
            scope=self.config.scope,
        )


__all__ = ["RegistryStats", "TravelerRegistry"]
