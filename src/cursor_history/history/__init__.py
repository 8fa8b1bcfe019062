"""Position-history state machine: timeline, momentum, travelers."""

from .anchors import AnchoredPosition
from .momentum import Clock, MomentumTracker
from .registry import RegistryStats, TravelerRegistry
from .timeline import AnchorFactory, Timeline, TimelineView
from .traveler import PendingMove, SurfaceTraveler

__all__ = [
    "AnchoredPosition",
    "AnchorFactory",
    "Clock",
    "MomentumTracker",
    "PendingMove",
    "RegistryStats",
    "SurfaceTraveler",
    "Timeline",
    "TimelineView",
    "TravelerRegistry",
]
