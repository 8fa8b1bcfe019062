"""Subscription primitives shared by hosts and the package lifecycle."""

from __future__ import annotations

from typing import Callable, Dict, Hashable, List, Optional

from .protocols import Disposable


class Subscription:
    """Disposable wrapping a detach callback; disposing twice is harmless."""

    def __init__(self, detach: Optional[Callable[[], None]] = None) -> None:
        self._detach = detach

    @property
    def disposed(self) -> bool:
        return self._detach is None

    def dispose(self) -> None:
        detach, self._detach = self._detach, None
        if detach is not None:
            detach()


class CompositeDisposable:
    """Collects subscriptions so they can be torn down together."""

    def __init__(self) -> None:
        self._items: List[Disposable] = []
        self.disposed = False

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: Disposable) -> Disposable:
        if self.disposed:
            item.dispose()
        else:
            self._items.append(item)
        return item

    def dispose(self) -> None:
        self.disposed = True
        items, self._items = self._items, []
        for item in reversed(items):
            item.dispose()


class EventBus:
    """Minimal synchronous event bus keyed by (event, topic)."""

    def __init__(self) -> None:
        self._subscribers: Dict[tuple[str, Hashable], list[Callable[..., None]]] = {}

    def subscribe(
        self, event: str, callback: Callable[..., None], *, topic: Hashable = None
    ) -> Subscription:
        key = (event, topic)
        self._subscribers.setdefault(key, []).append(callback)

        def detach() -> None:
            callbacks = self._subscribers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(key, None)

        return Subscription(detach)

    def emit(self, event: str, *payload: object, topic: Hashable = None) -> None:
        for callback in list(self._subscribers.get((event, topic), [])):
            callback(*payload)

    def subscriber_count(self, event: str, *, topic: Hashable = None) -> int:
        return len(self._subscribers.get((event, topic), []))


__all__ = ["CompositeDisposable", "EventBus", "Subscription"]
