from __future__ import annotations

from typing import Dict, List

import pytest

from cursor_history.history import AnchoredPosition, Timeline


class FakeClock:
    """Monotonic clock driven by hand, in seconds."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class AnchorLedger:
    """Minimal anchor capability that remembers every create/release."""

    def __init__(self) -> None:
        self.positions: Dict[int, tuple[int, int]] = {}
        self.released: List[int] = []
        self._serial = 0

    @property
    def live(self) -> int:
        return len(self.positions) - len(self.released)

    def create_anchor(self, surface: object, position: tuple[int, int]) -> int:
        del surface
        self._serial += 1
        self.positions[self._serial] = position
        return self._serial

    def resolve(self, handle: int) -> tuple[int, int]:
        assert handle not in self.released, "resolved after release"
        return self.positions[handle]

    def release(self, handle: int) -> None:
        assert handle not in self.released, "released twice"
        self.released.append(handle)


def make_timeline(ledger: AnchorLedger, *, capacity: int = 1000) -> Timeline:
    return Timeline(
        lambda position: AnchoredPosition.create(ledger, None, position),  # type: ignore[arg-type]
        capacity=capacity,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger() -> AnchorLedger:
    return AnchorLedger()
