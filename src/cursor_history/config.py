"""History configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Literal, Mapping, Optional

from .errors import ConfigurationError

ENV_PREFIX = "CURSOR_HISTORY_"

DEFAULT_MAX_HISTORY_SIZE = 1000
DEFAULT_DECAY_WINDOW_MS = 300
DEFAULT_NOISE_ROWS = 3
DEFAULT_ECHO_BUDGET = 2

HistoryScope = Literal["surface", "pane"]
SCOPES: tuple[str, ...] = ("surface", "pane")


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Tunables for recording and navigation.

    ``scope`` picks the history key: ``"surface"`` keeps one timeline per
    editing surface, ``"pane"`` one per (pane, surface) pair.
    """

    max_history_size: int = DEFAULT_MAX_HISTORY_SIZE
    decay_window_ms: int = DEFAULT_DECAY_WINDOW_MS
    noise_rows: int = DEFAULT_NOISE_ROWS
    scope: HistoryScope = "surface"
    synchronous_echo: bool = True
    echo_budget: int = DEFAULT_ECHO_BUDGET

    def __post_init__(self) -> None:
        if self.max_history_size < 1:
            raise ConfigurationError(
                "max_history_size must be at least 1", option="max_history_size"
            )
        if self.decay_window_ms < 0:
            raise ConfigurationError(
                "decay_window_ms cannot be negative", option="decay_window_ms"
            )
        if self.noise_rows < 0:
            raise ConfigurationError("noise_rows cannot be negative", option="noise_rows")
        if self.scope not in SCOPES:
            raise ConfigurationError(
                f"Unknown scope '{self.scope}', expected one of {SCOPES}",
                option="scope",
            )
        if self.echo_budget < 1:
            raise ConfigurationError("echo_budget must be positive", option="echo_budget")

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "HistoryConfig":
        """Build a config from ``CURSOR_HISTORY_*`` variables over the defaults."""

        env = os.environ if environ is None else environ
        changes: dict[str, object] = {}
        for item in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{item.name.upper()}")
            if raw is None:
                continue
            changes[item.name] = _coerce(item.name, raw, getattr(cls(), item.name))
        return cls(**changes)  # type: ignore[arg-type]

    def with_overrides(self, **changes: object) -> "HistoryConfig":
        unknown = set(changes) - {item.name for item in fields(self)}
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s): {', '.join(sorted(unknown))}",
                option=sorted(unknown)[0],
            )
        return replace(self, **changes)  # type: ignore[arg-type]


def _coerce(name: str, raw: str, default: object) -> object:
    value = raw.strip()
    if isinstance(default, bool):
        return value.lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigurationError(
                f"{ENV_PREFIX}{name.upper()} must be an integer, got '{raw}'",
                option=name,
            ) from exc
    return value.lower()


__all__ = [
    "DEFAULT_DECAY_WINDOW_MS",
    "DEFAULT_MAX_HISTORY_SIZE",
    "DEFAULT_NOISE_ROWS",
    "HistoryConfig",
    "HistoryScope",
    "SCOPES",
]
