"""Textual adapter; the runnable demo lives in ``.app``."""

from .controller import (
    DEFAULT_COMMAND_KEYS,
    MOTION_KEYS,
    TextualHistoryAdapter,
    TextualUIHooks,
)

__all__ = [
    "DEFAULT_COMMAND_KEYS",
    "MOTION_KEYS",
    "TextualHistoryAdapter",
    "TextualUIHooks",
]
