"""Back/forward navigation through recent cursor positions, per surface."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "config",
    "errors",
    "history",
    "host",
    "runtime",
]

__version__ = "0.1.0"
