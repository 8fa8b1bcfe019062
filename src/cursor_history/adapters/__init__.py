"""UI adapters hosting the history engine."""
