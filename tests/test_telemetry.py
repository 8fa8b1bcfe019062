from __future__ import annotations

import pytest

from cursor_history.runtime import telemetry


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_config_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_handle_collects_metadata() -> None:
    with telemetry.span(
        "tests::span", component=True, metadata={"surface": "demo", "index": 2}
    ) as handle:
        handle.add_metadata("trimmed", 3)

    assert handle.component_name == "tests::span"
    assert handle.metadata == {"surface": "demo", "index": "2", "trimmed": "3"}


def test_span_reraises_after_logging_failure() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("tests::failing", component="tests"):
            raise KeyError("missing")


def test_loggers_are_cached_per_name() -> None:
    assert telemetry.get_logger("tests.cache") is telemetry.get_logger("tests.cache")
