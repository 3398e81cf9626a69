"""Structured logging tests."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest
from structlog.testing import capture_logs

from tostring import ToStringSpec, configure_logging
from tostring.lib.logging import level_from_verbosity


class Sample:
    name: str = "s"


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_compile_emits_debug_event() -> None:
    with capture_logs() as logs:
        ToStringSpec(Sample, multi_line=True).include("name").compile()

    events = [entry for entry in logs if entry["event"] == "Compiled formatter."]
    assert len(events) == 1
    assert events[0]["log_level"] == "debug"
    assert events[0]["target"] == "Sample"
    assert events[0]["members"] == ["name"]
    assert events[0]["multi_line"] is True


def test_stringify_does_not_log() -> None:
    formatter = ToStringSpec(Sample).include("name").compile()

    with capture_logs() as logs:
        formatter.stringify(Sample())

    assert logs == []


def test_configure_logging_json_to_stream() -> None:
    stream = io.StringIO()
    configure_logging(json_mode=True, verbosity=2, stream=stream)

    ToStringSpec(Sample).include("name").compile()

    lines = [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]
    assert any(line["event"] == "Compiled formatter." for line in lines)


def test_configure_logging_filters_by_verbosity() -> None:
    stream = io.StringIO()
    configure_logging(json_mode=True, verbosity=0, stream=stream)

    ToStringSpec(Sample).include("name").compile()

    assert stream.getvalue() == ""


def test_level_from_verbosity() -> None:
    assert level_from_verbosity(-1) == logging.WARNING
    assert level_from_verbosity(0) == logging.WARNING
    assert level_from_verbosity(1) == logging.INFO
    assert level_from_verbosity(3) == logging.DEBUG


def test_configure_logging_reroutes_stdlib_logging_on_later_calls() -> None:
    first = io.StringIO()
    second = io.StringIO()

    configure_logging(verbosity=0, stream=first)
    configure_logging(verbosity=0, stream=second)
    logging.getLogger("tostring.lib.config").warning("Ignoring unknown tostring config key 'x'.")

    assert first.getvalue() == ""
    assert "Ignoring unknown tostring config key 'x'." in second.getvalue()
