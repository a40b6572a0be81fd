"""
Tests for logging configuration and formatters.
"""
import json
import logging
import pytest
from chartengine.core.config import Settings
from chartengine.core.logging import CorrelationIdFilter, JSONFormatter, TextFormatter, configure_logging


def _record(message="hello", **extra):
    record = logging.LogRecord("chartengine.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_includes_extras():
    record = _record(correlation_id="abc", duration=0.25)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "chartengine.test"
    assert payload["correlation_id"] == "abc"
    assert payload["duration"] == 0.25
    assert "args" not in payload


def test_correlation_filter_sets_default():
    record = _record()

    assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "system"


def test_text_formatter_shows_correlation_id():
    line = TextFormatter().format(_record(correlation_id="req-1"))

    assert "[req-1]" in line
    assert line.endswith("hello")


def test_configure_logging_installs_single_handler(restore_root_logger):
    configure_logging(Settings(log_level="WARNING", log_format="json"))
    configure_logging(Settings(log_level="DEBUG", log_format="json"))

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
