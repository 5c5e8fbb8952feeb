"""Tests for the structured log formatters."""
import json
import logging
import sys

from log import JSONFormatter, TextFormatter, get_logger


def _record(**extra):
    record = logging.LogRecord("lingotales.test", logging.WARNING, __file__, 1, "Lookup %s", ("failed",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_keeps_known_extras():
    entry = json.loads(JSONFormatter().format(_record(endpoint="/api/word-info", secret="x")))
    assert entry["msg"] == "Lookup failed"
    assert entry["level"] == "warning"
    assert entry["endpoint"] == "/api/word-info"
    assert "secret" not in entry


def test_json_formatter_reports_exception():
    try:
        raise ValueError("bad payload")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    entry = json.loads(JSONFormatter().format(record))
    assert entry["error"] == "bad payload"
    assert entry["error_type"] == "ValueError"


def test_text_formatter_appends_extras():
    line = TextFormatter().format(_record(status_code=502))
    assert "lingotales.test: Lookup failed" in line
    assert line.endswith("status_code=502")


def test_loggers_share_the_namespace():
    assert get_logger("lingotales.db").name == "lingotales.db"
    assert get_logger("study").name == "lingotales.study"
    assert get_logger().handlers
