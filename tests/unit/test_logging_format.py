"""Tests for the unified logging format.

Target format: 2026-01-06T14:05:52Z [source] LEVEL message
"""

from __future__ import annotations

import io
import logging
import re
import sys
from unittest.mock import patch

from enrollment.logging_config import (
    TRACE,
    HealthCheckFilter,
    ISO8601Formatter,
    configure_logging,
    resolve_level,
)


def make_record(msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name="test", level=level, pathname="", lineno=0, msg=msg, args=(), exc_info=None)


class TestISO8601Formatter:
    def test_format_matches_target(self):
        output = ISO8601Formatter(source="api").format(make_record("Session started"))

        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z \[api\] INFO Session started$", output)

    def test_exception_text_is_appended(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("test", logging.ERROR, "", 0, "failed", (), sys.exc_info())

        output = ISO8601Formatter(source="api").format(record)

        assert "ERROR failed\nTraceback" in output
        assert "ValueError: bad" in output


class TestHealthCheckFilter:
    def test_health_access_logs_suppressed_at_info(self):
        health_filter = HealthCheckFilter()

        assert not health_filter.filter(make_record('127.0.0.1 - "GET /health HTTP/1.1" 200'))
        assert health_filter.filter(make_record('127.0.0.1 - "POST /api/registration/sessions HTTP/1.1" 201'))

    def test_debug_records_always_pass(self):
        assert HealthCheckFilter().filter(make_record("GET /health", level=logging.DEBUG))


class TestConfigureLogging:
    def test_level_names(self):
        assert resolve_level("trace") == TRACE
        assert resolve_level("DEBUG") == logging.DEBUG
        assert resolve_level("nonsense") == logging.INFO
        assert resolve_level("INFO", debug=True) == logging.DEBUG

    def test_level_from_environment(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "TRACE"}):
            assert resolve_level() == TRACE

    def test_root_logger_writes_target_format(self):
        stream = io.StringIO()
        with patch("sys.stdout", stream):
            root = configure_logging(source="worker", level=logging.INFO)

        logging.getLogger("enrollment.test").info("hello")

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert re.search(r"Z \[worker\] INFO hello$", stream.getvalue().strip())
        assert logging.getLogger("httpx").level == logging.WARNING
