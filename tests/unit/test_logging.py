"""
Tests for the structured JSON logger.
"""

import json
import logging

import pytest
from freezegun import freeze_time

from sheet_forwarder.infrastructure.logging import JsonFormatter, StructuredLogger, log_duration


def _record(level=logging.INFO, msg="hello", extra_fields=None) -> logging.LogRecord:
    record = logging.LogRecord("test", level, "/app/processor.py", 42, msg, None, None, "run")
    if extra_fields is not None:
        record.extra_fields = extra_fields
    return record


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    @freeze_time("2024-01-15 10:00:00")
    def test_formats_cloud_logging_entry(self):
        entry = json.loads(JsonFormatter().format(_record()))

        assert entry["severity"] == "INFO"
        assert entry["message"] == "hello"
        assert entry["timestamp"] == "2024-01-15T10:00:00+00:00"
        assert "logging.googleapis.com/sourceLocation" not in entry

    def test_warning_carries_source_location(self):
        entry = json.loads(JsonFormatter().format(_record(level=logging.WARNING)))

        assert entry["severity"] == "WARNING"
        assert entry["logging.googleapis.com/sourceLocation"]["line"] == 42

    def test_sensitive_fields_are_redacted(self):
        entry = json.loads(JsonFormatter().format(_record(extra_fields={
            "row_index": 2,
            "refresh_token": "abc",
        })))

        assert entry["row_index"] == 2
        assert entry["refresh_token"] == "[redacted]"

    def test_long_values_are_truncated(self):
        entry = json.loads(JsonFormatter().format(_record(extra_fields={"query": "x" * 2000})))

        assert entry["query"].endswith("... [truncated]")
        assert len(entry["query"]) < 1100

    def test_request_context_is_included(self, app):
        with app.test_request_context("/run-forwarding", headers={
            "X-Cloud-Trace-Context": "trace123/1;o=1",
            "X-CloudScheduler-JobName": "daily-forward",
        }):
            app.preprocess_request()
            entry = json.loads(JsonFormatter().format(_record()))

        assert entry["request_id"] == "trace123"
        assert entry["job_name"] == "daily-forward"


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_bound_fields_are_merged(self):
        adapter = StructuredLogger(logging.getLogger("test"), {}).with_fields(run="r1")

        msg, kwargs = adapter.process("hi", {"extra": {"extra_fields": {"row_index": 3}}})

        assert kwargs["extra"]["extra_fields"] == {"run": "r1", "row_index": 3}


class TestLogDuration:
    """Tests for log_duration decorator."""

    def test_returns_result(self):
        @log_duration("op")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_reraises_errors(self):
        @log_duration("op")
        def fail():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            fail()
