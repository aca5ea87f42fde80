"""
Structured JSON Logger for Google Cloud Run.

One JSON object per line on stdout, shaped for Google Cloud Logging:
severity, message, request correlation (trace id, Cloud Scheduler job)
and any fields passed through ``extra={"extra_fields": {...}}``.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, TypeVar

from flask import Flask, g, has_request_context, request


F = TypeVar("F", bound=Callable[..., Any])

MAX_VALUE_LENGTH = 1000

# Request-scoped attributes copied from flask.g into every entry
CONTEXT_ATTRIBUTES = ("request_id", "job_name", "endpoint")


class JsonFormatter(logging.Formatter):
    """JSON formatter for Google Cloud Logging."""

    SEVERITY_MAP = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    SENSITIVE_PATTERNS = frozenset([
        "password", "secret", "token", "api_key", "apikey",
        "authorization", "credential", "private_key",
    ])

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "severity": self.SEVERITY_MAP.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "logger": record.name,
        }

        if has_request_context():
            for attr in CONTEXT_ATTRIBUTES:
                value = getattr(g, attr, None)
                if value:
                    entry[attr] = value

        for key, value in (getattr(record, "extra_fields", None) or {}).items():
            if self._is_sensitive(key):
                entry[key] = "[redacted]"
            else:
                entry[key] = self._truncate(value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            entry["logging.googleapis.com/sourceLocation"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, ensure_ascii=False, default=str)

    def _is_sensitive(self, key: str) -> bool:
        key_lower = key.lower()
        return any(pattern in key_lower for pattern in self.SENSITIVE_PATTERNS)

    @staticmethod
    def _truncate(value: Any) -> Any:
        if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            return value[:MAX_VALUE_LENGTH] + "... [truncated]"
        return value


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter merging bound fields into ``extra_fields``."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get("extra", {})
        extra_fields = {**self.extra, **extra.pop("extra_fields", {})}
        kwargs["extra"] = {**extra, "extra_fields": extra_fields}
        return msg, kwargs

    def with_fields(self, **fields: Any) -> "StructuredLogger":
        """Create a new logger with additional bound fields."""
        return StructuredLogger(self.logger, {**self.extra, **fields})


def get_logger(name: str = "sheet-forwarder") -> StructuredLogger:
    """
    Create and configure a structured JSON logger.

    Args:
        name: Logger name.

    Returns:
        Configured StructuredLogger instance.
    """
    base_logger = logging.getLogger(name)

    if not base_logger.handlers:
        base_logger.setLevel(logging.DEBUG)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JsonFormatter())

        base_logger.addHandler(handler)
        base_logger.propagate = False

    return StructuredLogger(base_logger, {})


def log_request_context(app: Flask) -> None:
    """
    Flask middleware binding trace and scheduler context to each request.

    Args:
        app: Flask application instance.
    """
    request_logger = get_logger("request")

    @app.before_request
    def before_request() -> None:
        trace_header = request.headers.get("X-Cloud-Trace-Context", "")
        g.request_id = trace_header.split("/")[0] or uuid.uuid4().hex[:8]
        g.job_name = request.headers.get("X-CloudScheduler-JobName")
        g.endpoint = request.endpoint
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration_ms = None
        if hasattr(g, "start_time"):
            duration_ms = int((time.time() - g.start_time) * 1000)

        request_logger.info(
            f"{request.method} {request.path} -> {response.status_code}",
            extra={"extra_fields": {
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }}
        )
        return response


def log_duration(operation: str) -> Callable[[F], F]:
    """
    Decorator to measure and log operation duration.

    Args:
        operation: Operation name for logging.
    """
    def decorator(func: F) -> F:
        op_logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                op_logger.error(
                    f"{operation} failed: {e}",
                    extra={"extra_fields": {
                        "operation": operation,
                        "duration_ms": int((time.time() - start) * 1000),
                        "status": "error",
                        "error_type": type(e).__name__,
                    }}
                )
                raise
            op_logger.info(
                f"{operation} completed",
                extra={"extra_fields": {
                    "operation": operation,
                    "duration_ms": int((time.time() - start) * 1000),
                    "status": "success",
                }}
            )
            return result
        return wrapper  # type: ignore
    return decorator


# Global application logger
logger = get_logger("sheet-forwarder")
