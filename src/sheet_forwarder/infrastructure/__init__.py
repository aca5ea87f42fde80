"""
Infrastructure Layer.

This layer contains all external dependencies and adapters:
- Logging and metrics
- Google credentials
- Google Sheets table
- Gmail mail service
"""

from sheet_forwarder.infrastructure.logging import (
    get_logger,
    log_duration,
    log_request_context,
    logger,
    StructuredLogger,
)


__all__ = [
    "get_logger",
    "log_duration",
    "log_request_context",
    "logger",
    "StructuredLogger",
]
