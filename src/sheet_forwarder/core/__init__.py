"""Core package - Pure business logic with no external dependencies."""

from sheet_forwarder.core.exceptions import (
    BusinessError,
    ConfigurationError,
    ExternalServiceError,
    GmailError,
    InfrastructureError,
    SheetError,
    SheetForwarderError,
    ValidationError,
)
from sheet_forwarder.core.interfaces import MailService, Message, Table, Thread
from sheet_forwarder.core.models import (
    ConfigRow,
    FIRST_DATA_ROW,
    HEADER_ROW,
    QUERY_COLUMN,
    RECIPIENTS_COLUMN,
    RowOutcome,
)

__all__ = [
    # Exceptions
    "BusinessError",
    "ConfigurationError",
    "ExternalServiceError",
    "GmailError",
    "InfrastructureError",
    "SheetError",
    "SheetForwarderError",
    "ValidationError",
    # Interfaces
    "MailService",
    "Message",
    "Table",
    "Thread",
    # Models
    "ConfigRow",
    "FIRST_DATA_ROW",
    "HEADER_ROW",
    "QUERY_COLUMN",
    "RECIPIENTS_COLUMN",
    "RowOutcome",
]
