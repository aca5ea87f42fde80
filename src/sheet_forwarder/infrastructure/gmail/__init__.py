"""Gmail adapter."""

from sheet_forwarder.infrastructure.gmail.client import (
    GmailMailService,
    GmailMessage,
    GmailThread,
)
from sheet_forwarder.infrastructure.gmail.forward import (
    build_forward_message,
    encode_raw,
    forward_subject,
)


__all__ = [
    "GmailMailService",
    "GmailMessage",
    "GmailThread",
    "build_forward_message",
    "encode_raw",
    "forward_subject",
]
