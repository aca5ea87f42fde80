"""
Capability interfaces consumed by the row processor.

The processor only depends on these protocols, so the Google adapters
in the infrastructure layer can be swapped for in-memory doubles.
"""

from typing import Optional, Protocol, Sequence


class Table(Protocol):
    """A table readable cell by cell, rows and columns 1-based."""

    def cell(self, row: int, column: int) -> Optional[str]:
        ...


class Message(Protocol):
    """A single mail message that can be forwarded."""

    message_id: str

    def forward(self, recipients: str) -> None:
        ...


class Thread(Protocol):
    """A group of related messages as modeled by the mail service."""

    thread_id: str

    def first_message(self) -> Message:
        ...


class MailService(Protocol):
    """Keyword/operator search over mailbox threads."""

    def search(self, query: str) -> Sequence[Thread]:
        ...
