"""
Gmail API Client.

Thread search and message forwarding on top of google-api-python-client.
"""

import base64
from typing import Any, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheet_forwarder.config import settings
from sheet_forwarder.config.settings import GmailSettings
from sheet_forwarder.core.exceptions import GmailError
from sheet_forwarder.infrastructure.gmail.forward import build_forward_message, encode_raw
from sheet_forwarder.infrastructure.google_auth import load_credentials
from sheet_forwarder.infrastructure.logging import get_logger, log_duration
from sheet_forwarder.infrastructure.metrics import get_metrics


logger = get_logger(__name__)


def _gmail_error(action: str, error: HttpError) -> GmailError:
    status_code = getattr(error, "status_code", None) or getattr(error.resp, "status", None)
    return GmailError(
        f"{action} failed: {error}",
        status_code=int(status_code) if status_code else None,
    )


class GmailMessage:
    """A Gmail message, fetched lazily when forwarded."""

    def __init__(self, service: Any, user_id: str, message_id: str, sender: Optional[str] = None) -> None:
        self._service = service
        self._user_id = user_id
        self._sender = sender
        self.message_id = message_id

    def raw(self) -> bytes:
        """Fetch the message as raw RFC 822 bytes."""
        try:
            response = self._service.users().messages().get(
                userId=self._user_id,
                id=self.message_id,
                format="raw",
            ).execute()
        except HttpError as e:
            raise _gmail_error(f"Fetching message {self.message_id}", e) from e

        return base64.urlsafe_b64decode(response["raw"].encode("ascii"))

    @log_duration("gmail_forward_message")
    def forward(self, recipients: str) -> None:
        """
        Forward this message to ``recipients``.

        Args:
            recipients: Comma-separated recipient list, passed verbatim.

        Raises:
            GmailError: If fetching or sending fails.
        """
        forward = build_forward_message(self.raw(), recipients, sender=self._sender)

        try:
            sent = self._service.users().messages().send(
                userId=self._user_id,
                body={"raw": encode_raw(forward)},
            ).execute()
        except HttpError as e:
            get_metrics().forwards_sent_total.inc(status="error")
            raise _gmail_error(f"Forwarding message {self.message_id}", e) from e

        get_metrics().forwards_sent_total.inc(status="success")
        logger.info(
            f"Forwarded message {self.message_id}",
            extra={"extra_fields": {
                "message_id": self.message_id,
                "sent_message_id": sent.get("id"),
                "recipients": recipients,
            }}
        )


class GmailThread:
    """A Gmail thread as returned by a search."""

    def __init__(self, service: Any, user_id: str, thread_id: str, sender: Optional[str] = None) -> None:
        self._service = service
        self._user_id = user_id
        self._sender = sender
        self.thread_id = thread_id

    def first_message(self) -> GmailMessage:
        """
        Get the first message of the thread.

        Gmail returns a thread's messages in chronological order.

        Raises:
            GmailError: If the thread cannot be fetched or is empty.
        """
        try:
            thread = self._service.users().threads().get(
                userId=self._user_id,
                id=self.thread_id,
                format="minimal",
            ).execute()
        except HttpError as e:
            raise _gmail_error(f"Fetching thread {self.thread_id}", e) from e

        messages = thread.get("messages") or []
        if not messages:
            raise GmailError(f"Thread {self.thread_id} has no messages")

        return GmailMessage(self._service, self._user_id, messages[0]["id"], self._sender)


class GmailMailService:
    """
    Mail service backed by the Gmail API.

    Only the first page of search results is fetched; callers only ever
    look at the first thread.
    """

    def __init__(
        self,
        service: Optional[Any] = None,
        gmail_settings: Optional[GmailSettings] = None,
    ) -> None:
        """
        Initialize the Gmail client.

        Args:
            service: A built Gmail API resource. Built from the Google
                credentials when omitted.
            gmail_settings: Gmail settings. Defaults to global settings.
        """
        self._settings = gmail_settings or settings.gmail
        if service is None:
            credentials = load_credentials(subject=self._settings.delegated_user)
            service = build("gmail", "v1", credentials=credentials, cache_discovery=False)
        self._service = service

    def search(self, query: str) -> List[GmailThread]:
        """
        Search threads with Gmail query syntax.

        Args:
            query: Gmail search expression, e.g. ``from:a@b.com newer_than:1d``.

        Returns:
            Matching threads in the order Gmail returns them.

        Raises:
            GmailError: If the search fails.
        """
        try:
            response = self._service.users().threads().list(
                userId=self._settings.user_id,
                q=query,
            ).execute()
        except HttpError as e:
            get_metrics().searches_total.inc(status="error")
            raise _gmail_error("Thread search", e) from e

        threads = [
            GmailThread(self._service, self._settings.user_id, item["id"], self._settings.sender)
            for item in response.get("threads", [])
        ]
        get_metrics().searches_total.inc(status="match" if threads else "no_match")

        logger.debug(
            f"Search matched {len(threads)} threads",
            extra={"extra_fields": {"query": query, "thread_count": len(threads)}}
        )
        return threads
