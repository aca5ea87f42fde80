"""
Tests for Gmail API Client.

The Gmail API resource is replaced by a MagicMock.
"""

import base64
from email.message import EmailMessage
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from sheet_forwarder.config.settings import GmailSettings
from sheet_forwarder.core.exceptions import GmailError
from sheet_forwarder.infrastructure.gmail import GmailMailService, GmailMessage, GmailThread
from sheet_forwarder.infrastructure.gmail.forward import parse_message
from sheet_forwarder.infrastructure.metrics import get_metrics


def _http_error(status: int) -> HttpError:
    return HttpError(httplib2.Response({"status": status}), b'{"error": {"message": "boom"}}')


def _raw_message() -> str:
    message = EmailMessage()
    message["From"] = "news@x.com"
    message["Subject"] = "Digest"
    message.set_content("Hello")
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


@pytest.fixture
def gmail_service():
    """Mock Gmail API resource."""
    return MagicMock()


@pytest.fixture
def gmail_settings():
    return GmailSettings(user_id="me", sender=None, delegated_user=None)


class TestSearch:
    """Tests for GmailMailService.search."""

    def test_search_returns_threads_in_api_order(self, gmail_service, gmail_settings):
        threads_api = gmail_service.users.return_value.threads.return_value
        threads_api.list.return_value.execute.return_value = {
            "threads": [{"id": "t1"}, {"id": "t2"}],
        }
        mail = GmailMailService(service=gmail_service, gmail_settings=gmail_settings)

        threads = mail.search("from:news@x.com newer_than:1d")

        assert [t.thread_id for t in threads] == ["t1", "t2"]
        threads_api.list.assert_called_once_with(
            userId="me",
            q="from:news@x.com newer_than:1d",
        )
        assert get_metrics().searches_total.value(status="match") == 1

    def test_search_without_results_returns_empty_list(self, gmail_service, gmail_settings):
        threads_api = gmail_service.users.return_value.threads.return_value
        threads_api.list.return_value.execute.return_value = {"resultSizeEstimate": 0}
        mail = GmailMailService(service=gmail_service, gmail_settings=gmail_settings)

        assert mail.search("nothing") == []

    def test_search_http_error_raises_gmail_error(self, gmail_service, gmail_settings):
        threads_api = gmail_service.users.return_value.threads.return_value
        threads_api.list.return_value.execute.side_effect = _http_error(500)
        mail = GmailMailService(service=gmail_service, gmail_settings=gmail_settings)

        with pytest.raises(GmailError) as exc_info:
            mail.search("q")

        assert exc_info.value.status_code == 500


class TestFirstMessage:
    """Tests for GmailThread.first_message."""

    def test_returns_first_message(self, gmail_service):
        threads_api = gmail_service.users.return_value.threads.return_value
        threads_api.get.return_value.execute.return_value = {
            "id": "t1",
            "messages": [{"id": "m1"}, {"id": "m2"}],
        }

        message = GmailThread(gmail_service, "me", "t1").first_message()

        assert message.message_id == "m1"
        threads_api.get.assert_called_once_with(userId="me", id="t1", format="minimal")

    def test_empty_thread_raises_gmail_error(self, gmail_service):
        threads_api = gmail_service.users.return_value.threads.return_value
        threads_api.get.return_value.execute.return_value = {"id": "t1", "messages": []}

        with pytest.raises(GmailError):
            GmailThread(gmail_service, "me", "t1").first_message()


class TestForward:
    """Tests for GmailMessage.forward."""

    def test_forward_sends_built_message(self, gmail_service):
        messages_api = gmail_service.users.return_value.messages.return_value
        messages_api.get.return_value.execute.return_value = {"id": "m1", "raw": _raw_message()}
        messages_api.send.return_value.execute.return_value = {"id": "sent-1"}

        GmailMessage(gmail_service, "me", "m1", sender="bot@y.com").forward("a@example.com, b@example.com")

        messages_api.get.assert_called_once_with(userId="me", id="m1", format="raw")
        send_kwargs = messages_api.send.call_args.kwargs
        assert send_kwargs["userId"] == "me"

        sent = parse_message(base64.urlsafe_b64decode(send_kwargs["body"]["raw"]))
        assert sent["To"] == "a@example.com, b@example.com"
        assert sent["From"] == "bot@y.com"
        assert sent["Subject"] == "Fwd: Digest"
        assert get_metrics().forwards_sent_total.value(status="success") == 1

    def test_send_failure_raises_gmail_error(self, gmail_service):
        messages_api = gmail_service.users.return_value.messages.return_value
        messages_api.get.return_value.execute.return_value = {"id": "m1", "raw": _raw_message()}
        messages_api.send.return_value.execute.side_effect = _http_error(400)

        with pytest.raises(GmailError) as exc_info:
            GmailMessage(gmail_service, "me", "m1").forward("")

        assert exc_info.value.status_code == 400
        assert get_metrics().forwards_sent_total.value(status="error") == 1

    def test_fetch_failure_does_not_send(self, gmail_service):
        messages_api = gmail_service.users.return_value.messages.return_value
        messages_api.get.return_value.execute.side_effect = _http_error(404)

        with pytest.raises(GmailError):
            GmailMessage(gmail_service, "me", "m1").forward("a@example.com")

        messages_api.send.assert_not_called()
