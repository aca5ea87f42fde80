"""
Test Configuration and Fixtures.

Provides shared fixtures and in-memory table/mail doubles for all tests.
"""

from typing import Dict, List, Optional, Tuple

import pytest
from flask import Flask
from flask.testing import FlaskClient

from sheet_forwarder.app import create_app
from sheet_forwarder.infrastructure import metrics as metrics_module


class FakeTable:
    """Table double backed by a dict, recording every cell read."""

    def __init__(self, cells: Optional[Dict[Tuple[int, int], str]] = None) -> None:
        self.cells = cells or {}
        self.reads: List[Tuple[int, int]] = []

    @classmethod
    def from_rows(cls, rows: Dict[int, Tuple[str, str]]) -> "FakeTable":
        cells = {}
        for row_index, (query, recipients) in rows.items():
            cells[(row_index, 1)] = query
            cells[(row_index, 2)] = recipients
        return cls(cells)

    def cell(self, row: int, column: int) -> Optional[str]:
        self.reads.append((row, column))
        return self.cells.get((row, column)) or None

    @property
    def rows_read(self) -> List[int]:
        return [row for row, column in self.reads if column == 1]


class FakeMessage:
    def __init__(self, message_id: str, error: Optional[Exception] = None) -> None:
        self.message_id = message_id
        self.error = error
        self.forwarded_to: List[str] = []

    def forward(self, recipients: str) -> None:
        if self.error:
            raise self.error
        self.forwarded_to.append(recipients)


class FakeThread:
    def __init__(self, thread_id: str, messages: List[FakeMessage]) -> None:
        self.thread_id = thread_id
        self.messages = messages

    def first_message(self) -> FakeMessage:
        return self.messages[0]


class FakeMail:
    """Mail service double mapping queries to thread lists."""

    def __init__(self, results: Optional[Dict[str, List[FakeThread]]] = None) -> None:
        self.results = results or {}
        self.searches: List[str] = []
        self.errors: Dict[str, Exception] = {}

    def search(self, query: str) -> List[FakeThread]:
        self.searches.append(query)
        if query in self.errors:
            raise self.errors[query]
        return self.results.get(query, [])


def make_thread(thread_id: str, *message_ids: str) -> FakeThread:
    return FakeThread(thread_id, [FakeMessage(m) for m in message_ids])


@pytest.fixture
def app() -> Flask:
    """Create test Flask application."""
    return create_app({"TESTING": True})


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create test client."""
    return app.test_client()


@pytest.fixture(autouse=True)
def fresh_metrics(monkeypatch):
    """Give every test its own metrics registry."""
    monkeypatch.setattr(metrics_module, "_metrics", None)
    yield
