"""
Domain Models.

Rows read from the configuration sheet and the outcome of processing them.
Uses dataclasses for immutability and type safety.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


# Sheet layout: row 1 holds the column headers.
HEADER_ROW = 1
FIRST_DATA_ROW = HEADER_ROW + 1
QUERY_COLUMN = 1
RECIPIENTS_COLUMN = 2


@dataclass(frozen=True)
class ConfigRow:
    """
    A configuration row of the sheet.

    Attributes:
        row_index: 1-based sheet row number, also the row identity.
        search_query: Gmail search expression (column 1).
        recipients: Comma-separated recipient list (column 2), verbatim.
            Only read from the sheet when the query matched something.
    """
    row_index: int
    search_query: str
    recipients: Optional[str] = None


@dataclass(frozen=True)
class RowOutcome:
    """Result of processing a single configuration row."""
    row: ConfigRow
    thread_count: int
    forwarded: bool = False
    thread_id: Optional[str] = None
    message_id: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.thread_count > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response item."""
        return {
            "row_index": self.row.row_index,
            "search_query": self.row.search_query,
            "recipients": self.row.recipients,
            "thread_count": self.thread_count,
            "forwarded": self.forwarded,
            "thread_id": self.thread_id,
            "message_id": self.message_id,
        }
