"""
Row Processor Service.

Scans the configuration sheet and forwards the first match of each query.
"""

from typing import List

from sheet_forwarder.core.interfaces import MailService, Table
from sheet_forwarder.core.models import (
    ConfigRow,
    FIRST_DATA_ROW,
    QUERY_COLUMN,
    RECIPIENTS_COLUMN,
    RowOutcome,
)
from sheet_forwarder.infrastructure.logging import get_logger
from sheet_forwarder.infrastructure.metrics import get_metrics


logger = get_logger(__name__)


class RowProcessor:
    """
    Search-then-forward over the rows of a configuration table.

    Rows are read from row 2 downward and the scan stops at the first
    row with an empty query cell; anything below a gap is never read.
    For each query with at least one matching thread, the first message
    of the first thread is forwarded to the row's recipients verbatim.

    Failures are not caught: the first error from the table or the mail
    service ends the run and leaves the remaining rows unprocessed.
    Nothing is remembered between runs, so a thread that still matches
    its query is forwarded again on the next run. Queries are expected
    to exclude old mail themselves (``newer_than:1d``).
    """

    def __init__(
        self,
        table: Table,
        mail: MailService,
        dry_run: bool = False,
    ) -> None:
        self._table = table
        self._mail = mail
        self._dry_run = dry_run

    def run(self) -> None:
        """Process every configuration row."""
        self.process_rows()

    def process_rows(self) -> List[RowOutcome]:
        """
        Process every configuration row.

        Returns:
            RowOutcome for each row visited, in row order.
        """
        outcomes: List[RowOutcome] = []
        row_index = FIRST_DATA_ROW

        while True:
            search_query = self._table.cell(row_index, QUERY_COLUMN)
            if not search_query:
                break

            try:
                outcome = self._process_row(row_index, search_query)
            except Exception as e:
                logger.error(
                    f"Row {row_index} failed, aborting run: {e}",
                    extra={"extra_fields": {
                        "row_index": row_index,
                        "rows_completed": len(outcomes),
                        "error_type": type(e).__name__,
                    }}
                )
                raise

            outcomes.append(outcome)
            get_metrics().rows_processed_total.inc()
            row_index += 1

        logger.info(
            f"Processed {len(outcomes)} rows: "
            f"{sum(1 for o in outcomes if o.forwarded)} forwarded",
            extra={"extra_fields": {
                "rows_processed": len(outcomes),
                "threads_matched": sum(1 for o in outcomes if o.matched),
                "forwarded_count": sum(1 for o in outcomes if o.forwarded),
                "dry_run": self._dry_run,
            }}
        )
        return outcomes

    def _process_row(self, row_index: int, search_query: str) -> RowOutcome:
        threads = self._mail.search(search_query)

        if not threads:
            logger.info(
                f"Row {row_index}: no matching threads",
                extra={"extra_fields": {
                    "row_index": row_index,
                    "search_query": search_query,
                }}
            )
            return RowOutcome(
                row=ConfigRow(row_index=row_index, search_query=search_query),
                thread_count=0,
            )

        recipients = self._table.cell(row_index, RECIPIENTS_COLUMN)
        row = ConfigRow(
            row_index=row_index,
            search_query=search_query,
            recipients=recipients,
        )
        thread = threads[0]
        message = thread.first_message()

        if not self._dry_run:
            # Empty recipients are passed through; the mail service decides
            message.forward(recipients if recipients is not None else "")

        logger.info(
            f"Row {row_index}: "
            f"{'would forward' if self._dry_run else 'forwarded'} "
            f"message {message.message_id}",
            extra={"extra_fields": {
                "row_index": row_index,
                "search_query": search_query,
                "recipients": recipients,
                "thread_count": len(threads),
                "thread_id": thread.thread_id,
                "message_id": message.message_id,
                "dry_run": self._dry_run,
            }}
        )

        return RowOutcome(
            row=row,
            thread_count=len(threads),
            forwarded=not self._dry_run,
            thread_id=thread.thread_id,
            message_id=message.message_id,
        )
