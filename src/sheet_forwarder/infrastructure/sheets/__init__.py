"""Google Sheets adapter."""

from sheet_forwarder.infrastructure.sheets.table import (
    GoogleSheetTable,
    open_sheet_table,
)


__all__ = [
    "GoogleSheetTable",
    "open_sheet_table",
]
