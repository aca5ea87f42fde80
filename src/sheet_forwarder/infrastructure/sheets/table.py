"""
Google Sheets Table.

Cell-by-cell read access to the configuration worksheet through gspread.
"""

from typing import Optional

import gspread
from gspread.exceptions import GSpreadException, SpreadsheetNotFound, WorksheetNotFound

from sheet_forwarder.config import settings
from sheet_forwarder.config.settings import SheetSettings
from sheet_forwarder.core.exceptions import ConfigurationError, SheetError
from sheet_forwarder.infrastructure.google_auth import load_credentials
from sheet_forwarder.infrastructure.logging import get_logger


logger = get_logger(__name__)


def _status_code(error: GSpreadException) -> Optional[int]:
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)


class GoogleSheetTable:
    """
    Table backed by a gspread worksheet.

    Every ``cell`` call is a Sheets API read; nothing is cached so the
    sheet is read exactly as far as the caller scans it.
    """

    def __init__(self, worksheet: gspread.Worksheet) -> None:
        self._worksheet = worksheet

    @property
    def title(self) -> str:
        return self._worksheet.title

    def cell(self, row: int, column: int) -> Optional[str]:
        """
        Read a single cell value.

        Args:
            row: 1-based row number.
            column: 1-based column number.

        Returns:
            The cell's displayed value, or None when empty.

        Raises:
            SheetError: If the Sheets API call fails.
        """
        try:
            value = self._worksheet.cell(row, column).value
        except GSpreadException as e:
            logger.error(
                f"Failed to read cell ({row}, {column})",
                extra={"extra_fields": {
                    "row": row,
                    "column": column,
                    "error_type": type(e).__name__,
                }}
            )
            raise SheetError(
                f"Failed to read cell ({row}, {column}): {e}",
                status_code=_status_code(e),
            ) from e

        if value is None or value == "":
            return None
        return str(value)


def open_sheet_table(
    sheet_settings: Optional[SheetSettings] = None,
    client: Optional[gspread.Client] = None,
) -> GoogleSheetTable:
    """
    Open the configured worksheet.

    Args:
        sheet_settings: Sheet settings. Defaults to global settings.
        client: Authorized gspread client. Built from the Google
            credentials when omitted.

    Returns:
        GoogleSheetTable for the selected worksheet.

    Raises:
        ConfigurationError: If no spreadsheet id is configured.
        SheetError: If the spreadsheet or worksheet cannot be opened.
    """
    sheet_settings = sheet_settings or settings.sheet

    if not sheet_settings.is_configured:
        raise ConfigurationError("SHEET_ID")

    if client is None:
        client = gspread.authorize(load_credentials())

    try:
        spreadsheet = client.open_by_key(sheet_settings.spreadsheet_id)
        if sheet_settings.worksheet_name:
            worksheet = spreadsheet.worksheet(sheet_settings.worksheet_name)
        else:
            worksheet = spreadsheet.sheet1
    except SpreadsheetNotFound as e:
        raise SheetError(
            f"Spreadsheet not found: {sheet_settings.spreadsheet_id}",
            status_code=404,
        ) from e
    except WorksheetNotFound as e:
        raise SheetError(
            f"Worksheet not found: {sheet_settings.worksheet_name}",
            status_code=404,
        ) from e
    except GSpreadException as e:
        raise SheetError(
            f"Failed to open spreadsheet: {e}",
            status_code=_status_code(e),
        ) from e

    logger.info(
        f"Opened worksheet '{worksheet.title}'",
        extra={"extra_fields": {
            "spreadsheet_id": sheet_settings.spreadsheet_id,
            "worksheet": worksheet.title,
        }}
    )
    return GoogleSheetTable(worksheet)
