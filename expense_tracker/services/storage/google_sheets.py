"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as an alternative backend because:
1. The user can look at their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Slow compared to a local file (every call is an API round-trip)
- A single cell holds at most 50,000 characters, which caps the
  ledger at a few hundred expenses
- No transactions (the ledger writes its whole value in one cell update)

Key/value pairs live as rows in one worksheet: column A is the key,
column B the value.
"""

from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from expense_tracker.config import get_settings
from expense_tracker.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
)


KV_COLUMNS = ["key", "value"]

# Google Sheets hard limit per cell
MAX_CELL_CHARS = 50000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_kv_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.kv_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.kv_sheet_name,
                rows=100,
                cols=len(KV_COLUMNS),
            )
            sheet.append_row(KV_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of the key-value store.

    One row per key. Row 1 is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> tuple[Optional[int], Optional[list]]:
        """Return (1-based row number, row) for a key, or (None, None)."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # row 1 is header
            if row and row[0] == key:
                return idx, row
        return None, None

    def get(self, key: str) -> Optional[str]:
        """Read a value from the sheet."""
        try:
            sheet = self._client.get_kv_sheet()
            _, row = self._find_row(sheet, key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read key '{key}': {e}")

        if row is None:
            return None
        return row[1] if len(row) > 1 else ""

    def set(self, key: str, value: str) -> None:
        """Write a value, updating the key's row or appending a new one."""
        if len(value) > MAX_CELL_CHARS:
            raise StorageError(
                f"Value for '{key}' is {len(value)} characters, "
                f"over the {MAX_CELL_CHARS} character cell limit"
            )
        self._write(key, value)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write(self, key: str, value: str) -> None:
        try:
            sheet = self._client.get_kv_sheet()
            idx, _ = self._find_row(sheet, key)
            if idx is None:
                sheet.append_row([key, value], value_input_option="RAW")
            else:
                sheet.update_cell(idx, 2, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write key '{key}': {e}")

    def delete(self, key: str) -> bool:
        """Delete the key's row."""
        try:
            sheet = self._client.get_kv_sheet()
            idx, _ = self._find_row(sheet, key)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete key '{key}': {e}")
