from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

import gspread
import requests
from google.auth.exceptions import GoogleAuthError

from ..common.app_logger import get_logger
from ..core.exceptions import StoreUnavailableError
from .connection import SheetsConnection
from .repository import RowStore, TableSnapshot, headers_need_update, pad_row

logger = get_logger(__name__)

_TRANSPORT_ERRORS = (
    gspread.exceptions.GSpreadException,
    requests.exceptions.RequestException,
    GoogleAuthError,
)


@contextmanager
def store_call(table: str, action: str) -> Iterator[None]:
    """Translate gspread/transport failures into ``StoreUnavailableError``."""

    try:
        yield
    except _TRANSPORT_ERRORS as e:
        logger.error("row store %s on %r failed: %s", action, table, e)
        raise StoreUnavailableError(f"Spreadsheet unavailable while trying to {action} '{table}'.") from e


class GoogleSheetsRowStore(RowStore):
    """Row store backed by one Google Sheets spreadsheet; each table is a worksheet.

    Header reconciliation is read-then-write without locking: concurrent first
    writers may race and the last header write wins. Appends rely on the
    Sheets API appending atomically.
    """

    def __init__(self, connection: SheetsConnection, *, default_rows: int = 1000):
        self._connection = connection
        self._default_rows = int(default_rows)
        self._worksheets: dict[str, gspread.Worksheet] = {}

    def _worksheet(self, table: str, headers: Sequence[str]) -> gspread.Worksheet:
        ws = self._worksheets.get(table)
        if ws is not None:
            return ws

        spreadsheet = self._connection.spreadsheet()
        try:
            ws = spreadsheet.worksheet(table)
        except gspread.exceptions.WorksheetNotFound:
            logger.info("creating worksheet %r", table)
            ws = spreadsheet.add_worksheet(title=table, rows=self._default_rows, cols=max(len(headers), 1))
        self._worksheets[table] = ws
        return ws

    def _ensure_headers(self, ws: gspread.Worksheet, table: str, headers: Sequence[str]) -> None:
        if not headers:
            return
        current: list[str] = []
        try:
            current = ws.row_values(1)
        except gspread.exceptions.APIError as e:
            # An unreadable first row is treated as missing; the write below may still succeed
            logger.warning("unable to read headers for %r: %s", table, e)

        if headers_need_update(current, headers):
            logger.info("writing header row for %r", table)
            ws.update(range_name="A1", values=[list(headers)], value_input_option="RAW")

    def append(self, table: str, headers: Sequence[str], row: Sequence[str]) -> None:
        with store_call(table, "append to"):
            ws = self._worksheet(table, headers)
            self._ensure_headers(ws, table, headers)
            # RAW keeps "007" as text; USER_ENTERED would turn it into 7
            ws.append_row(pad_row(row, len(row)), value_input_option="RAW")

    def read_all(self, table: str, headers: Sequence[str]) -> TableSnapshot:
        with store_call(table, "read"):
            ws = self._worksheet(table, headers)
            self._ensure_headers(ws, table, headers)
            values = ws.get_all_values()

        if not values:
            return TableSnapshot(headers=list(headers or []), rows=[])

        detected, *data = values
        width = max(len(detected), len(headers or []))
        return TableSnapshot(headers=list(detected), rows=[pad_row(r, width) for r in data])
