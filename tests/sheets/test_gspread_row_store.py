import gspread
import pytest
import requests

from qr_attendance.core.exceptions import ConfigurationError, StoreUnavailableError
from qr_attendance.sheets.connection import SheetsConfig
from qr_attendance.sheets.gspread_row_store import GoogleSheetsRowStore


class FakeWorksheet:
    def __init__(self, values=None):
        self.values = [list(r) for r in (values or [])]
        self.header_writes = []
        self.append_options = []

    def row_values(self, index):
        return list(self.values[index - 1]) if len(self.values) >= index else []

    def update(self, *, range_name, values, value_input_option):
        self.header_writes.append((range_name, values, value_input_option))
        if self.values:
            self.values[0] = list(values[0])
        else:
            self.values.append(list(values[0]))

    def append_row(self, row, value_input_option):
        self.append_options.append(value_input_option)
        self.values.append(list(row))

    def get_all_values(self):
        return [list(r) for r in self.values]


class FakeSpreadsheet:
    def __init__(self, worksheets=None):
        self.worksheets = dict(worksheets or {})
        self.created = []

    def worksheet(self, title):
        if title not in self.worksheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.worksheets[title]

    def add_worksheet(self, *, title, rows, cols):
        self.created.append((title, rows, cols))
        self.worksheets[title] = FakeWorksheet()
        return self.worksheets[title]


class FakeConnection:
    def __init__(self, spreadsheet):
        self._spreadsheet = spreadsheet

    def spreadsheet(self):
        return self._spreadsheet


def test_missing_worksheet_is_created_with_headers():
    spreadsheet = FakeSpreadsheet()
    store = GoogleSheetsRowStore(FakeConnection(spreadsheet))

    store.append("Attendance", ["a", "b"], ["007", "Bond"])

    ws = spreadsheet.worksheets["Attendance"]
    assert spreadsheet.created == [("Attendance", 1000, 2)]
    assert ws.values == [["a", "b"], ["007", "Bond"]]
    assert ws.header_writes == [("A1", [["a", "b"]], "RAW")]
    assert ws.append_options == ["RAW"]


def test_matching_headers_are_not_rewritten():
    ws = FakeWorksheet([["a", "b"], ["1", "2"]])
    store = GoogleSheetsRowStore(FakeConnection(FakeSpreadsheet({"T": ws})))

    snapshot = store.read_all("T", ["a", "b"])

    assert snapshot.rows == [["1", "2"]]
    assert ws.header_writes == []


def test_transport_failure_maps_to_store_unavailable():
    class BrokenWorksheet(FakeWorksheet):
        def get_all_values(self):
            raise requests.exceptions.ConnectionError("boom")

    store = GoogleSheetsRowStore(FakeConnection(FakeSpreadsheet({"T": BrokenWorksheet([["a"]])})))

    with pytest.raises(StoreUnavailableError):
        store.read_all("T", ["a"])


def test_sheets_config_reports_every_missing_key():
    class Settings:
        GOOGLE_SPREADSHEET_ID = "abc"
        GOOGLE_SERVICE_ACCOUNT_EMAIL = ""
        GOOGLE_SERVICE_ACCOUNT_KEY = ""
        GOOGLE_ATTENDANCE_SHEET = "Attendance"
        GOOGLE_TEACHERS_SHEET = "Teachers"

    with pytest.raises(ConfigurationError) as exc:
        SheetsConfig.from_settings(Settings)

    assert "GOOGLE_SERVICE_ACCOUNT_EMAIL" in str(exc.value)
    assert "GOOGLE_SERVICE_ACCOUNT_KEY" in str(exc.value)
