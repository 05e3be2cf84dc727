from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials

from ..core.exceptions import ConfigurationError

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class SheetsConfig:
    spreadsheet_id: str
    service_account_email: str
    service_account_key: str
    attendance_sheet: str
    teachers_sheet: str

    @classmethod
    def from_settings(cls, settings) -> "SheetsConfig":
        """Fail fast: every missing key is reported at startup, not on first request."""

        values = {
            "GOOGLE_SPREADSHEET_ID": getattr(settings, "GOOGLE_SPREADSHEET_ID", ""),
            "GOOGLE_SERVICE_ACCOUNT_EMAIL": getattr(settings, "GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
            "GOOGLE_SERVICE_ACCOUNT_KEY": getattr(settings, "GOOGLE_SERVICE_ACCOUNT_KEY", ""),
            "GOOGLE_ATTENDANCE_SHEET": getattr(settings, "GOOGLE_ATTENDANCE_SHEET", ""),
            "GOOGLE_TEACHERS_SHEET": getattr(settings, "GOOGLE_TEACHERS_SHEET", ""),
        }
        missing = [k for k, v in values.items() if not str(v or "").strip()]
        if missing:
            raise ConfigurationError(f"Missing required environment variable(s): {', '.join(missing)}")

        return cls(
            spreadsheet_id=values["GOOGLE_SPREADSHEET_ID"].strip(),
            service_account_email=values["GOOGLE_SERVICE_ACCOUNT_EMAIL"].strip(),
            service_account_key=values["GOOGLE_SERVICE_ACCOUNT_KEY"],
            attendance_sheet=values["GOOGLE_ATTENDANCE_SHEET"].strip(),
            teachers_sheet=values["GOOGLE_TEACHERS_SHEET"].strip(),
        )


class SheetsConnection:
    """Lazily authorized gspread client shared by every table.

    Note: the client is created on first use and reused afterwards.
    """

    def __init__(self, config: SheetsConfig):
        self._config = config
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @property
    def config(self) -> SheetsConfig:
        return self._config

    def credentials(self) -> Credentials:
        info = {
            "type": "service_account",
            "client_email": self._config.service_account_email,
            # keys pasted into .env files usually carry literal "\n"
            "private_key": self._config.service_account_key.replace("\\n", "\n"),
            "token_uri": TOKEN_URI,
        }
        return Credentials.from_service_account_info(info, scopes=SCOPES)

    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            if self._client is None:
                self._client = gspread.authorize(self.credentials())
            self._spreadsheet = self._client.open_by_key(self._config.spreadsheet_id)
        return self._spreadsheet
