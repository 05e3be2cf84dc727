from __future__ import annotations

from typing import Optional

import requests

from ..attendance.model import AttendeeMark
from ..core.exceptions import (
    AuthenticationError,
    DomainError,
    DuplicateAttendanceError,
    ForbiddenError,
    InvalidQrError,
    RecordNotFoundError,
    StoreConflictError,
    StoreUnavailableError,
    ValidationError,
)

_ERRORS_BY_CODE: dict[str, type[DomainError]] = {
    cls.code: cls
    for cls in (
        AuthenticationError,
        DuplicateAttendanceError,
        ForbiddenError,
        InvalidQrError,
        RecordNotFoundError,
        StoreConflictError,
        StoreUnavailableError,
        ValidationError,
    )
}


class AttendanceApiClient:
    """HTTP client the scanner uses to reach ``POST /api/attendance/mark``.

    Error responses are mapped back onto the domain exceptions so the scan
    session treats remote and in-process ledgers the same way.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._http = http or requests.Session()
        self._http.headers.update({"Authorization": f"Bearer {token}"})

    def _raise_for_error(self, response: requests.Response) -> None:
        if response.ok:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = str(body.get("error") or f"HTTP {response.status_code}")
        cls = _ERRORS_BY_CODE.get(str(body.get("code") or ""))
        if cls is None:
            cls = StoreUnavailableError if response.status_code >= 500 else ValidationError
        raise cls(message)

    def mark(self, record_id: str, qr_payload: str, *, teacher_id: Optional[str] = None) -> AttendeeMark:
        body = {"recordId": record_id, "qrPayload": qr_payload}
        if teacher_id:
            body["teacherId"] = teacher_id
        try:
            response = self._http.post(f"{self._base_url}/api/attendance/mark", json=body, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            raise StoreUnavailableError(f"Network error: {e}") from e

        self._raise_for_error(response)
        try:
            data = response.json()["attendance"]
            return AttendeeMark(
                student_id=str(data["studentId"]),
                student_name=str(data["studentName"]),
                timestamp=str(data.get("timestamp") or ""),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise StoreUnavailableError(f"Unexpected response from server: {e!r}") from e

    def marker(self, record_id: str, *, teacher_id: Optional[str] = None):
        """Bind a record so the result plugs straight into ``ScanSession``."""
        return lambda raw: self.mark(record_id, raw, teacher_id=teacher_id)
