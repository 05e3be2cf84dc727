from __future__ import annotations

import threading
from typing import Sequence

from .repository import RowStore, TableSnapshot, headers_need_update, pad_row


class InMemoryRowStore(RowStore):
    """Process-local row store with the same semantics as the spreadsheet backend.

    Used by the ``testing`` settings and unit tests. The lock stands in for the
    spreadsheet's atomic append; it does not make read-then-append atomic.
    """

    def __init__(self, tables: dict[str, list[list[str]]] | None = None):
        self._tables: dict[str, list[list[str]]] = {k: [list(r) for r in v] for k, v in (tables or {}).items()}
        self._lock = threading.Lock()

    def _ensure_headers(self, table: str, headers: Sequence[str]) -> list[list[str]]:
        rows = self._tables.setdefault(table, [])
        if not headers:
            return rows
        current = rows[0] if rows else []
        if headers_need_update(current, headers):
            if rows:
                rows[0] = list(headers)
            else:
                rows.append(list(headers))
        return rows

    def append(self, table: str, headers: Sequence[str], row: Sequence[str]) -> None:
        with self._lock:
            rows = self._ensure_headers(table, headers)
            rows.append(pad_row(row, len(row)))

    def read_all(self, table: str, headers: Sequence[str]) -> TableSnapshot:
        with self._lock:
            rows = self._ensure_headers(table, headers)
            if not rows:
                return TableSnapshot(headers=list(headers or []), rows=[])
            detected, *data = rows
            width = max(len(detected), len(headers or []))
            return TableSnapshot(headers=list(detected), rows=[pad_row(r, width) for r in data])

    def raw_rows(self, table: str) -> list[list[str]]:
        """Every stored row including the header, as copies (test/debug helper)."""
        with self._lock:
            return [list(r) for r in self._tables.get(table, [])]
