from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence


@dataclass(frozen=True)
class TableSnapshot:
    """Result of a full-table read: the header row plus every data row in append order."""

    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


class RowStore(Protocol):
    """Append-only row store over named tables (one spreadsheet tab each).

    Services depend on this interface, never on gspread directly.
    There is no query or index primitive: readers always get the full table.
    """

    def append(self, table: str, headers: Sequence[str], row: Sequence[str]) -> None:
        """Reconcile the header row, then append ``row`` at the end of ``table``."""

        raise NotImplementedError

    def read_all(self, table: str, headers: Sequence[str]) -> TableSnapshot:
        raise NotImplementedError


def headers_need_update(current: Sequence[str], expected: Sequence[str]) -> bool:
    if not expected:
        return False
    if not current:
        return True
    return any(
        header != (current[index] if index < len(current) else "").strip()
        for index, header in enumerate(expected)
    )


def pad_row(row: Sequence[object], width: int) -> list[str]:
    cells = ["" if v is None else str(v) for v in row]
    if len(cells) < width:
        cells.extend([""] * (width - len(cells)))
    return cells
