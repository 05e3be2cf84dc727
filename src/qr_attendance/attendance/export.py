from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass

import pandas as pd

from ..common.datetime_utils import parse_iso
from ..core.exceptions import ValidationError
from .model import Session

EXPORT_COLUMNS = ["Student ID", "Student Name", "Timestamp"]

CONTENT_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass(frozen=True)
class ExportData:
    title: str
    meta: list[tuple[str, str]]
    rows: list[dict]


def format_display_date(value: str | None) -> str:
    parsed = parse_iso(value)
    if parsed is None:
        return value or ""
    return parsed.strftime("%d %b %Y, %H:%M")


def record_title(session: Session) -> str:
    return f"{session.class_name or 'Class'} - {session.session_name or 'Session'}"


def export_filename(session: Session, extension: str) -> str:
    safe = re.sub(r"[^a-z0-9\-]+", "_", record_title(session), flags=re.IGNORECASE)[:80] or "attendance"
    return f"{safe}.{extension}"


def build_export(session: Session) -> ExportData:
    return ExportData(
        title=record_title(session),
        meta=[
            ("Class", session.class_name),
            ("Session", session.session_name),
            ("Created", format_display_date(session.created_at)),
            ("Teacher", session.teacher_id),
        ],
        rows=[
            {
                "Student ID": a.student_id,
                "Student Name": a.student_name,
                "Timestamp": format_display_date(a.timestamp),
            }
            for a in session.attendees
        ],
    )


def to_csv_bytes(data: ExportData) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out)
    for label, value in data.meta:
        writer.writerow([label, value])
    writer.writerow([])

    dict_writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
    dict_writer.writeheader()
    for row in data.rows:
        dict_writer.writerow(row)

    # BOM so Excel opens non-ASCII names correctly
    return out.getvalue().encode("utf-8-sig")


def to_xlsx_bytes(data: ExportData) -> bytes:
    meta = pd.DataFrame(data.meta, columns=["Field", "Value"])
    attendees = pd.DataFrame(data.rows, columns=EXPORT_COLUMNS, dtype=str)

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        meta.to_excel(writer, sheet_name="Attendance", index=False, header=False)
        attendees.to_excel(writer, sheet_name="Attendance", index=False, startrow=len(meta) + 1)
    return buf.getvalue()


def render_export(session: Session, fmt: str) -> tuple[bytes, str, str]:
    """Return ``(body, content_type, filename)`` for the requested format."""

    fmt = (fmt or "xlsx").strip().lower()
    if fmt in {"excel", "xls"}:
        fmt = "xlsx"

    data = build_export(session)
    if fmt == "csv":
        body = to_csv_bytes(data)
    elif fmt == "xlsx":
        body = to_xlsx_bytes(data)
    else:
        raise ValidationError(f"Unsupported export format: {fmt}")

    return body, CONTENT_TYPES[fmt], export_filename(session, fmt)
