"""Create the attendance/teachers worksheets and write their header rows."""

from __future__ import annotations

import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from qr_attendance.container import build_store
from qr_attendance.core.constants import ATTENDANCE_HEADERS, TEACHER_HEADERS
from qr_attendance.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    store, attendance_table, teachers_table = build_store(settings)

    # read_all reconciles the header row as a side effect
    attendance = store.read_all(attendance_table, ATTENDANCE_HEADERS)
    teachers = store.read_all(teachers_table, TEACHER_HEADERS)

    print(f"OK: {attendance_table} ready (rows={len(attendance)})")
    print(f"OK: {teachers_table} ready (rows={len(teachers)})")


if __name__ == "__main__":
    main()
