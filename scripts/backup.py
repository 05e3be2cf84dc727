"""Back up the attendance sheet to a local CSV file.

Note: the spreadsheet keeps its own version history; this is a plain
snapshot for offline archiving.
"""

from __future__ import annotations

import csv
import sys
from datetime import datetime
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from qr_attendance.container import build_store
from qr_attendance.core.constants import ATTENDANCE_HEADERS
from qr_attendance.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    store, attendance_table, _ = build_store(load_settings())
    snapshot = store.read_all(attendance_table, ATTENDANCE_HEADERS)

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{attendance_table}_{ts}.csv"

    with out_file.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(snapshot.headers)
        writer.writerows(snapshot.rows)

    print(f"OK: Backup created: {out_file} (rows={len(snapshot)})")


if __name__ == "__main__":
    main()
