"""Example: drive the ledger directly through the service layer (no Flask).

Controllers are a thin layer; the rules live in ``AttendanceLedger``.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from qr_attendance.container import build_container
from qr_attendance.core.exceptions import DuplicateAttendanceError
from qr_attendance.main import load_settings


def main():
    container = build_container(load_settings("qr_attendance.config.testing"))
    ledger = container.attendance_ledger

    session = ledger.create_record("T1", "CS101", "Week1")
    ledger.mark_attendance(session.record_id, "T1", "007|Alice")
    ledger.mark_attendance(session.record_id, "T1", "008|Bob")
    try:
        ledger.mark_attendance(session.record_id, "T1", "007|Alice")
    except DuplicateAttendanceError as e:
        print("rejected:", e)

    print(ledger.get_record(session.record_id, "T1").to_dict())


if __name__ == "__main__":
    main()
