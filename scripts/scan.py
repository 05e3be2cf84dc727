"""Scan student QR codes with a local camera and mark them on a running server.

Usage: python scripts/scan.py RECORD_ID --token TOKEN [--url URL] [--camera N]
Stop with Ctrl+C; the camera is released on exit.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from qr_attendance.common.app_logger import setup_logging
from qr_attendance.core.constants import DEFAULT_SCAN_DEBOUNCE_SECONDS
from qr_attendance.main import load_settings
from qr_attendance.scanner.camera import Camera
from qr_attendance.scanner.client import AttendanceApiClient
from qr_attendance.scanner.runner import run_scanner
from qr_attendance.scanner.session import ScanOutcome, ScanResult, ScanSession


def _print_result(result: ScanResult) -> None:
    if result.outcome == ScanOutcome.MARKED:
        print(f"OK: {result.message}")
    elif result.outcome == ScanOutcome.FAILED:
        print(f"REJECTED: {result.message}")


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("record_id")
    parser.add_argument("--token", default=os.getenv("QR_ATTENDANCE_TOKEN", ""))
    parser.add_argument("--url", default=os.getenv("QR_ATTENDANCE_URL", "http://127.0.0.1:5000"))
    parser.add_argument("--teacher-id", default=None, help="admins only: mark on another teacher's record")
    parser.add_argument("--camera", type=int, default=None)
    parser.add_argument(
        "--debounce", type=float, default=float(getattr(settings, "SCAN_DEBOUNCE_SECONDS", DEFAULT_SCAN_DEBOUNCE_SECONDS))
    )
    args = parser.parse_args()

    if not args.token:
        raise SystemExit("Error: --token (or QR_ATTENDANCE_TOKEN) is required")

    setup_logging(getattr(settings, "LOG_LEVEL", None))
    client = AttendanceApiClient(args.url, args.token)
    session = ScanSession(client.marker(args.record_id, teacher_id=args.teacher_id), debounce_seconds=args.debounce)

    try:
        run_scanner(
            Camera(),
            session,
            should_stop=lambda: False,
            on_result=_print_result,
            device_index=args.camera,
        )
    except KeyboardInterrupt:
        print("Stopped.")


if __name__ == "__main__":
    main()
