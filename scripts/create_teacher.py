"""Add a teacher (or admin) account to the teachers sheet.

Usage: python scripts/create_teacher.py EMAIL NAME [--admin]
The password is read from the terminal.
"""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from qr_attendance.container import build_container
from qr_attendance.core.enums import Role
from qr_attendance.core.exceptions import ValidationError
from qr_attendance.main import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("name")
    parser.add_argument("--admin", action="store_true", help="grant the admin role")
    args = parser.parse_args()

    load_dotenv(override=False)
    container = build_container(load_settings())
    password = getpass.getpass("Password: ")

    try:
        teacher = container.teacher_service.create_teacher(
            email=args.email,
            password=password,
            name=args.name,
            role=Role.ADMIN if args.admin else Role.TEACHER,
        )
    except ValidationError as e:
        raise SystemExit(f"Error: {e}")

    print(f"OK: created {teacher.role.value} {teacher.email} (id={teacher.teacher_id})")


if __name__ == "__main__":
    main()
