from __future__ import annotations

from datetime import datetime, timezone
from itertools import count

import pytest

from qr_attendance.attendance.service import AttendanceLedger
from qr_attendance.auth.tokens import TokenClaims
from qr_attendance.core.enums import Role
from qr_attendance.main import create_app, get_container
from qr_attendance.sheets.memory_row_store import InMemoryRowStore

TEST_SETTINGS = "qr_attendance.config.testing"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryRowStore:
    return InMemoryRowStore()


@pytest.fixture
def record_ids():
    seq = count(1)
    return lambda: f"rec-{next(seq)}"


@pytest.fixture
def ledger(store, record_ids) -> AttendanceLedger:
    return AttendanceLedger(store, table="Attendance", id_factory=record_ids)


@pytest.fixture
def app(store):
    app = create_app(TEST_SETTINGS, store=store)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    container = get_container(app)

    def make(teacher_id: str = "t-1", role: Role = Role.TEACHER, email: str = "") -> dict:
        token = container.tokens.sign(TokenClaims(teacher_id=teacher_id, role=role, email=email))
        return {"Authorization": f"Bearer {token}"}

    return make
