from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceLedger
from .auth.tokens import TokenSigner
from .core.constants import DEFAULT_ATTENDANCE_SHEET, DEFAULT_TEACHERS_SHEET, DEFAULT_JWT_EXPIRY_HOURS
from .core.enums import StoreBackend
from .core.exceptions import ConfigurationError
from .qr.codec import QrCodec, build_codec
from .sheets.connection import SheetsConfig, SheetsConnection
from .sheets.gspread_row_store import GoogleSheetsRowStore
from .sheets.memory_row_store import InMemoryRowStore
from .sheets.repository import RowStore
from .teachers.service import AuthService, TeacherService
from .teachers.sheets_teacher_repository import SheetsTeacherRepository


@dataclass(frozen=True)
class Container:
    store: RowStore
    codec: QrCodec
    tokens: TokenSigner

    teachers_repo: SheetsTeacherRepository

    auth_service: AuthService
    teacher_service: TeacherService
    attendance_ledger: AttendanceLedger


def build_store(settings) -> tuple[RowStore, str, str]:
    """Return ``(store, attendance_table, teachers_table)`` for the configured backend."""

    backend_s = str(getattr(settings, "STORE_BACKEND", StoreBackend.SHEETS.value)).strip().lower()
    try:
        backend = StoreBackend(backend_s)
    except ValueError:
        raise ConfigurationError(f"Unsupported STORE_BACKEND: {backend_s!r}")

    if backend == StoreBackend.MEMORY:
        return (
            InMemoryRowStore(),
            getattr(settings, "GOOGLE_ATTENDANCE_SHEET", "") or DEFAULT_ATTENDANCE_SHEET,
            getattr(settings, "GOOGLE_TEACHERS_SHEET", "") or DEFAULT_TEACHERS_SHEET,
        )

    config = SheetsConfig.from_settings(settings)
    store = GoogleSheetsRowStore(SheetsConnection(config))
    return store, config.attendance_sheet, config.teachers_sheet


def build_container(settings, *, store: RowStore | None = None) -> Container:
    if store is None:
        store, attendance_table, teachers_table = build_store(settings)
    else:
        attendance_table = getattr(settings, "GOOGLE_ATTENDANCE_SHEET", "") or DEFAULT_ATTENDANCE_SHEET
        teachers_table = getattr(settings, "GOOGLE_TEACHERS_SHEET", "") or DEFAULT_TEACHERS_SHEET

    codec = build_codec(
        getattr(settings, "QR_FORMAT", "pipe"),
        json_prefix=getattr(settings, "QR_JSON_PREFIX", "QR_ATTENDANCE"),
    )
    tokens = TokenSigner(
        getattr(settings, "JWT_SECRET", ""),
        expiry_hours=int(getattr(settings, "JWT_EXPIRY_HOURS", DEFAULT_JWT_EXPIRY_HOURS)),
    )

    teachers_repo = SheetsTeacherRepository(store, table=teachers_table)
    attendance_ledger = AttendanceLedger(
        store,
        table=attendance_table,
        codec=codec,
        optimistic_writes=bool(getattr(settings, "OPTIMISTIC_WRITES", False)),
    )

    return Container(
        store=store,
        codec=codec,
        tokens=tokens,
        teachers_repo=teachers_repo,
        auth_service=AuthService(teachers_repo),
        teacher_service=TeacherService(teachers_repo),
        attendance_ledger=attendance_ledger,
    )
