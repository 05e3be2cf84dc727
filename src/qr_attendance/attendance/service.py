from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, Optional

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_utc, to_iso
from ..common.validators import normalize, require_non_empty
from ..core.constants import ATTENDANCE_HEADERS
from ..core.exceptions import (
    DuplicateAttendanceError,
    ForbiddenError,
    InvalidQrError,
    RecordNotFoundError,
    StoreConflictError,
    ValidationError,
)
from ..qr.codec import PipeQrCodec, QrCodec
from ..sheets.repository import RowStore
from .ledger import (
    build_class_groups,
    classify_rows,
    find_attendee_row,
    find_meta_row,
    fold_sessions,
    sort_attendees,
)
from .model import AttendanceRow, AttendeeMark, AttendeeRow, ClassGroup, MetaRow, Session

logger = get_logger(__name__)


class AttendanceLedger:
    """Use cases over the append-only attendance table.

    Every operation reads the whole table; the store has no index to ask.
    Realistic class sizes keep that O(n) scan cheap.
    """

    def __init__(
        self,
        store: RowStore,
        *,
        table: str,
        codec: QrCodec | None = None,
        optimistic_writes: bool = False,
        id_factory: Callable[[], str] | None = None,
    ):
        self._store = store
        self._table = table
        self._codec = codec or PipeQrCodec()
        self._optimistic_writes = bool(optimistic_writes)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def _read_rows(self) -> list[AttendanceRow]:
        snapshot = self._store.read_all(self._table, ATTENDANCE_HEADERS)
        return classify_rows(snapshot.rows)

    def _append(self, row: AttendanceRow) -> None:
        self._store.append(self._table, ATTENDANCE_HEADERS, row.to_cells())

    def create_record(
        self, teacher_id: str, class_name: str, session_name: str, *, now: datetime | None = None
    ) -> Session:
        teacher_id = require_non_empty(teacher_id, "Teacher ID")
        class_name = normalize(class_name)
        session_name = normalize(session_name)
        if not class_name or not session_name:
            raise ValidationError("Class name and record name are required.")

        meta = MetaRow(
            record_id=self._id_factory(),
            teacher_id=teacher_id,
            class_name=class_name,
            session_name=session_name,
            timestamp=to_iso(now or now_utc()),
        )
        self._append(meta)
        logger.info("created record %s (%s / %s) for teacher %s", meta.record_id, class_name, session_name, teacher_id)

        return Session(
            record_id=meta.record_id,
            teacher_id=teacher_id,
            class_name=class_name,
            session_name=session_name,
            created_at=meta.timestamp,
        )

    def mark_attendance(
        self, record_id: str, teacher_id: str, raw_qr: str, *, now: datetime | None = None
    ) -> AttendeeMark:
        record_id = normalize(record_id)
        teacher_id = normalize(teacher_id)
        if not record_id or not raw_qr:
            raise ValidationError("Record ID and QR payload are required.")
        if not teacher_id:
            raise ValidationError("Teacher ID is required.")

        identity = self._codec.decode(raw_qr)
        if identity is None:
            logger.info("rejected unreadable QR payload for record %s", record_id)
            raise InvalidQrError("Invalid QR code detected.")

        # --- critical section (not atomic) ---------------------------------
        # The store has no transactions: another mark for the same student can
        # land between this read and the append below. OPTIMISTIC_WRITES only
        # narrows that window.
        rows = self._read_rows()

        meta = find_meta_row(rows, record_id=record_id, teacher_id=teacher_id)
        if meta is None:
            raise RecordNotFoundError("Record not found. Ensure you created the record before scanning.")

        self._reject_duplicate(rows, record_id=record_id, teacher_id=teacher_id, student_id=identity.student_id)

        if self._optimistic_writes:
            fresh = self._read_rows()
            if len(fresh) < len(rows):
                # rows are only ever appended; a shorter table means the sheet was edited by hand
                raise StoreConflictError("Attendance table changed unexpectedly; scan again.")
            if len(fresh) != len(rows):
                logger.info("attendance table changed during mark for record %s; re-checking", record_id)
                self._reject_duplicate(
                    fresh, record_id=record_id, teacher_id=teacher_id, student_id=identity.student_id
                )

        row = AttendeeRow(
            record_id=record_id,
            teacher_id=teacher_id,
            class_name=meta.class_name,
            session_name=meta.session_name,
            student_id=identity.student_id,
            student_name=identity.student_name,
            timestamp=to_iso(now or now_utc()),
        )
        self._append(row)
        # --- end critical section ------------------------------------------

        logger.info("marked %s (%s) on record %s", identity.student_name, identity.student_id, record_id)
        return AttendeeMark(student_id=row.student_id, student_name=row.student_name, timestamp=row.timestamp)

    def _reject_duplicate(self, rows, *, record_id: str, teacher_id: str, student_id: str) -> None:
        if find_attendee_row(rows, record_id=record_id, teacher_id=teacher_id, student_id=student_id):
            logger.info("duplicate scan of %s on record %s", student_id, record_id)
            raise DuplicateAttendanceError("Student already marked for this record.")

    def list_attendance(self, teacher_id: Optional[str], is_admin: bool = False) -> list[ClassGroup]:
        teacher_id = normalize(teacher_id)
        rows = self._read_rows()
        return build_class_groups(rows, include=lambda r: is_admin or r.teacher_id == teacher_id)

    def get_record(self, record_id: str, teacher_id: Optional[str], is_admin: bool = False) -> Optional[Session]:
        target = normalize(record_id)
        if not target:
            raise ValidationError("Record ID is required.")
        teacher_id = normalize(teacher_id)

        matching = [r for r in self._read_rows() if r.record_id == target]
        if not matching:
            return None

        # Authorization is checked per row: the append-only log has no record-level owner
        if not is_admin and any(r.teacher_id != teacher_id for r in matching):
            raise ForbiddenError("Not authorised to access this record.")

        session = fold_sessions(matching)[0]
        session.attendees = sort_attendees(session.attendees)
        return session
