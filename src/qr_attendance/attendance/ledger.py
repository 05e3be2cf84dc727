"""Pure folds over the attendance row log.

Nothing here touches storage: callers hand in rows already read from a
``RowStore`` and get sessions / class groups back. That keeps grouping and
ordering rules testable without a spreadsheet.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import parse_iso
from ..core.constants import UNGROUPED_CLASS
from .model import AttendanceRow, Attendee, AttendeeRow, ClassGroup, MetaRow, Session, classify_row

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def classify_rows(raw_rows: Iterable[Sequence[object]]) -> list[AttendanceRow]:
    rows = []
    for cells in raw_rows:
        row = classify_row(cells)
        if row is not None:
            rows.append(row)
    return rows


def find_meta_row(rows: Iterable[AttendanceRow], *, record_id: str, teacher_id: str) -> Optional[MetaRow]:
    for row in rows:
        if isinstance(row, MetaRow) and row.record_id == record_id and row.teacher_id == teacher_id:
            return row
    return None


def find_attendee_row(
    rows: Iterable[AttendanceRow], *, record_id: str, teacher_id: str, student_id: str
) -> Optional[AttendeeRow]:
    for row in rows:
        if (
            isinstance(row, AttendeeRow)
            and row.record_id == record_id
            and row.teacher_id == teacher_id
            and row.student_id == student_id
        ):
            return row
    return None


def fold_sessions(rows: Iterable[AttendanceRow]) -> list[Session]:
    """Group rows by record id, in order of first appearance.

    A record whose meta row is missing still yields a session (``created_at``
    stays ``None``) as long as attendee rows exist.
    """

    sessions: dict[str, Session] = {}
    for row in rows:
        session = sessions.get(row.record_id)
        if session is None:
            session = Session(record_id=row.record_id, teacher_id=row.teacher_id)
            sessions[row.record_id] = session

        if row.class_name:
            session.class_name = row.class_name
        if row.session_name:
            session.session_name = row.session_name

        if isinstance(row, MetaRow):
            session.teacher_id = row.teacher_id
            session.created_at = row.timestamp or session.created_at
            continue

        session.attendees.append(
            Attendee(student_id=row.student_id, student_name=row.student_name, timestamp=row.timestamp)
        )

    return list(sessions.values())


def _time_key(value: Optional[str]) -> tuple[bool, datetime]:
    parsed = parse_iso(value)
    return (parsed is not None, parsed or _EPOCH)


def sort_attendees(attendees: Iterable[Attendee]) -> list[Attendee]:
    """Chronological scan order; unparseable timestamps sort first."""
    return sorted(attendees, key=lambda a: _time_key(a.timestamp))


def sort_sessions(sessions: Iterable[Session]) -> list[Session]:
    """Newest first; sessions without a creation time go last."""
    return sorted(sessions, key=lambda s: _time_key(s.created_at), reverse=True)


def group_by_class(sessions: Iterable[Session]) -> list[ClassGroup]:
    by_class: dict[str, list[Session]] = {}
    for session in sessions:
        by_class.setdefault(session.class_name or UNGROUPED_CLASS, []).append(session)

    return [
        ClassGroup(class_name=name, sessions=sort_sessions(items))
        for name, items in sorted(by_class.items(), key=lambda kv: (kv[0].casefold(), kv[0]))
    ]


def build_class_groups(
    rows: Iterable[AttendanceRow], *, include: Callable[[AttendanceRow], bool] = lambda _row: True
) -> list[ClassGroup]:
    return group_by_class(fold_sessions(r for r in rows if include(r)))
