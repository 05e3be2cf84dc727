from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..common.validators import normalize
from ..core.constants import META_FLAG


@dataclass(frozen=True)
class MetaRow:
    """Session creation row: labels + creation time, sentinel student columns."""

    record_id: str
    teacher_id: str
    class_name: str
    session_name: str
    timestamp: str

    def to_cells(self) -> list[str]:
        return [
            self.record_id,
            self.teacher_id,
            self.class_name,
            self.session_name,
            META_FLAG,
            META_FLAG,
            self.timestamp,
        ]


@dataclass(frozen=True)
class AttendeeRow:
    """One student's mark for one session."""

    record_id: str
    teacher_id: str
    class_name: str
    session_name: str
    student_id: str
    student_name: str
    timestamp: str

    def to_cells(self) -> list[str]:
        return [
            self.record_id,
            self.teacher_id,
            self.class_name,
            self.session_name,
            self.student_id,
            self.student_name,
            self.timestamp,
        ]


AttendanceRow = Union[MetaRow, AttendeeRow]


def classify_row(cells: Sequence[object]) -> Optional[AttendanceRow]:
    """Turn a flat sheet row into ``MetaRow`` / ``AttendeeRow``.

    The only place that knows about the sentinel. Rows missing a record id,
    a teacher id or (for attendee rows) a student id give ``None``.
    """

    padded = list(cells) + [""] * (7 - len(cells))
    record_id, teacher_id, class_name, session_name, student_id, student_name, timestamp = (
        normalize(v) for v in padded[:7]
    )

    if not record_id or not teacher_id:
        return None

    if student_id == META_FLAG:
        return MetaRow(
            record_id=record_id,
            teacher_id=teacher_id,
            class_name=class_name,
            session_name=session_name,
            timestamp=timestamp,
        )

    if not student_id:
        return None

    return AttendeeRow(
        record_id=record_id,
        teacher_id=teacher_id,
        class_name=class_name,
        session_name=session_name,
        student_id=student_id,
        student_name=student_name,
        timestamp=timestamp,
    )


@dataclass(frozen=True)
class Attendee:
    student_id: str
    student_name: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "timestamp": self.timestamp,
        }


# A successful mark returns the same fields the confirmation list shows.
AttendeeMark = Attendee


@dataclass
class Session:
    """Read-model reconstructed from a record's meta row plus attendee rows."""

    record_id: str
    teacher_id: str
    class_name: str = ""
    session_name: str = ""
    created_at: Optional[str] = None
    attendees: list[Attendee] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "recordId": self.record_id,
            "teacherId": self.teacher_id,
            "className": self.class_name,
            "recordName": self.session_name,
            "createdAt": self.created_at,
            "attendees": [a.to_dict() for a in self.attendees],
        }


@dataclass(frozen=True)
class ClassGroup:
    class_name: str
    sessions: list[Session]

    def to_dict(self) -> dict:
        return {
            "className": self.class_name,
            "records": [s.to_dict() for s in self.sessions],
        }
