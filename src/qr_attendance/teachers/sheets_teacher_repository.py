from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import normalize
from ..core.constants import TEACHER_HEADERS
from ..core.enums import Role
from ..sheets.repository import RowStore
from .model import Teacher
from .repository import TeacherRepository


def _parse_role(value: str) -> Role:
    try:
        return Role(normalize(value).lower() or Role.TEACHER.value)
    except ValueError:
        return Role.TEACHER


class SheetsTeacherRepository(TeacherRepository):
    """Teacher accounts as rows of the teachers table, looked up by full scan."""

    def __init__(self, store: RowStore, *, table: str):
        self._store = store
        self._table = table

    def list_all(self) -> Sequence[Teacher]:
        snapshot = self._store.read_all(self._table, TEACHER_HEADERS)
        index = {name: i for i, name in enumerate(snapshot.headers)}

        def cell(row: list[str], column: str) -> str:
            i = index.get(column)
            return normalize(row[i]) if i is not None and i < len(row) else ""

        teachers = []
        for row in snapshot.rows:
            teacher_id = cell(row, "teacher_id")
            if not teacher_id:
                continue
            teachers.append(
                Teacher(
                    teacher_id=teacher_id,
                    name=cell(row, "name"),
                    email=cell(row, "email").lower(),
                    password_hash=cell(row, "password_hash"),
                    role=_parse_role(cell(row, "role")),
                )
            )
        return teachers

    def get_by_email(self, email: str) -> Optional[Teacher]:
        target = normalize(email).lower()
        for teacher in self.list_all():
            if teacher.email == target:
                return teacher
        return None

    def create(self, teacher: Teacher) -> None:
        self._store.append(
            self._table,
            TEACHER_HEADERS,
            [teacher.teacher_id, teacher.name, teacher.email, teacher.password_hash, teacher.role.value],
        )
