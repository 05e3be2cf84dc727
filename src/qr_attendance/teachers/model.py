from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher account stored in the teachers sheet."""

    teacher_id: str
    name: str
    email: str
    password_hash: str
    role: Role = Role.TEACHER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_public_dict(self) -> dict:
        return {
            "teacherId": self.teacher_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
