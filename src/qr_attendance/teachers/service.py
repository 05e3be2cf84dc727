from __future__ import annotations

import uuid
from typing import Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.app_logger import get_logger
from ..common.validators import normalize, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Teacher
from .repository import TeacherRepository

logger = get_logger(__name__)


class AuthService:
    """Use case: authenticate a teacher (login)."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def authenticate(self, email: str, password: str) -> Teacher:
        teacher = self._teachers.get_by_email(normalize(email))
        if not teacher:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(teacher.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes typed into the sheet by hand
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return teacher


class TeacherService:
    """Use case: manage teacher accounts."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def create_teacher(self, *, email: str, password: str, name: str, role: Role = Role.TEACHER) -> Teacher:
        email = require_non_empty(email, "Email").lower()
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._teachers.get_by_email(email):
            raise ValidationError("A teacher account with this email already exists.")

        teacher = Teacher(
            teacher_id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        self._teachers.create(teacher)
        logger.info("created %s account %s", role.value, email)
        return teacher

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()
