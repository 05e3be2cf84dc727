from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(self, teacher: Teacher) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError
