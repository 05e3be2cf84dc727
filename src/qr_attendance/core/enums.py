from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role carried in the verified auth claim."""

    ADMIN = "admin"
    TEACHER = "teacher"


class QrFormat(str, Enum):
    """Wire format of the student QR payload. Exactly one is active per deployment."""

    PIPE = "pipe"
    JSON = "json"


class StoreBackend(str, Enum):
    SHEETS = "sheets"
    MEMORY = "memory"
