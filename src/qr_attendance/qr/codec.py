from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..core.constants import DEFAULT_QR_JSON_PREFIX, QR_SEPARATOR
from ..core.enums import QrFormat
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class StudentIdentity:
    """What a student's QR code carries. ``student_id`` is opaque text, never a number."""

    student_id: str
    student_name: str


class QrCodec(ABC):
    """Encode/decode a student identity to a single-line QR payload.

    ``decode`` never raises: any malformed input gives ``None`` so a bad read
    cannot take down the scan loop.
    """

    @abstractmethod
    def encode(self, identity: StudentIdentity) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, text: Any) -> Optional[StudentIdentity]:
        raise NotImplementedError


class PipeQrCodec(QrCodec):
    """``<studentId>|<studentName>``.

    No escaping: a separator inside either field produces a payload that
    decodes to ``None``.
    """

    separator = QR_SEPARATOR

    def encode(self, identity: StudentIdentity) -> str:
        return f"{identity.student_id.strip()}{self.separator}{identity.student_name.strip()}"

    def decode(self, text: Any) -> Optional[StudentIdentity]:
        try:
            if not isinstance(text, str):
                return None
            parts = [p.strip() for p in text.strip().split(self.separator)]
            if len(parts) != 2 or not all(parts):
                return None
            return StudentIdentity(student_id=parts[0], student_name=parts[1])
        except Exception:
            return None


def _text_field(value: Any) -> str:
    # bools are ints in Python; a producer writing true/false is not sending an id
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return ""
    return str(value).strip()


class JsonQrCodec(QrCodec):
    """``{"p": <prefix>, "id": ..., "name": ...}``; the prefix tags our payloads."""

    def __init__(self, prefix: str = DEFAULT_QR_JSON_PREFIX):
        self._prefix = prefix

    def encode(self, identity: StudentIdentity) -> str:
        return json.dumps(
            {
                "p": self._prefix,
                "id": identity.student_id.strip(),
                "name": identity.student_name.strip(),
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def decode(self, text: Any) -> Optional[StudentIdentity]:
        try:
            parsed = json.loads(text)
            if not isinstance(parsed, dict) or parsed.get("p") != self._prefix:
                return None
            student_id = _text_field(parsed.get("id"))
            student_name = _text_field(parsed.get("name"))
            if not student_id or not student_name:
                return None
            return StudentIdentity(student_id=student_id, student_name=student_name)
        except Exception:
            return None


def build_codec(fmt: str | QrFormat = QrFormat.PIPE, *, json_prefix: str = DEFAULT_QR_JSON_PREFIX) -> QrCodec:
    try:
        fmt = QrFormat(str(getattr(fmt, "value", fmt)).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unsupported QR_FORMAT: {fmt!r}")

    if fmt == QrFormat.JSON:
        return JsonQrCodec(json_prefix)
    return PipeQrCodec()
