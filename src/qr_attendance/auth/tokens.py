from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConfigurationError

JWT_ALGO = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity handed to the ledger; the ledger never sees the token."""

    teacher_id: str
    role: Role
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenSigner:
    def __init__(self, secret: str, *, expiry_hours: int = 12):
        if not secret:
            raise ConfigurationError("Missing JWT_SECRET environment variable")
        self._secret = secret
        self._expiry = timedelta(hours=int(expiry_hours))

    def sign(self, claims: TokenClaims, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "teacherId": claims.teacher_id,
            "role": claims.role.value,
            "email": claims.email,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expiry).timestamp()),
        }
        # pyjwt returns str in v2+
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGO)

    def verify(self, token: str) -> TokenClaims:
        if not token:
            raise AuthenticationError("Missing token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGO])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        teacher_id = str(payload.get("teacherId") or "").strip()
        if not teacher_id:
            raise AuthenticationError("Invalid token")
        try:
            role = Role(payload.get("role") or Role.TEACHER.value)
        except ValueError:
            raise AuthenticationError("Invalid token")

        return TokenClaims(teacher_id=teacher_id, role=role, email=str(payload.get("email") or ""))


def parse_bearer(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    scheme, _, token = (header or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing token")
    return token.strip()
