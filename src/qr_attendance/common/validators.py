from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def normalize(value: Any) -> str:
    """Trim a cell/form value into a string; ``None`` becomes ``""``."""
    return str(value).strip() if value is not None else ""


def require_non_empty(value: Any, field_name: str) -> str:
    cleaned = normalize(value)
    if not cleaned:
        raise ValidationError(f"{field_name} is required.")
    return cleaned


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters.")
    return value
