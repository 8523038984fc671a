from __future__ import annotations

import re

from ..core.enums import AttendanceStatus, Weekday
from ..core.exceptions import ValidationError

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_DIGITS = re.compile(r"^[0-9]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Email")
    if not _EMAIL.match(value):
        raise ValidationError("Invalid email address")
    return value.lower()


def require_positive_id(value, field_name: str) -> int:
    """Accept an ``int`` or a string of ASCII digits. Booleans and floats are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    if isinstance(value, int):
        ident = value
    elif isinstance(value, str) and _DIGITS.match(value.strip()):
        ident = int(value.strip())
    else:
        raise ValidationError(f"Invalid {field_name}")
    if ident <= 0:
        raise ValidationError(f"Invalid {field_name}")
    return ident


def require_weekday(value) -> Weekday:
    """Accept exactly one of the seven capitalized English weekday names."""
    if isinstance(value, Weekday):
        return value
    try:
        return Weekday(value)
    except ValueError:
        raise ValidationError(f"Invalid day: {value!r}") from None


def require_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid attendance status: {value!r}") from None


def require_threshold(value) -> float:
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Threshold must be a number") from None
    if not 0 <= threshold <= 100:
        raise ValidationError("Threshold must be between 0 and 100")
    return threshold
