from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from ..core.exceptions import InvalidRangeError, ValidationError

_HHMM = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

TimeValue = Union[str, int]


def parse_hhmm(value: str) -> int:
    """Parse ``HH:MM`` (24-hour, leading zero optional) into minutes since midnight."""
    if not isinstance(value, str):
        raise ValidationError("Invalid time format (HH:MM)")
    m = _HHMM.match(value.strip())
    if not m:
        raise ValidationError(f"Invalid time format (HH:MM): {value!r}")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _as_minutes(value: TimeValue) -> int:
    if isinstance(value, int):
        return value
    return parse_hhmm(value)


def overlaps(a_start: TimeValue, a_end: TimeValue, b_start: TimeValue, b_end: TimeValue) -> bool:
    """Whether two half-open ranges ``[start, end)`` share any instant.

    Touching ranges (``a_end == b_start``) do not overlap.
    """
    return _as_minutes(a_start) < _as_minutes(b_end) and _as_minutes(b_start) < _as_minutes(a_end)


@dataclass(frozen=True)
class TimeRange:
    start: int
    end: int

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeRange":
        """Build a range from ``HH:MM`` strings, requiring ``end > start``."""
        rng = cls(parse_hhmm(start), parse_hhmm(end))
        if rng.end <= rng.start:
            raise InvalidRangeError("End time must be after start time")
        return rng

    def overlaps(self, other: "TimeRange") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    @property
    def start_hhmm(self) -> str:
        return format_hhmm(self.start)

    @property
    def end_hhmm(self) -> str:
        return format_hhmm(self.end)
