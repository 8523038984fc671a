from __future__ import annotations

from dataclasses import dataclass

from ..academics.model import Student


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int
    percentage: float


@dataclass(frozen=True)
class Defaulter:
    student: Student
    stats: AttendanceStats
