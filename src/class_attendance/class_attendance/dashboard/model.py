from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..timetable.model import TimetableEntry


@dataclass(frozen=True)
class AdminDashboard:
    classes: int
    teachers: int
    students: int
    subjects: int


@dataclass(frozen=True)
class TeacherDashboard:
    subjects: int
    today_lectures: int
    lectures: Sequence[TimetableEntry]


@dataclass(frozen=True)
class StudentDashboard:
    total_classes: int
    present: int
    absent: int
    percentage: float
