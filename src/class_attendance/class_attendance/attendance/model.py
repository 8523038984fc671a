from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..academics.model import Student
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one subject on one calendar day."""

    attendance_id: int
    student_id: int
    subject_id: int
    teacher_id: int
    date: date
    status: AttendanceStatus
    student_name: str = ""
    roll_no: str = ""
    subject_name: str = ""
    teacher_name: str = ""


@dataclass(frozen=True)
class AttendanceCounts:
    """Count-only read model: aggregation never needs the rows themselves."""

    total: int
    present: int


@dataclass(frozen=True)
class StudentAttendanceCounts:
    student: Student
    counts: AttendanceCounts
