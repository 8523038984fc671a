from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple

from ..common.datetime_utils import to_calendar_day
from ..common.validators import require_positive_id, require_status
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance ledger: at most one status per (student, subject, calendar day).

    Marking is an idempotent upsert. Existence of the student/subject and the
    teacher's ownership of the lecture are checked by the caller.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def mark(self, *, student_id: int, subject_id: int, on, status, teacher_id: int) -> AttendanceRecord:
        day = to_calendar_day(on)
        record = self._attendance.upsert(
            student_id=require_positive_id(student_id, "student ID"),
            subject_id=require_positive_id(subject_id, "subject ID"),
            teacher_id=require_positive_id(teacher_id, "teacher ID"),
            on=day,
            status=require_status(status),
        )
        logger.info(
            "Marked student %s %s for subject %s on %s (teacher %s)",
            record.student_id, record.status.value, record.subject_id, record.date, teacher_id,
        )
        return record

    def mark_many(
        self,
        *,
        subject_id: int,
        on,
        marks: Iterable[Tuple[int, object]],
        teacher_id: int,
    ) -> list[AttendanceRecord]:
        """Mark a whole lecture in one transaction: every pair is stored, or none."""
        day = to_calendar_day(on)
        subject_id = require_positive_id(subject_id, "subject ID")
        teacher_id = require_positive_id(teacher_id, "teacher ID")
        parsed = [(require_positive_id(sid, "student ID"), require_status(status)) for sid, status in marks]

        records = list(
            self._attendance.upsert_many(subject_id=subject_id, teacher_id=teacher_id, on=day, marks=parsed)
        )
        logger.info(
            "Marked %s student(s) for subject %s on %s (teacher %s)", len(records), subject_id, day, teacher_id
        )
        return records

    def list_records(
        self,
        *,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        records = self._attendance.query(
            student_id=require_positive_id(student_id, "student ID") if student_id is not None else None,
            subject_id=require_positive_id(subject_id, "subject ID") if subject_id is not None else None,
            teacher_id=require_positive_id(teacher_id, "teacher ID") if teacher_id is not None else None,
        )
        return sorted(records, key=lambda r: r.date, reverse=True)
