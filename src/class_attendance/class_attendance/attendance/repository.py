from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from .model import AttendanceCounts, AttendanceRecord, StudentAttendanceCounts


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        subject_id: int,
        teacher_id: int,
        on: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert, or overwrite the status of, the (student, subject, day) record.

        An overwrite keeps the teacher_id stored by the first mark.
        """

        raise NotImplementedError

    def upsert_many(
        self,
        *,
        subject_id: int,
        teacher_id: int,
        on: date,
        marks: Sequence[Tuple[int, AttendanceStatus]],
    ) -> Sequence[AttendanceRecord]:
        """Apply every ``(student_id, status)`` upsert in one transaction.

        Either all marks are stored or none is. Records come back in ``marks`` order.
        """

        raise NotImplementedError

    def query(
        self,
        *,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest day first. A ``None`` filter leaves that field unconstrained."""

        raise NotImplementedError

    def count(
        self,
        *,
        student_id: Optional[int] = None,
        class_id: Optional[int] = None,
    ) -> AttendanceCounts:
        raise NotImplementedError

    def counts_by_student(self) -> Sequence[StudentAttendanceCounts]:
        """Every student (including those without records), in student_id order."""

        raise NotImplementedError
