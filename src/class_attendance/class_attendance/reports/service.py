from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..academics.repository import ClassRepository, StudentRepository
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_positive_id, require_threshold
from ..core.constants import DEFAULT_DEFAULTER_THRESHOLD
from ..core.exceptions import NotFoundError
from .calculator.base import AttendanceCalculator
from .calculator.standard_calculator import StandardAttendanceCalculator
from .model import AttendanceStats, Defaulter

logger = logging.getLogger(__name__)


class ReportService:
    """Reduce attendance rows into percentages and defaulter lists.

    Totals come from count queries on the repository; rows are never loaded
    just to be counted.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        *,
        calculator: Optional[AttendanceCalculator] = None,
        default_threshold: float = DEFAULT_DEFAULTER_THRESHOLD,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._calculator = calculator or StandardAttendanceCalculator()
        self._default_threshold = require_threshold(default_threshold)

    def percentage(self, records: Iterable[AttendanceRecord]) -> AttendanceStats:
        return self._calculator.from_records(records)

    def student_percentage(self, student_id: int) -> AttendanceStats:
        student_id = require_positive_id(student_id, "student ID")
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")
        return self._calculator.from_counts(self._attendance.count(student_id=student_id))

    def class_percentage(self, class_id: int) -> AttendanceStats:
        class_id = require_positive_id(class_id, "class ID")
        if not self._classes.get_by_id(class_id):
            raise NotFoundError("Class not found")
        return self._calculator.from_counts(self._attendance.count(class_id=class_id))

    def overall_percentage(self) -> AttendanceStats:
        return self._calculator.from_counts(self._attendance.count())

    def defaulters(self, threshold: Optional[float] = None) -> list[Defaulter]:
        """Students strictly below ``threshold`` percent, worst attendance first.

        Ties keep the repository's enumeration order (``sorted`` is stable).
        Students with no records count as 0%.
        """
        limit = self._default_threshold if threshold is None else require_threshold(threshold)

        out: list[Defaulter] = []
        for row in self._attendance.counts_by_student():
            stats = self._calculator.from_counts(row.counts)
            if stats.percentage < limit:
                out.append(Defaulter(student=row.student, stats=stats))

        out.sort(key=lambda d: d.stats.percentage)
        logger.info("Defaulter report: %s student(s) below %s%%", len(out), limit)
        return out
