from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..academics.repository import ClassRepository, SubjectRepository, TeacherRepository
from ..common.time_intervals import TimeRange
from ..common.validators import require_positive_id, require_weekday
from ..core.exceptions import (
    ClassConflictError,
    NotFoundError,
    StoreError,
    TeacherConflictError,
    ValidationError,
)
from .model import TimetableEntry
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


class TimetableService:
    """Use case: add weekly lecture slots without double-booking a class or a teacher.

    Two independent invariants are enforced per weekday:

    * a class hosts at most one lecture at any instant;
    * a teacher teaches at most one lecture at any instant.

    Slots are half-open ``[start, end)`` so back-to-back lectures are allowed.
    The class scope is checked first and only the first violation is reported.
    """

    def __init__(
        self,
        timetable: TimetableRepository,
        classes: ClassRepository,
        subjects: SubjectRepository,
        teachers: TeacherRepository,
    ):
        self._timetable = timetable
        self._classes = classes
        self._subjects = subjects
        self._teachers = teachers

    def create_entry(
        self,
        *,
        class_id: int,
        subject_id: int,
        teacher_id: int,
        day: str,
        start_time: str,
        end_time: str,
    ) -> TimetableEntry:
        weekday = require_weekday(day)
        slot = TimeRange.parse(start_time, end_time)
        class_id = require_positive_id(class_id, "class ID")
        subject_id = require_positive_id(subject_id, "subject ID")
        teacher_id = require_positive_id(teacher_id, "teacher ID")

        if not self._classes.get_by_id(class_id):
            raise NotFoundError("Class not found")
        subject = self._subjects.get_by_id(subject_id)
        if not subject:
            raise NotFoundError("Subject not found")
        if subject.class_id != class_id:
            raise ValidationError("Subject does not belong to this class")
        if not self._teachers.get_by_id(teacher_id):
            raise NotFoundError("Teacher not found")

        with self._timetable.transaction(class_id=class_id, teacher_id=teacher_id) as tx:
            for existing in tx.list_for_class_day(class_id=class_id, day=weekday):
                if slot.overlaps(existing.time_range):
                    logger.info(
                        "Rejected slot %s %s-%s: class %s busy (entry %s)",
                        weekday.value, slot.start_hhmm, slot.end_hhmm, class_id, existing.entry_id,
                    )
                    raise ClassConflictError(
                        f"Class already has a lecture on {weekday.value} "
                        f"{existing.start_time}-{existing.end_time}",
                        conflicting_entry=existing,
                    )

            for existing in tx.list_for_teacher_day(teacher_id=teacher_id, day=weekday):
                if slot.overlaps(existing.time_range):
                    logger.info(
                        "Rejected slot %s %s-%s: teacher %s busy (entry %s)",
                        weekday.value, slot.start_hhmm, slot.end_hhmm, teacher_id, existing.entry_id,
                    )
                    raise TeacherConflictError(
                        f"Teacher already teaches on {weekday.value} "
                        f"{existing.start_time}-{existing.end_time}",
                        conflicting_entry=existing,
                    )

            entry_id = tx.insert(
                class_id=class_id,
                subject_id=subject_id,
                teacher_id=teacher_id,
                day=weekday,
                start_time=slot.start_hhmm,
                end_time=slot.end_hhmm,
            )

        logger.info(
            "Created timetable entry %s: class %s, teacher %s, %s %s-%s",
            entry_id, class_id, teacher_id, weekday.value, slot.start_hhmm, slot.end_hhmm,
        )
        entry = self._timetable.get_by_id(entry_id)
        if entry is None:
            raise StoreError("Timetable entry could not be read back")
        return entry

    def list_entries(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        day: Optional[str] = None,
    ) -> Sequence[TimetableEntry]:
        """Entries matching the given filters, by weekday then start time."""
        if class_id is not None:
            class_id = require_positive_id(class_id, "class ID")
        if teacher_id is not None:
            teacher_id = require_positive_id(teacher_id, "teacher ID")
        weekday = require_weekday(day) if day is not None else None

        entries = self._timetable.list_entries(class_id=class_id, teacher_id=teacher_id, day=weekday)
        return sorted(entries, key=lambda e: e.sort_key)
