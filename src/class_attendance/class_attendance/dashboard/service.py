from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Union

from ..academics.repository import ClassRepository, StudentRepository, SubjectRepository, TeacherRepository
from ..common.datetime_utils import now_local, weekday_of
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..reports.service import ReportService
from ..timetable.repository import TimetableRepository
from ..users.model import SessionUser
from .model import AdminDashboard, StudentDashboard, TeacherDashboard

DashboardStats = Union[AdminDashboard, TeacherDashboard, StudentDashboard]


class DashboardService:
    """Role-scoped read-only summaries composed from the other services."""

    def __init__(
        self,
        classes: ClassRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
        subjects: SubjectRepository,
        timetable: TimetableRepository,
        reports: ReportService,
        *,
        clock: Callable = now_local,
    ):
        self._classes = classes
        self._teachers = teachers
        self._students = students
        self._subjects = subjects
        self._timetable = timetable
        self._reports = reports
        self._clock = clock

    def stats(self, identity: SessionUser, *, today: Optional[date] = None) -> DashboardStats:
        if identity.role == Role.ADMIN:
            return AdminDashboard(
                classes=self._classes.count(),
                teachers=self._teachers.count(),
                students=self._students.count(),
                subjects=self._subjects.count(),
            )

        if identity.role == Role.TEACHER:
            if identity.teacher_id is None:
                raise AuthorizationError("No teacher profile for this account")
            today = today or self._clock().date()
            lectures = sorted(
                self._timetable.list_entries(teacher_id=identity.teacher_id, day=weekday_of(today)),
                key=lambda e: e.start_time,
            )
            return TeacherDashboard(
                subjects=self._subjects.count(teacher_id=identity.teacher_id),
                today_lectures=len(lectures),
                lectures=lectures,
            )

        if identity.student_id is None:
            raise AuthorizationError("No student profile for this account")
        stats = self._reports.student_percentage(identity.student_id)
        return StudentDashboard(
            total_classes=stats.total,
            present=stats.present,
            absent=stats.absent,
            percentage=stats.percentage,
        )
