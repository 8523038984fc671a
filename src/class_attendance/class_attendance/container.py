from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.mysql_class_repository import MySQLClassRepository
from .academics.mysql_student_repository import MySQLStudentRepository
from .academics.mysql_subject_repository import MySQLSubjectRepository
from .academics.mysql_teacher_repository import MySQLTeacherRepository
from .academics.repository import ClassRepository, StudentRepository, SubjectRepository, TeacherRepository
from .academics.service import AcademicsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_DEFAULTER_THRESHOLD
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    classes_repo: ClassRepository
    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    subjects_repo: SubjectRepository
    timetable_repo: TimetableRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    academics_service: AcademicsService
    timetable_service: TimetableService
    attendance_service: AttendanceService
    report_service: ReportService
    dashboard_service: DashboardService


def assemble(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    subjects_repo: SubjectRepository,
    timetable_repo: TimetableRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    defaulter_threshold: float = DEFAULT_DEFAULTER_THRESHOLD,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""
    report_service = ReportService(
        attendance_repo,
        students_repo,
        classes_repo,
        default_threshold=defaulter_threshold,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        academics_service=AcademicsService(classes_repo, teachers_repo, students_repo, subjects_repo, users_repo),
        timetable_service=TimetableService(timetable_repo, classes_repo, subjects_repo, teachers_repo),
        attendance_service=AttendanceService(attendance_repo),
        report_service=report_service,
        dashboard_service=DashboardService(
            classes_repo,
            teachers_repo,
            students_repo,
            subjects_repo,
            timetable_repo,
            report_service,
        ),
    )


def build_container(*, db_config: dict, defaulter_threshold: float = DEFAULT_DEFAULTER_THRESHOLD) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        defaulter_threshold=defaulter_threshold,
    )
