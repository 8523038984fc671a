from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Optional

import pytest

from class_attendance.academics.model import SchoolClass, Student, Subject, Teacher
from class_attendance.attendance.model import AttendanceCounts, AttendanceRecord, StudentAttendanceCounts
from class_attendance.container import Container, assemble
from class_attendance.core.enums import AttendanceStatus, Role, Weekday
from class_attendance.core.exceptions import DuplicateEntityError
from class_attendance.timetable.model import TimetableEntry
from class_attendance.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self.teacher_by_user: dict[int, int] = {}
        self.student_by_user: dict[int, int] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_teacher_id(self, user_id: int) -> Optional[int]:
        return self.teacher_by_user.get(int(user_id))

    def get_student_id(self, user_id: int) -> Optional[int]:
        return self.student_by_user.get(int(user_id))

    def add(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            raise DuplicateEntityError("Email already registered")
        self._id += 1
        self.users[self._id] = User(user_id=self._id, name=name, email=email, password_hash=password_hash, role=role)
        return self._id


class InMemoryClasses:
    def __init__(self):
        self.classes: dict[int, SchoolClass] = {}
        self._id = 0

    def create(self, *, class_name: str, division: str, academic_year: str) -> int:
        for c in self.classes.values():
            if (c.class_name, c.division, c.academic_year) == (class_name, division, academic_year):
                raise DuplicateEntityError("Class already exists for this division and academic year")
        self._id += 1
        self.classes[self._id] = SchoolClass(self._id, class_name, division, academic_year)
        return self._id

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self.classes.get(int(class_id))

    def list_all(self):
        return sorted(self.classes.values(), key=lambda c: (c.class_name, c.division))

    def count(self) -> int:
        return len(self.classes)


class InMemoryTeachers:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.teachers: dict[int, Teacher] = {}
        self._id = 0

    def create(self, *, name: str, email: str, password_hash: str, department: str) -> int:
        user_id = self._users.add(name=name, email=email, password_hash=password_hash, role=Role.TEACHER)
        self._id += 1
        self.teachers[self._id] = Teacher(self._id, user_id, department, name=name, email=email)
        self._users.teacher_by_user[user_id] = self._id
        return self._id

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self.teachers.get(int(teacher_id))

    def list_all(self):
        return list(self.teachers.values())

    def count(self) -> int:
        return len(self.teachers)


class InMemoryStudents:
    def __init__(self, users: InMemoryUsers, classes: InMemoryClasses):
        self._users = users
        self._classes = classes
        self.students: dict[int, Student] = {}
        self._id = 0

    def create(self, *, name: str, email: str, password_hash: str, roll_no: str, class_id: int) -> int:
        if self.get_by_roll_no(class_id=class_id, roll_no=roll_no):
            raise DuplicateEntityError("Email or roll number already registered")
        user_id = self._users.add(name=name, email=email, password_hash=password_hash, role=Role.STUDENT)
        self._id += 1
        label = self._classes.get_by_id(class_id).label
        self.students[self._id] = Student(self._id, user_id, roll_no, int(class_id), name, email, label)
        self._users.student_by_user[user_id] = self._id
        return self._id

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(int(student_id))

    def get_by_roll_no(self, *, class_id: int, roll_no: str) -> Optional[Student]:
        return next(
            (s for s in self.students.values() if s.class_id == int(class_id) and s.roll_no == roll_no),
            None,
        )

    def list_all(self):
        return sorted(self.students.values(), key=lambda s: s.roll_no)

    def count(self) -> int:
        return len(self.students)


class InMemorySubjects:
    def __init__(self):
        self.subjects: dict[int, Subject] = {}
        self._id = 0

    def create(self, *, subject_code: str, subject_name: str, class_id: int, teacher_id: int) -> int:
        if self.get_by_code(class_id=class_id, subject_code=subject_code):
            raise DuplicateEntityError("Subject code already exists in this class")
        self._id += 1
        self.subjects[self._id] = Subject(self._id, subject_code, subject_name, int(class_id), int(teacher_id))
        return self._id

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self.subjects.get(int(subject_id))

    def get_by_code(self, *, class_id: int, subject_code: str) -> Optional[Subject]:
        return next(
            (s for s in self.subjects.values() if s.class_id == int(class_id) and s.subject_code == subject_code),
            None,
        )

    def list_all(self, *, class_id=None):
        return [s for s in self.subjects.values() if class_id is None or s.class_id == int(class_id)]

    def count(self, *, teacher_id=None) -> int:
        return len([s for s in self.subjects.values() if teacher_id is None or s.teacher_id == int(teacher_id)])


class _InMemoryTimetableTx:
    def __init__(self, repo: "InMemoryTimetable"):
        self._repo = repo
        self._pending: list[TimetableEntry] = []

    def list_for_class_day(self, *, class_id: int, day: Weekday):
        return [e for e in self._repo.entries.values() if e.class_id == class_id and e.day == day]

    def list_for_teacher_day(self, *, teacher_id: int, day: Weekday):
        return [e for e in self._repo.entries.values() if e.teacher_id == teacher_id and e.day == day]

    def insert(self, *, class_id, subject_id, teacher_id, day, start_time, end_time) -> int:
        entry_id = self._repo.next_id()
        self._pending.append(TimetableEntry(entry_id, class_id, subject_id, teacher_id, day, start_time, end_time))
        return entry_id

    def commit(self) -> None:
        for e in self._pending:
            self._repo.entries[e.entry_id] = e


class InMemoryTimetable:
    """Per-class and per-teacher locks taken in that order, like the parent-row
    locks of the MySQL repository. Writers with disjoint scopes run concurrently.
    """

    def __init__(self):
        self.entries: dict[int, TimetableEntry] = {}
        self.scopes_opened: list[tuple[int, int]] = []
        self._id = 0
        self._guard = threading.Lock()
        self._scope_locks: dict[tuple[str, int], threading.Lock] = {}

    def next_id(self) -> int:
        with self._guard:
            self._id += 1
            return self._id

    def _scope_lock(self, kind: str, ident: int) -> threading.Lock:
        with self._guard:
            return self._scope_locks.setdefault((kind, ident), threading.Lock())

    @contextmanager
    def transaction(self, *, class_id: int, teacher_id: int):
        with self._scope_lock("class", class_id), self._scope_lock("teacher", teacher_id):
            self.scopes_opened.append((class_id, teacher_id))
            tx = _InMemoryTimetableTx(self)
            yield tx
            tx.commit()

    def get_by_id(self, entry_id: int) -> Optional[TimetableEntry]:
        return self.entries.get(int(entry_id))

    def list_entries(self, *, class_id=None, teacher_id=None, day=None):
        return [
            e
            for e in self.entries.values()
            if (class_id is None or e.class_id == class_id)
            and (teacher_id is None or e.teacher_id == teacher_id)
            and (day is None or e.day == day)
        ]


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.records: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0
        self.count_calls = 0

    def _write(self, staged: dict, *, student_id, subject_id, teacher_id, on, status) -> AttendanceRecord:
        key = (student_id, subject_id, on)
        existing = staged.get(key)
        if existing:
            rec = AttendanceRecord(existing.attendance_id, student_id, subject_id, existing.teacher_id, on, status)
        else:
            self._id += 1
            rec = AttendanceRecord(self._id, student_id, subject_id, teacher_id, on, status)
        staged[key] = rec
        return rec

    def upsert(self, *, student_id, subject_id, teacher_id, on, status) -> AttendanceRecord:
        return self.upsert_many(subject_id=subject_id, teacher_id=teacher_id, on=on, marks=[(student_id, status)])[0]

    def upsert_many(self, *, subject_id, teacher_id, on, marks):
        staged = dict(self.records)
        out = [
            self._write(staged, student_id=sid, subject_id=subject_id, teacher_id=teacher_id, on=on, status=status)
            for sid, status in marks
        ]
        self.records = staged
        return out

    def query(self, *, student_id=None, subject_id=None, teacher_id=None):
        out = [
            r
            for r in self.records.values()
            if (student_id is None or r.student_id == student_id)
            and (subject_id is None or r.subject_id == subject_id)
            and (teacher_id is None or r.teacher_id == teacher_id)
        ]
        return sorted(out, key=lambda r: r.date, reverse=True)

    def _counts(self, records) -> AttendanceCounts:
        records = list(records)
        return AttendanceCounts(
            total=len(records),
            present=len([r for r in records if r.status == AttendanceStatus.PRESENT]),
        )

    def count(self, *, student_id=None, class_id=None) -> AttendanceCounts:
        self.count_calls += 1
        return self._counts(
            r
            for r in self.records.values()
            if (student_id is None or r.student_id == student_id)
            and (class_id is None or self._students.get_by_id(r.student_id).class_id == class_id)
        )

    def counts_by_student(self):
        return [
            StudentAttendanceCounts(
                student=s,
                counts=self._counts(r for r in self.records.values() if r.student_id == s.student_id),
            )
            for s in sorted(self._students.students.values(), key=lambda s: s.student_id)
        ]


class InMemorySchool:
    """All repositories over shared in-memory state, plus seeding helpers."""

    def __init__(self):
        self.users = InMemoryUsers()
        self.classes = InMemoryClasses()
        self.teachers = InMemoryTeachers(self.users)
        self.students = InMemoryStudents(self.users, self.classes)
        self.subjects = InMemorySubjects()
        self.timetable = InMemoryTimetable()
        self.attendance = InMemoryAttendance(self.students)

    def container(self, **kwargs) -> Container:
        return assemble(
            users_repo=self.users,
            classes_repo=self.classes,
            teachers_repo=self.teachers,
            students_repo=self.students,
            subjects_repo=self.subjects,
            timetable_repo=self.timetable,
            attendance_repo=self.attendance,
            **kwargs,
        )

    def add_class(self, name: str = "Grade 10", division: str = "A", year: str = "2026-2027") -> int:
        return self.classes.create(class_name=name, division=division, academic_year=year)

    def add_teacher(self, name: str = "T", email: Optional[str] = None, password_hash: str = "x") -> int:
        email = email or f"{name.lower().replace(' ', '.')}@school.test"
        return self.teachers.create(name=name, email=email, password_hash=password_hash, department="Science")

    def add_student(self, class_id: int, roll_no: str, name: Optional[str] = None) -> int:
        name = name or f"Student {roll_no}"
        return self.students.create(
            name=name,
            email=f"s{class_id}-{roll_no}@school.test",
            password_hash="x",
            roll_no=roll_no,
            class_id=class_id,
        )

    def add_subject(self, class_id: int, teacher_id: int, code: str = "MATH") -> int:
        return self.subjects.create(subject_code=code, subject_name=code.title(), class_id=class_id, teacher_id=teacher_id)


@pytest.fixture
def school() -> InMemorySchool:
    return InMemorySchool()
