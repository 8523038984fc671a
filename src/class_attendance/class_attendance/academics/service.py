from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty, require_positive_id
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import DuplicateEntityError, NotFoundError
from ..users.repository import UserRepository
from .model import SchoolClass, Student, Subject, Teacher
from .repository import ClassRepository, StudentRepository, SubjectRepository, TeacherRepository

logger = logging.getLogger(__name__)


class AcademicsService:
    """Use case: admin-managed reference data (classes, teachers, students, subjects).

    Uniqueness is checked up front for a readable error; the store's unique keys
    remain the backstop and surface as ``DuplicateEntityError`` as well.
    """

    def __init__(
        self,
        classes: ClassRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
        subjects: SubjectRepository,
        users: UserRepository,
    ):
        self._classes = classes
        self._teachers = teachers
        self._students = students
        self._subjects = subjects
        self._users = users

    # classes

    def create_class(self, *, class_name: str, division: str, academic_year: str) -> SchoolClass:
        class_name = require_non_empty(class_name, "Class name")
        division = require_non_empty(division, "Division")
        academic_year = require_non_empty(academic_year, "Academic year")

        class_id = self._classes.create(class_name=class_name, division=division, academic_year=academic_year)
        logger.info("Created class %s %s (%s) id=%s", class_name, division, academic_year, class_id)
        return self.get_class(class_id)

    def get_class(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(require_positive_id(class_id, "class ID"))
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    # teachers

    def create_teacher(self, *, name: str, email: str, password: str, department: str) -> Teacher:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        department = require_non_empty(department, "Department")
        self._require_free_email(email)

        teacher_id = self._teachers.create(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            department=department,
        )
        logger.info("Created teacher %s id=%s", email, teacher_id)
        return self.get_teacher(teacher_id)

    def get_teacher(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(require_positive_id(teacher_id, "teacher ID"))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()

    # students

    def create_student(self, *, name: str, email: str, password: str, roll_no: str, class_id: int) -> Student:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        roll_no = require_non_empty(roll_no, "Roll number")
        school_class = self.get_class(class_id)
        self._require_free_email(email)

        if self._students.get_by_roll_no(class_id=school_class.class_id, roll_no=roll_no):
            raise DuplicateEntityError(f"Roll number {roll_no} already exists in {school_class.label}")

        student_id = self._students.create(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            roll_no=roll_no,
            class_id=school_class.class_id,
        )
        logger.info("Created student %s (roll %s, class %s) id=%s", email, roll_no, school_class.class_id, student_id)
        return self.get_student(student_id)

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(require_positive_id(student_id, "student ID"))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    # subjects

    def create_subject(self, *, subject_code: str, subject_name: str, class_id: int, teacher_id: int) -> Subject:
        subject_code = require_non_empty(subject_code, "Subject code")
        subject_name = require_non_empty(subject_name, "Subject name")
        school_class = self.get_class(class_id)
        teacher = self.get_teacher(teacher_id)

        if self._subjects.get_by_code(class_id=school_class.class_id, subject_code=subject_code):
            raise DuplicateEntityError(f"Subject code {subject_code} already exists in {school_class.label}")

        subject_id = self._subjects.create(
            subject_code=subject_code,
            subject_name=subject_name,
            class_id=school_class.class_id,
            teacher_id=teacher.teacher_id,
        )
        logger.info("Created subject %s for class %s id=%s", subject_code, school_class.class_id, subject_id)
        return self.get_subject(subject_id)

    def get_subject(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(require_positive_id(subject_id, "subject ID"))
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def list_subjects(self, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        if class_id is not None:
            class_id = require_positive_id(class_id, "class ID")
        return self._subjects.list_all(class_id=class_id)

    def _require_free_email(self, email: str) -> None:
        if self._users.get_by_email(email):
            raise DuplicateEntityError("Email already registered")
