from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass, Student, Subject, Teacher


class ClassRepository(Protocol):
    def create(self, *, class_name: str, division: str, academic_year: str) -> int:
        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SchoolClass]:
        """Ordered by class name, with student/subject counts."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class TeacherRepository(Protocol):
    def create(self, *, name: str, email: str, password_hash: str, department: str) -> int:
        """Create the user identity and the teacher profile in one transaction.

        Returns teacher_id.
        """

        raise NotImplementedError

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class StudentRepository(Protocol):
    def create(self, *, name: str, email: str, password_hash: str, roll_no: str, class_id: int) -> int:
        """Create the user identity and the student profile in one transaction.

        Returns student_id.
        """

        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_no(self, *, class_id: int, roll_no: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """Ordered by roll number."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class SubjectRepository(Protocol):
    def create(self, *, subject_code: str, subject_name: str, class_id: int, teacher_id: int) -> int:
        raise NotImplementedError

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def get_by_code(self, *, class_id: int, subject_code: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        raise NotImplementedError

    def count(self, *, teacher_id: Optional[int] = None) -> int:
        raise NotImplementedError
