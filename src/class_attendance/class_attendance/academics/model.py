from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (grade + division) within an academic year."""

    class_id: int
    class_name: str
    division: str
    academic_year: str
    student_count: int = 0
    subject_count: int = 0

    @property
    def label(self) -> str:
        return f"{self.class_name} {self.division}"


@dataclass(frozen=True)
class Teacher:
    teacher_id: int
    user_id: int
    department: str
    name: str = ""
    email: str = ""
    subject_count: int = 0


@dataclass(frozen=True)
class Student:
    """Domain entity: Student. Roll numbers are unique within a class only."""

    student_id: int
    user_id: int
    roll_no: str
    class_id: int
    name: str = ""
    email: str = ""
    class_label: str = ""


@dataclass(frozen=True)
class Subject:
    """A subject code scoped to one class, taught by exactly one teacher."""

    subject_id: int
    subject_code: str
    subject_name: str
    class_id: int
    teacher_id: int
    class_label: str = ""
    teacher_name: str = ""
