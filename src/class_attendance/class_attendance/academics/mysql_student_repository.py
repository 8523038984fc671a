from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT
        st.student_id, st.user_id, st.roll_no, st.class_id,
        u.name, u.email,
        CONCAT(c.class_name, ' ', c.division) AS class_label
    FROM students st
    JOIN users u ON u.user_id = st.user_id
    JOIN classes c ON c.class_id = st.class_id
"""


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]),
        roll_no=r["roll_no"],
        class_id=int(r["class_id"]),
        name=r["name"],
        email=r["email"],
        class_label=r.get("class_label") or "",
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, email: str, password_hash: str, roll_no: str, class_id: int) -> int:
        with db_cursor(
            self._conn_factory,
            duplicate_message="Email or roll number already registered",
        ) as (_, cur):
            cur.execute(
                "INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (name, email, password_hash, Role.STUDENT.value),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO students(user_id, roll_no, class_id) VALUES(%s,%s,%s)",
                (user_id, roll_no, int(class_id)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE st.student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_roll_no(self, *, class_id: int, roll_no: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE st.class_id=%s AND st.roll_no=%s", (int(class_id), roll_no))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY st.roll_no ASC, st.student_id ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students")
            return int(fetchone(cur)["n"])
