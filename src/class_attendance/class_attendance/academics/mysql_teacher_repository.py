from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Teacher
from .repository import TeacherRepository

_SELECT = """
    SELECT
        t.teacher_id, t.user_id, t.department, u.name, u.email,
        (SELECT COUNT(*) FROM subjects sb WHERE sb.teacher_id = t.teacher_id) AS subject_count
    FROM teachers t
    JOIN users u ON u.user_id = t.user_id
"""


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        user_id=int(r["user_id"]),
        department=r["department"],
        name=r["name"],
        email=r["email"],
        subject_count=int(r.get("subject_count") or 0),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, email: str, password_hash: str, department: str) -> int:
        with db_cursor(self._conn_factory, duplicate_message="Email already registered") as (_, cur):
            cur.execute(
                "INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                (name, email, password_hash, Role.TEACHER.value),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO teachers(user_id, department) VALUES(%s,%s)",
                (user_id, department),
            )
            return int(cur.lastrowid)

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY u.name ASC")
            return [_to_teacher(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM teachers")
            return int(fetchone(cur)["n"])
