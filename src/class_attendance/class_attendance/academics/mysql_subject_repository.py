from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository

_SELECT = """
    SELECT
        sb.subject_id, sb.subject_code, sb.subject_name, sb.class_id, sb.teacher_id,
        CONCAT(c.class_name, ' ', c.division) AS class_label,
        u.name AS teacher_name
    FROM subjects sb
    JOIN classes c ON c.class_id = sb.class_id
    JOIN teachers t ON t.teacher_id = sb.teacher_id
    JOIN users u ON u.user_id = t.user_id
"""


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=int(r["subject_id"]),
        subject_code=r["subject_code"],
        subject_name=r["subject_name"],
        class_id=int(r["class_id"]),
        teacher_id=int(r["teacher_id"]),
        class_label=r.get("class_label") or "",
        teacher_name=r.get("teacher_name") or "",
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, subject_code: str, subject_name: str, class_id: int, teacher_id: int) -> int:
        with db_cursor(
            self._conn_factory,
            duplicate_message="Subject code already exists in this class",
        ) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(subject_code, subject_name, class_id, teacher_id)
                VALUES(%s,%s,%s,%s)
                """,
                (subject_code, subject_name, int(class_id), int(teacher_id)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sb.subject_id=%s", (int(subject_id),))
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def get_by_code(self, *, class_id: int, subject_code: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE sb.class_id=%s AND sb.subject_code=%s",
                (int(class_id), subject_code),
            )
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_all(self, *, class_id: Optional[int] = None) -> Sequence[Subject]:
        where = ""
        params: tuple = ()
        if class_id is not None:
            where = " WHERE sb.class_id=%s"
            params = (int(class_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY sb.subject_code ASC", params)
            return [_to_subject(r) for r in fetchall(cur)]

    def count(self, *, teacher_id: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if teacher_id is None:
                cur.execute("SELECT COUNT(*) AS n FROM subjects")
            else:
                cur.execute("SELECT COUNT(*) AS n FROM subjects WHERE teacher_id=%s", (int(teacher_id),))
            return int(fetchone(cur)["n"])
