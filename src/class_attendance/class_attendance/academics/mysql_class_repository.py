from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, class_name: str, division: str, academic_year: str) -> int:
        with db_cursor(
            self._conn_factory,
            duplicate_message="Class already exists for this division and academic year",
        ) as (_, cur):
            cur.execute(
                "INSERT INTO classes(class_name, division, academic_year) VALUES(%s,%s,%s)",
                (class_name, division, academic_year),
            )
            return int(cur.lastrowid)

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, class_name, division, academic_year FROM classes WHERE class_id=%s",
                (int(class_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SchoolClass(
                class_id=int(r["class_id"]),
                class_name=r["class_name"],
                division=r["division"],
                academic_year=r["academic_year"],
            )

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    c.class_id, c.class_name, c.division, c.academic_year,
                    (SELECT COUNT(*) FROM students st WHERE st.class_id = c.class_id) AS student_count,
                    (SELECT COUNT(*) FROM subjects sb WHERE sb.class_id = c.class_id) AS subject_count
                FROM classes c
                ORDER BY c.class_name ASC, c.division ASC
                """
            )
            return [
                SchoolClass(
                    class_id=int(r["class_id"]),
                    class_name=r["class_name"],
                    division=r["division"],
                    academic_year=r["academic_year"],
                    student_count=int(r["student_count"] or 0),
                    subject_count=int(r["subject_count"] or 0),
                )
                for r in fetchall(cur)
            ]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM classes")
            return int(fetchone(cur)["n"])
