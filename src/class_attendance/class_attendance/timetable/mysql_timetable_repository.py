from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from ..core.enums import Weekday
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, mysql_time_to_hhmm
from .model import TimetableEntry
from .repository import TimetableRepository, TimetableTransaction

_COLUMNS = "te.entry_id, te.class_id, te.subject_id, te.teacher_id, te.day, te.start_time, te.end_time"

_SELECT_DETAILED = f"""
    SELECT
        {_COLUMNS},
        CONCAT(c.class_name, ' ', c.division) AS class_label,
        sb.subject_name,
        u.name AS teacher_name
    FROM timetable_entries te
    JOIN classes c ON c.class_id = te.class_id
    JOIN subjects sb ON sb.subject_id = te.subject_id
    JOIN teachers t ON t.teacher_id = te.teacher_id
    JOIN users u ON u.user_id = t.user_id
"""


def _to_entry(r: dict) -> TimetableEntry:
    return TimetableEntry(
        entry_id=int(r["entry_id"]),
        class_id=int(r["class_id"]),
        subject_id=int(r["subject_id"]),
        teacher_id=int(r["teacher_id"]),
        day=Weekday(r["day"]),
        start_time=mysql_time_to_hhmm(r["start_time"]),
        end_time=mysql_time_to_hhmm(r["end_time"]),
        class_label=r.get("class_label") or "",
        subject_name=r.get("subject_name") or "",
        teacher_name=r.get("teacher_name") or "",
    )


class _MySQLTimetableTransaction(TimetableTransaction):
    def __init__(self, cur):
        self._cur = cur

    def list_for_class_day(self, *, class_id: int, day: Weekday) -> Sequence[TimetableEntry]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM timetable_entries te WHERE te.class_id=%s AND te.day=%s",
            (int(class_id), day.value),
        )
        return [_to_entry(r) for r in fetchall(self._cur)]

    def list_for_teacher_day(self, *, teacher_id: int, day: Weekday) -> Sequence[TimetableEntry]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM timetable_entries te WHERE te.teacher_id=%s AND te.day=%s",
            (int(teacher_id), day.value),
        )
        return [_to_entry(r) for r in fetchall(self._cur)]

    def insert(
        self,
        *,
        class_id: int,
        subject_id: int,
        teacher_id: int,
        day: Weekday,
        start_time: str,
        end_time: str,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO timetable_entries(class_id, subject_id, teacher_id, day, start_time, end_time)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(class_id), int(subject_id), int(teacher_id), day.value, start_time, end_time),
        )
        return int(self._cur.lastrowid)


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self, *, class_id: int, teacher_id: int) -> Iterator[TimetableTransaction]:
        """Lock the class row, then the teacher row, then hand out the scope.

        Writers touching the same class or teacher queue on these row locks
        (always taken in that order, so they cannot deadlock). Under READ
        COMMITTED each later read sees every slot committed before the lock was
        granted, and no gap locks are taken on ``timetable_entries``.
        """
        with db_cursor(
            self._conn_factory,
            isolation_level="READ COMMITTED",
            duplicate_message="Timetable slot was taken concurrently, please retry",
            duplicate_error=StoreError,
        ) as (_, cur):
            cur.execute("SELECT class_id FROM classes WHERE class_id=%s FOR UPDATE", (int(class_id),))
            fetchall(cur)
            cur.execute("SELECT teacher_id FROM teachers WHERE teacher_id=%s FOR UPDATE", (int(teacher_id),))
            fetchall(cur)
            yield _MySQLTimetableTransaction(cur)

    def get_by_id(self, entry_id: int) -> Optional[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DETAILED + " WHERE te.entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_entries(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        day: Optional[Weekday] = None,
    ) -> Sequence[TimetableEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if class_id is not None:
            clauses.append("te.class_id=%s")
            params.append(int(class_id))
        if teacher_id is not None:
            clauses.append("te.teacher_id=%s")
            params.append(int(teacher_id))
        if day is not None:
            clauses.append("te.day=%s")
            params.append(day.value)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        # ENUM columns sort by declaration index, i.e. Monday..Sunday.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_DETAILED + where + " ORDER BY te.day ASC, te.start_time ASC",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]
