from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Tuple

from ..academics.model import Student
from ..core.enums import AttendanceStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceCounts, AttendanceRecord, StudentAttendanceCounts
from .repository import AttendanceRepository

_SELECT = """
    SELECT
        ar.attendance_id, ar.student_id, ar.subject_id, ar.teacher_id,
        ar.attendance_date, ar.status,
        su.name AS student_name, st.roll_no,
        sb.subject_name,
        tu.name AS teacher_name
    FROM attendance_records ar
    JOIN students st ON st.student_id = ar.student_id
    JOIN users su ON su.user_id = st.user_id
    JOIN subjects sb ON sb.subject_id = ar.subject_id
    JOIN teachers t ON t.teacher_id = ar.teacher_id
    JOIN users tu ON tu.user_id = t.user_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        subject_id=int(r["subject_id"]),
        teacher_id=int(r["teacher_id"]),
        date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        student_name=r.get("student_name") or "",
        roll_no=r.get("roll_no") or "",
        subject_name=r.get("subject_name") or "",
        teacher_name=r.get("teacher_name") or "",
    )


def _where(filters: Sequence[tuple[str, Optional[int]]]) -> tuple[str, tuple]:
    """``WHERE`` clause for the filters whose value is set (all AND-ed)."""
    active = [(column, int(value)) for column, value in filters if value is not None]
    if not active:
        return "", ()
    return " WHERE " + " AND ".join(f"{column}=%s" for column, _ in active), tuple(v for _, v in active)


def _to_counts(r: Optional[dict]) -> AttendanceCounts:
    if not r:
        return AttendanceCounts(total=0, present=0)
    return AttendanceCounts(total=int(r["total"] or 0), present=int(r["present"] or 0))


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        student_id: int,
        subject_id: int,
        teacher_id: int,
        on: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        records = self.upsert_many(subject_id=subject_id, teacher_id=teacher_id, on=on, marks=[(student_id, status)])
        return records[0]

    def upsert_many(
        self,
        *,
        subject_id: int,
        teacher_id: int,
        on: date,
        marks: Sequence[Tuple[int, AttendanceStatus]],
    ) -> Sequence[AttendanceRecord]:
        if not marks:
            return []

        student_ids = [int(sid) for sid, _ in marks]
        # Each statement hits the (student_id, subject_id, attendance_date) unique
        # key, so concurrent marks for the same day cannot create two rows.
        with db_cursor(self._conn_factory) as (_, cur):
            for student_id, (_, status) in zip(student_ids, marks):
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, subject_id, teacher_id, attendance_date, status)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status)
                    """,
                    (student_id, int(subject_id), int(teacher_id), on, status.value),
                )
            placeholders = ",".join(["%s"] * len(student_ids))
            cur.execute(
                _SELECT + f" WHERE ar.subject_id=%s AND ar.attendance_date=%s AND ar.student_id IN ({placeholders})",
                (int(subject_id), on, *student_ids),
            )
            by_student = {int(r["student_id"]): _to_record(r) for r in fetchall(cur)}
            missing = [sid for sid in student_ids if sid not in by_student]
            if missing:
                raise StoreError(f"Attendance for student(s) {missing} could not be read back")

        return [by_student[sid] for sid in student_ids]

    def query(
        self,
        *,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = _where(
            [("ar.student_id", student_id), ("ar.subject_id", subject_id), ("ar.teacher_id", teacher_id)]
        )

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + where + " ORDER BY ar.attendance_date DESC, ar.attendance_id DESC",
                params,
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        student_id: Optional[int] = None,
        class_id: Optional[int] = None,
    ) -> AttendanceCounts:
        where, params = _where([("ar.student_id", student_id), ("st.class_id", class_id)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total, SUM(ar.status = 'PRESENT') AS present
                FROM attendance_records ar
                JOIN students st ON st.student_id = ar.student_id
                {where}
                """,
                params,
            )
            return _to_counts(fetchone(cur))

    def counts_by_student(self) -> Sequence[StudentAttendanceCounts]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    st.student_id, st.user_id, st.roll_no, st.class_id,
                    u.name, u.email,
                    CONCAT(c.class_name, ' ', c.division) AS class_label,
                    COUNT(ar.attendance_id) AS total,
                    SUM(ar.status = 'PRESENT') AS present
                FROM students st
                JOIN users u ON u.user_id = st.user_id
                JOIN classes c ON c.class_id = st.class_id
                LEFT JOIN attendance_records ar ON ar.student_id = st.student_id
                GROUP BY st.student_id, st.user_id, st.roll_no, st.class_id,
                         u.name, u.email, c.class_name, c.division
                ORDER BY st.student_id ASC
                """
            )
            out: list[StudentAttendanceCounts] = []
            for r in fetchall(cur):
                student = Student(
                    student_id=int(r["student_id"]),
                    user_id=int(r["user_id"]),
                    roll_no=r["roll_no"],
                    class_id=int(r["class_id"]),
                    name=r["name"],
                    email=r["email"],
                    class_label=r.get("class_label") or "",
                )
                out.append(StudentAttendanceCounts(student=student, counts=_to_counts(r)))
            return out
