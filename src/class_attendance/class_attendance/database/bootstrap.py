from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# (name, email, password, role) of the accounts created by ensure_demo_users
DEMO_ACCOUNTS = (
    ("Admin Demo", "admin@school.test", "admin123", "ADMIN"),
    ("Teacher Demo", "teacher@school.test", "teacher123", "TEACHER"),
    ("Student Demo", "student@school.test", "student123", "STUDENT"),
)
DEMO_CLASS = ("Grade 10", "A", "2026-2027")
DEMO_DEPARTMENT = "Science"

_DB_SCOPED = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


@contextmanager
def _admin_session(db_config: dict, *, with_database: bool = True) -> Iterator:
    """Connection for setup scripts: commits on success, always closes."""
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(**target.connect_kwargs(with_database=with_database), use_pure=True)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def split_statements(sql: str) -> list[str]:
    """Split a schema script into statements.

    Statements end with ``;`` at end of line, ``--`` lines are comments, and
    ``CREATE DATABASE`` / ``USE`` are dropped so the configured database wins.
    """
    statements: list[str] = []
    current: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        current.append(line)
        if stripped.endswith(";"):
            stmt = "\n".join(current).strip().rstrip(";").strip()
            current = []
            if not _DB_SCOPED.match(stmt):
                statements.append(stmt)
    if current:
        statements.append("\n".join(current).strip())
    return statements


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _admin_session(db_config, with_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every statement of ``schema_path``."""
    ensure_database_exists(db_config)
    statements = split_statements(Path(schema_path).read_text(encoding="utf-8"))

    with _admin_session(db_config) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
    logger.info("Applied %s schema statement(s) from %s", len(statements), schema_path)


def _upsert_account(cur, name: str, email: str, password: str, role: str) -> int:
    cur.execute(
        """
        INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE name=VALUES(name), password_hash=VALUES(password_hash), role=VALUES(role)
        """,
        (name, email, generate_password_hash(password), role),
    )
    cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
    return int(cur.fetchone()["user_id"])


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset the password of) one demo admin, teacher and student.

    The student is enrolled with roll number 1 in the demo class.
    """
    with _admin_session(db_config) as conn:
        cur = conn.cursor(dictionary=True)

        cur.execute("INSERT IGNORE INTO classes(class_name, division, academic_year) VALUES(%s,%s,%s)", DEMO_CLASS)
        cur.execute(
            "SELECT class_id FROM classes WHERE class_name=%s AND division=%s AND academic_year=%s",
            DEMO_CLASS,
        )
        class_id = int(cur.fetchone()["class_id"])

        for name, email, password, role in DEMO_ACCOUNTS:
            user_id = _upsert_account(cur, name, email, password, role)
            if role == "TEACHER":
                cur.execute(
                    "INSERT IGNORE INTO teachers(user_id, department) VALUES(%s,%s)",
                    (user_id, DEMO_DEPARTMENT),
                )
            elif role == "STUDENT":
                cur.execute(
                    "INSERT IGNORE INTO students(user_id, roll_no, class_id) VALUES(%s,%s,%s)",
                    (user_id, "1", class_id),
                )

    logger.info("Demo accounts ready in %s", db_config.get("database"))


def list_tables(db_config: dict) -> list[str]:
    with _admin_session(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
