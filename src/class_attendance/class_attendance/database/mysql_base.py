from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Type

import mysql.connector
from mysql.connector import errorcode

from ..common.time_intervals import format_hhmm
from ..core.exceptions import DomainError, DuplicateEntityError, StoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_RETRYABLE = {errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT}


def translate_error(
    exc: mysql.connector.Error,
    *,
    duplicate_message: str = "Record already exists",
    duplicate_error: Type[DomainError] = DuplicateEntityError,
) -> Exception:
    """Map a driver error onto the domain error taxonomy."""
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return duplicate_error(duplicate_message)
    if exc.errno in _RETRYABLE:
        return StoreError("Concurrent update detected, please retry")
    return StoreError(f"Database error: {exc.msg or exc}")


@contextmanager
def db_cursor(
    conn_factory: DatabaseConnection,
    *,
    dictionary: bool = True,
    isolation_level: Optional[str] = None,
    duplicate_message: str = "Record already exists",
    duplicate_error: Type[DomainError] = DuplicateEntityError,
):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits when the block exits normally; rolls back on any exception. Driver
    errors are re-raised as ``StoreError`` / ``DuplicateEntityError``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Database connection failed: %s", exc)
        raise StoreError("Database unavailable") from exc

    try:
        if isolation_level:
            conn.start_transaction(isolation_level=isolation_level)
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.warning("Database operation failed (errno=%s): %s", exc.errno, exc)
        raise translate_error(exc, duplicate_message=duplicate_message, duplicate_error=duplicate_error) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def mysql_time_to_hhmm(value: Any) -> str:
    """Render a MySQL TIME column as ``HH:MM``.

    The C extension returns ``timedelta``, the pure driver may hand back
    ``time`` or an ``HH:MM:SS`` string.
    """
    if value is None:
        return ""
    if isinstance(value, timedelta):
        return format_hhmm(int(value.total_seconds()) % 86400 // 60)
    if isinstance(value, time):
        return format_hhmm(value.hour * 60 + value.minute)
    if isinstance(value, str):
        hours, minutes = value.strip().split(":")[:2]
        return format_hhmm(int(hours) * 60 + int(minutes))
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
