from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login identity shared by admins, teachers and students.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role


@dataclass(frozen=True)
class SessionUser:
    """Already-authenticated acting identity handed to services.

    ``teacher_id`` / ``student_id`` are set for the matching role only.
    """

    user_id: int
    name: str
    email: str
    role: Role
    teacher_id: Optional[int] = None
    student_id: Optional[int] = None
