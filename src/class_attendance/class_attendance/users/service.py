from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import SessionUser
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login) and resolve the acting identity."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Rejected login for %s", email)
            raise AuthenticationError("Invalid credentials")

        return self.identity_for(user.user_id)

    def identity_for(self, user_id: int) -> SessionUser:
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("Invalid session")

        teacher_id = self._users.get_teacher_id(user.user_id) if user.role == Role.TEACHER else None
        student_id = self._users.get_student_id(user.user_id) if user.role == Role.STUDENT else None
        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            teacher_id=teacher_id,
            student_id=student_id,
        )
