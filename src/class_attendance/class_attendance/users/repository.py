from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_teacher_id(self, user_id: int) -> Optional[int]:
        raise NotImplementedError

    def get_student_id(self, user_id: int) -> Optional[int]:
        raise NotImplementedError
