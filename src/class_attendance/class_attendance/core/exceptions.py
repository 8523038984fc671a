from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a time range does not end after it starts."""


class ConflictError(DomainError):
    """Raised when a timetable slot would double-book a class or a teacher."""

    def __init__(self, message: str, *, conflicting_entry: Optional[Any] = None):
        super().__init__(message)
        self.conflicting_entry = conflicting_entry


class ClassConflictError(ConflictError):
    """The class already hosts a lecture overlapping the candidate slot."""


class TeacherConflictError(ConflictError):
    """The teacher already teaches a lecture overlapping the candidate slot."""


class DuplicateEntityError(DomainError):
    """Raised when creating an entity would violate a uniqueness rule."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class StoreError(DomainError):
    """Backing store failure (connectivity, lost race). Safe to retry."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
