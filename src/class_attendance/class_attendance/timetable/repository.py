from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import TimetableEntry


class TimetableTransaction(Protocol):
    """Reads and writes that must be observed atomically by other writers.

    Opened for one class and one teacher. Writers sharing either of them are
    serialized until the enclosing transaction ends.
    """

    def list_for_class_day(self, *, class_id: int, day: Weekday) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    def list_for_teacher_day(self, *, teacher_id: int, day: Weekday) -> Sequence[TimetableEntry]:
        raise NotImplementedError

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
        """Returns entry_id."""

        raise NotImplementedError


class TimetableRepository(Protocol):
    def transaction(self, *, class_id: int, teacher_id: int) -> ContextManager[TimetableTransaction]:
        """Open a check-then-insert transaction scoped to a class and a teacher.

        Rolls back if the block raises.
        """

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimetableEntry]:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        day: Optional[Weekday] = None,
    ) -> Sequence[TimetableEntry]:
        """Ordered by weekday then start time."""

        raise NotImplementedError
