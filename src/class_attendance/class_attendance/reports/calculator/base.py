from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceCounts, AttendanceRecord
from ...core.enums import AttendanceStatus
from ..model import AttendanceStats


class AttendanceCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance percentages)."""

    @abstractmethod
    def from_counts(self, counts: AttendanceCounts) -> AttendanceStats:
        raise NotImplementedError

    def from_records(self, records: Iterable[AttendanceRecord]) -> AttendanceStats:
        total = 0
        present = 0
        for r in records:
            total += 1
            if r.status == AttendanceStatus.PRESENT:
                present += 1
        return self.from_counts(AttendanceCounts(total=total, present=present))
