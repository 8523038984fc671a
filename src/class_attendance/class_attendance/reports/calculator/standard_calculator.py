from __future__ import annotations

import math

from ...attendance.model import AttendanceCounts
from ...core.constants import PERCENTAGE_DECIMALS
from ..model import AttendanceStats
from .base import AttendanceCalculator


def round_half_up(value: float, decimals: int = PERCENTAGE_DECIMALS) -> float:
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


class StandardAttendanceCalculator(AttendanceCalculator):
    """Standard rule: present / total * 100, 2 decimals; no records -> 0."""

    def from_counts(self, counts: AttendanceCounts) -> AttendanceStats:
        total = int(counts.total)
        present = int(counts.present)
        if total <= 0:
            return AttendanceStats(total=0, present=0, absent=0, percentage=0)

        return AttendanceStats(
            total=total,
            present=present,
            absent=total - present,
            percentage=round_half_up(present / total * 100),
        )
