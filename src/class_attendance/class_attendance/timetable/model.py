from __future__ import annotations

from dataclasses import dataclass

from ..common.time_intervals import TimeRange, parse_hhmm
from ..core.enums import Weekday


@dataclass(frozen=True)
class TimetableEntry:
    """Domain entity: one weekly lecture slot. Times are zero-padded ``HH:MM``."""

    entry_id: int
    class_id: int
    subject_id: int
    teacher_id: int
    day: Weekday
    start_time: str
    end_time: str
    class_label: str = ""
    subject_name: str = ""
    teacher_name: str = ""

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(parse_hhmm(self.start_time), parse_hhmm(self.end_time))

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.day.order, self.start_time)
