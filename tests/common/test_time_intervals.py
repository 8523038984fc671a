from __future__ import annotations

import pytest

from class_attendance.common.time_intervals import TimeRange, format_hhmm, overlaps, parse_hhmm
from class_attendance.core.exceptions import InvalidRangeError, ValidationError


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (("09:00", "10:00"), ("09:30", "10:30"), True),
        (("09:00", "10:00"), ("10:00", "11:00"), False),
        (("09:00", "12:00"), ("10:00", "11:00"), True),
        (("09:00", "10:00"), ("09:00", "10:00"), True),
        (("08:00", "09:00"), ("13:00", "14:00"), False),
    ],
)
def test_overlap_is_symmetric(a, b, expected):
    assert overlaps(*a, *b) is expected
    assert overlaps(*b, *a) is expected


def test_touching_ranges_do_not_overlap():
    first = TimeRange.parse("09:00", "10:00")
    second = TimeRange.parse("10:00", "11:00")

    assert not first.overlaps(second)
    assert not second.overlaps(first)


def test_overlap_accepts_minutes():
    assert overlaps(540, 600, 599, 660)
    assert not overlaps(540, 600, 600, 660)


def test_parse_hhmm():
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("9:05") == 545
    assert parse_hhmm("23:59") == 23 * 60 + 59


@pytest.mark.parametrize("bad", ["24:00", "12:60", "noon", "", "9", "09:5", None, 900])
def test_parse_hhmm_rejects_bad_values(bad):
    with pytest.raises(ValidationError):
        parse_hhmm(bad)


def test_format_hhmm_pads():
    assert format_hhmm(545) == "09:05"
    assert TimeRange.parse("9:00", "9:45").start_hhmm == "09:00"


@pytest.mark.parametrize("start, end", [("10:00", "10:00"), ("11:00", "10:00")])
def test_range_must_end_after_start(start, end):
    with pytest.raises(InvalidRangeError):
        TimeRange.parse(start, end)


def test_invalid_range_is_a_validation_error():
    assert issubclass(InvalidRangeError, ValidationError)
