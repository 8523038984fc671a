from __future__ import annotations

import threading

import pytest

from class_attendance.core.enums import Weekday
from class_attendance.core.exceptions import (
    ClassConflictError,
    ConflictError,
    InvalidRangeError,
    NotFoundError,
    TeacherConflictError,
    ValidationError,
)
from class_attendance.timetable.service import TimetableService


@pytest.fixture
def setup(school):
    class_x = school.add_class("Grade 10", "A")
    class_y = school.add_class("Grade 10", "B")
    teacher = school.add_teacher("Tom")
    other_teacher = school.add_teacher("Uma")
    ids = {
        "class_x": class_x,
        "class_y": class_y,
        "teacher": teacher,
        "other_teacher": other_teacher,
        "math_x": school.add_subject(class_x, teacher, "MATH"),
        "phys_x": school.add_subject(class_x, other_teacher, "PHYS"),
        "math_y": school.add_subject(class_y, teacher, "MATH"),
        "chem_y": school.add_subject(class_y, other_teacher, "CHEM"),
    }
    svc = TimetableService(school.timetable, school.classes, school.subjects, school.teachers)
    return svc, ids


def _slot(svc, *, class_id, subject_id, teacher_id, day="Monday", start="09:00", end="10:00"):
    return svc.create_entry(
        class_id=class_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        day=day,
        start_time=start,
        end_time=end,
    )


def test_create_entry_returns_persisted_slot(setup):
    svc, ids = setup

    entry = _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"], start="9:00")

    assert entry.entry_id > 0
    assert entry.day is Weekday.MONDAY
    assert (entry.start_time, entry.end_time) == ("09:00", "10:00")


def test_overlapping_slot_in_same_class_is_rejected(school, setup):
    svc, ids = setup
    first = _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])

    with pytest.raises(ClassConflictError) as exc:
        _slot(
            svc,
            class_id=ids["class_x"],
            subject_id=ids["phys_x"],
            teacher_id=ids["other_teacher"],
            start="09:30",
            end="10:30",
        )

    assert exc.value.conflicting_entry == first
    assert len(school.timetable.entries) == 1


def test_back_to_back_slots_are_allowed(setup):
    svc, ids = setup
    _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])

    second = _slot(
        svc,
        class_id=ids["class_x"],
        subject_id=ids["math_x"],
        teacher_id=ids["teacher"],
        start="10:00",
        end="11:00",
    )

    assert second.start_time == "10:00"


def test_teacher_cannot_teach_two_classes_at_once(school, setup):
    svc, ids = setup
    _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])

    with pytest.raises(TeacherConflictError) as exc:
        _slot(
            svc,
            class_id=ids["class_y"],
            subject_id=ids["math_y"],
            teacher_id=ids["teacher"],
            start="09:45",
            end="10:45",
        )

    assert exc.value.conflicting_entry.class_id == ids["class_x"]
    assert len(school.timetable.entries) == 1


def test_class_conflict_is_reported_before_teacher_conflict(setup):
    svc, ids = setup
    _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])

    with pytest.raises(ClassConflictError):
        _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])


def test_same_time_on_another_day_is_free(setup):
    svc, ids = setup
    _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"])

    entry = _slot(
        svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=ids["teacher"], day="Tuesday"
    )

    assert entry.day is Weekday.TUESDAY


@pytest.mark.parametrize(
    "day, start, end",
    [("monday", "09:00", "10:00"), ("Monday", "9am", "10:00"), ("Monday", "09:00", "25:00")],
)
def test_malformed_input_is_rejected_before_lookups(school, setup, day, start, end):
    svc, _ = setup

    # Unknown ids: a lookup would raise NotFoundError instead
    with pytest.raises(ValidationError):
        _slot(svc, class_id=999, subject_id=999, teacher_id=999, day=day, start=start, end=end)

    assert school.timetable.entries == {}


def test_inverted_range_is_rejected(school, setup):
    svc, ids = setup

    with pytest.raises(InvalidRangeError):
        _slot(
            svc,
            class_id=ids["class_x"],
            subject_id=ids["math_x"],
            teacher_id=ids["teacher"],
            start="11:00",
            end="10:00",
        )

    assert school.timetable.entries == {}


def test_unknown_references_are_not_found(setup):
    svc, ids = setup

    with pytest.raises(NotFoundError):
        _slot(svc, class_id=999, subject_id=ids["math_x"], teacher_id=ids["teacher"])
    with pytest.raises(NotFoundError):
        _slot(svc, class_id=ids["class_x"], subject_id=999, teacher_id=ids["teacher"])
    with pytest.raises(NotFoundError):
        _slot(svc, class_id=ids["class_x"], subject_id=ids["math_x"], teacher_id=999)


def test_subject_must_belong_to_class(setup):
    svc, ids = setup

    with pytest.raises(ValidationError):
        _slot(svc, class_id=ids["class_x"], subject_id=ids["math_y"], teacher_id=ids["teacher"])


def test_concurrent_overlapping_inserts_admit_one(school, setup):
    svc, ids = setup
    barrier = threading.Barrier(2)
    outcomes = []

    def worker(subject_id, teacher_id):
        barrier.wait()
        try:
            _slot(svc, class_id=ids["class_x"], subject_id=subject_id, teacher_id=teacher_id)
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [
        threading.Thread(target=worker, args=(ids["math_x"], ids["teacher"])),
        threading.Thread(target=worker, args=(ids["phys_x"], ids["other_teacher"])),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    assert len(school.timetable.entries) == 1


def test_list_entries_orders_by_weekday_then_start(setup):
    svc, ids = setup
    for day, start, end in [
        ("Wednesday", "08:00", "09:00"),
        ("Monday", "11:00", "12:00"),
        ("Friday", "07:00", "08:00"),
        ("Monday", "08:00", "09:00"),
    ]:
        _slot(
            svc,
            class_id=ids["class_x"],
            subject_id=ids["math_x"],
            teacher_id=ids["teacher"],
            day=day,
            start=start,
            end=end,
        )

    entries = svc.list_entries(class_id=ids["class_x"])

    assert [(e.day.value, e.start_time) for e in entries] == [
        ("Monday", "08:00"),
        ("Monday", "11:00"),
        ("Wednesday", "08:00"),
        ("Friday", "07:00"),
    ]
    assert [e.start_time for e in svc.list_entries(day="Monday")] == ["08:00", "11:00"]
    assert svc.list_entries(teacher_id=ids["other_teacher"]) == []


def test_list_entries_rejects_bad_day(setup):
    svc, _ = setup

    with pytest.raises(ValidationError):
        svc.list_entries(day="Someday")


def test_concurrent_disjoint_slots_in_one_class_both_succeed(school, setup):
    svc, ids = setup
    barrier = threading.Barrier(2)
    created = []
    errors = []

    def worker(start, end):
        barrier.wait()
        try:
            created.append(
                _slot(
                    svc,
                    class_id=ids["class_x"],
                    subject_id=ids["math_x"],
                    teacher_id=ids["teacher"],
                    start=start,
                    end=end,
                )
            )
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [
        threading.Thread(target=worker, args=("09:00", "10:00")),
        threading.Thread(target=worker, args=("11:00", "12:00")),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(e.start_time for e in created) == ["09:00", "11:00"]
    assert len(school.timetable.entries) == 2


def test_transaction_is_scoped_to_class_and_teacher(school, setup):
    svc, ids = setup

    _slot(svc, class_id=ids["class_y"], subject_id=ids["chem_y"], teacher_id=ids["other_teacher"])

    assert school.timetable.scopes_opened == [(ids["class_y"], ids["other_teacher"])]


def test_fractional_or_boolean_ids_are_rejected(school, setup):
    svc, ids = setup

    with pytest.raises(ValidationError):
        _slot(svc, class_id=ids["class_x"] + 0.9, subject_id=ids["math_x"], teacher_id=ids["teacher"])
    with pytest.raises(ValidationError):
        _slot(svc, class_id=True, subject_id=ids["math_x"], teacher_id=ids["teacher"])

    assert school.timetable.entries == {}
