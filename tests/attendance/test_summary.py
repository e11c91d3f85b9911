from datetime import date

from src.childcare_dashboard.childcare_dashboard.attendance.summary import (
    children_awaiting_arrival,
    children_without_record,
    day_timeline,
    last_record_for_child,
    records_for_day,
    summarize_day,
)
from src.childcare_dashboard.childcare_dashboard.core.enums import AttendanceStatus, ChildDayState

from tests.fakes import make_child, make_record

DAY = date(2025, 3, 12)
A = make_child("a", "Alice", "Durand")
B = make_child("b", "Bruno", "Petit")
C = make_child("c", "Chloe", "Roux")


def test_present_and_absent_for_a_day():
    records = [
        make_record("r1", "a", DAY, AttendanceStatus.PRESENT, arrival="08:00"),
        make_record("r2", "b", DAY, AttendanceStatus.ABSENT),
    ]
    summary = summarize_day(records, [A, B], DAY)

    assert [p.child.child_id for p in summary.present] == ["a"]
    assert summary.absent_count == 1
    assert summary.departed_count == 0
    assert summary.expected_count == 2


def test_latest_arrival_is_the_current_state():
    records = [
        make_record("r1", "a", DAY, AttendanceStatus.PRESENT, arrival="08:00", departure="10:00"),
        make_record("r2", "a", DAY, AttendanceStatus.PRESENT, arrival="10:30"),
    ]
    summary = summarize_day(records, [A], DAY)

    assert summary.is_present("a")
    assert summary.arrival_time_for("a") == "10:30"
    assert summary.present[0].attendance_id == "r2"
    assert last_record_for_child(records, "a", DAY).attendance_id == "r2"


def test_departure_removes_child_from_present():
    records = [
        make_record("r1", "a", DAY, AttendanceStatus.DEPARTED, arrival="08:00", departure="16:00"),
        make_record("r2", "b", DAY, AttendanceStatus.PRESENT, arrival="08:15", departure="12:00"),
    ]
    summary = summarize_day(records, [A, B], DAY)

    assert summary.present == ()
    assert summary.departed_child_ids == {"a"}
    assert summary.classify("a") == ChildDayState.DEPARTED
    assert summary.classify("b") == ChildDayState.NONE


def test_unknown_arrival_sorts_last_and_ties_break_on_id():
    records = [
        make_record("z", "a", DAY, AttendanceStatus.PRESENT, arrival=None),
        make_record("m", "b", DAY, AttendanceStatus.PRESENT, arrival="09:00"),
        make_record("b2", "c", DAY, AttendanceStatus.PRESENT, arrival="09:00"),
        make_record("x", "a", DAY, AttendanceStatus.PRESENT, arrival="bad"),
    ]
    assert [r.attendance_id for r in records_for_day(records, DAY)] == ["b2", "m", "x", "z"]


def test_present_order_follows_arrival():
    records = [
        make_record("r1", "b", DAY, AttendanceStatus.PRESENT, arrival="09:10"),
        make_record("r2", "a", DAY, AttendanceStatus.PRESENT, arrival="08:05"),
        make_record("r3", "c", DAY, AttendanceStatus.PRESENT, arrival="08:40"),
    ]
    summary = summarize_day(records, [A, B, C], DAY)
    assert [p.child.child_id for p in summary.present] == ["a", "c", "b"]


def test_records_of_other_days_and_unknown_children_are_ignored():
    records = [
        make_record("r1", "a", date(2025, 3, 11), AttendanceStatus.PRESENT, arrival="08:00"),
        make_record("r2", "ghost", DAY, AttendanceStatus.PRESENT, arrival="08:00"),
        make_record("r3", "ghost", DAY, AttendanceStatus.ABSENT),
    ]
    summary = summarize_day(records, [A], DAY)

    assert summary.present == ()
    assert summary.classify("a") == ChildDayState.NONE
    # absences are a flat count of the day's records
    assert summary.absent_count == 1


def test_absent_classification():
    summary = summarize_day([make_record("r1", "b", DAY, AttendanceStatus.ABSENT)], [A, B], DAY)
    assert summary.classify("b") == ChildDayState.ABSENT


def test_children_awaiting_arrival_and_without_record():
    records = [
        make_record("r1", "a", DAY, AttendanceStatus.PRESENT, arrival="08:00"),
        make_record("r2", "b", DAY, AttendanceStatus.DEPARTED, arrival="08:00", departure="11:00"),
    ]
    assert [c.child_id for c in children_awaiting_arrival(records, [A, B, C], DAY)] == ["b", "c"]
    assert [c.child_id for c in children_without_record(records, [A, B, C], DAY)] == ["c"]


def test_day_timeline_skips_unknown_children():
    records = [
        make_record("r1", "b", DAY, AttendanceStatus.PRESENT, arrival="09:00"),
        make_record("r2", "ghost", DAY, AttendanceStatus.PRESENT, arrival="07:00"),
        make_record("r3", "a", DAY, AttendanceStatus.PRESENT, arrival="08:00"),
    ]
    timeline = day_timeline(records, [A, B], DAY)
    assert [e.child.child_id for e in timeline] == ["a", "b"]
    assert timeline[0].to_dict()["attendanceRecordId"] == "r3"
