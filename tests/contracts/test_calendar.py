from datetime import date

import pytest

from src.childcare_dashboard.childcare_dashboard.contracts.calendar import (
    build_global_month_grid,
    build_month_grid,
    leading_blank_count,
    planned_events_by_date,
    shift_month,
    toggle_planned_day,
)
from src.childcare_dashboard.childcare_dashboard.contracts.model import Contract, PlannedDay, RegularScheduleEntry
from src.childcare_dashboard.childcare_dashboard.core.enums import ContractStatus, ContractType, PlannedDayStatus
from src.childcare_dashboard.childcare_dashboard.core.exceptions import ValidationError

from tests.fakes import make_child


def _contract(contract_id, child_id, status, schedule):
    return Contract(
        contract_id=contract_id,
        child_id=child_id,
        start_date=date(2025, 1, 1),
        contract_type=ContractType.CDI,
        status=status,
        monthly_schedule=tuple(schedule),
    )


def test_month_starting_wednesday_has_two_leading_blanks():
    # January 2025 starts on a Wednesday
    cells = build_month_grid(2025, 1, [])
    assert leading_blank_count(2025, 1) == 2
    assert [c.is_blank for c in cells[:3]] == [True, True, False]
    assert cells[2].day == date(2025, 1, 1)
    assert len(cells) == 2 + 31


def test_month_starting_sunday_and_monday():
    assert leading_blank_count(2025, 6) == 6  # June 2025 starts on a Sunday
    assert leading_blank_count(2025, 9) == 0  # September 2025 starts on a Monday


def test_cells_carry_entry_for_exact_date():
    entry = PlannedDay(day=date(2025, 1, 15), status=PlannedDayStatus.PLANNED, start_time="08:00", end_time="12:00")
    other_month = PlannedDay(day=date(2025, 2, 15), status=PlannedDayStatus.PLANNED)
    cells = build_month_grid(2025, 1, [entry, other_month])

    annotated = [c for c in cells if c.entry is not None]
    assert len(annotated) == 1
    assert annotated[0].day == date(2025, 1, 15)
    assert annotated[0].to_dict()["entry"]["startTime"] == "08:00"


def test_invalid_month_is_rejected():
    with pytest.raises(ValidationError):
        build_month_grid(2025, 13, [])


def test_toggle_uses_weekly_hours_then_removes():
    regular = [RegularScheduleEntry(day_of_week=1, start_time="08:30", end_time="16:30")]
    monday = date(2025, 3, 10)

    planned = toggle_planned_day((), regular, monday)
    assert len(planned) == 1
    assert planned[0].to_dict() == {
        "date": "2025-03-10",
        "status": "planned",
        "startTime": "08:30",
        "endTime": "16:30",
    }

    assert toggle_planned_day(planned, regular, monday) == ()


def test_toggle_without_weekly_entry_uses_default_window():
    regular = [RegularScheduleEntry(day_of_week=1, start_time="08:30", end_time="16:30")]
    tuesday = date(2025, 3, 11)
    planned = toggle_planned_day((), regular, tuesday)
    assert (planned[0].start_time, planned[0].end_time) == ("09:00", "17:00")


def test_toggle_removes_any_status_and_keeps_other_days():
    keep = PlannedDay(day=date(2025, 3, 3), status=PlannedDayStatus.PLANNED)
    absent = PlannedDay(day=date(2025, 3, 4), status=PlannedDayStatus.ABSENT_PLANNED)
    assert toggle_planned_day((keep, absent), (), date(2025, 3, 4)) == (keep,)


def test_shift_month():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2025, 6, 0) == (2025, 6)


def test_global_planning_lists_planned_days_of_active_contracts():
    day = date(2025, 3, 10)
    contracts = [
        _contract("k1", "c1", ContractStatus.ACTIVE, [
            PlannedDay(day=day, status=PlannedDayStatus.PLANNED, start_time="08:00", end_time="16:00"),
            PlannedDay(day=date(2025, 3, 11), status=PlannedDayStatus.HOLIDAY_PLANNED),
        ]),
        _contract("k2", "ghost", ContractStatus.ACTIVE, [PlannedDay(day=day, status=PlannedDayStatus.PLANNED)]),
        _contract("k3", "c2", ContractStatus.PENDING, [PlannedDay(day=day, status=PlannedDayStatus.PLANNED)]),
    ]
    children = [make_child("c1", "Emma", "Martin"), make_child("c2", "Lucas", "Bernard")]

    events = planned_events_by_date(contracts, children)
    assert list(events) == [day]
    assert [(e.child_name, e.start_time) for e in events[day]] == [("Emma Martin", "08:00"), ("N/A", None)]

    cells = build_global_month_grid(2025, 3, events)
    # March 2025 starts on a Saturday
    assert cells[5].day == date(2025, 3, 1)
    assert len(next(c for c in cells if c.day == day).events) == 2
