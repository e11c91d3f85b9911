"""Month grids for contract planning.

Weeks start on Monday. A grid is a list of cells: one blank cell per weekday
before the 1st of the month, then one cell per calendar day.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from ..children.model import Child, child_name
from ..common.datetime_utils import js_day_of_week
from ..core.constants import DEFAULT_PLANNED_END, DEFAULT_PLANNED_START, GLOBAL_PLANNING_UNKNOWN_NAME
from ..core.enums import ContractStatus, PlannedDayStatus
from ..core.exceptions import ValidationError
from .model import Contract, PlannedDay, RegularScheduleEntry


@dataclass(frozen=True)
class CalendarCell:
    day: Optional[date]
    entry: Optional[PlannedDay] = None

    @property
    def is_blank(self) -> bool:
        return self.day is None

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat() if self.day else None,
            "dayOfMonth": self.day.day if self.day else None,
            "entry": self.entry.to_dict() if self.entry else None,
        }


@dataclass(frozen=True)
class PlannedEvent:
    child_id: str
    child_name: str
    start_time: Optional[str]
    end_time: Optional[str]

    def to_dict(self) -> dict:
        return {
            "childId": self.child_id,
            "childName": self.child_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass(frozen=True)
class GlobalCalendarCell:
    day: Optional[date]
    events: tuple[PlannedEvent, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat() if self.day else None,
            "dayOfMonth": self.day.day if self.day else None,
            "events": [e.to_dict() for e in self.events],
        }


def _check_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1 <= int(year) <= 9999:
        raise ValidationError("Year is out of range")


def leading_blank_count(year: int, month: int) -> int:
    """Blank cells before day 1 in a Monday-first week."""
    _check_month(year, month)
    return calendar.monthrange(year, month)[0]


def month_days(year: int, month: int) -> list[date]:
    _check_month(year, month)
    return [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Previous/next month navigation."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month_grid(year: int, month: int, entries: Iterable[PlannedDay]) -> list[CalendarCell]:
    by_day: dict[date, PlannedDay] = {}
    for entry in entries:
        # First entry for a date wins.
        by_day.setdefault(entry.day, entry)

    cells = [CalendarCell(day=None) for _ in range(leading_blank_count(year, month))]
    cells.extend(CalendarCell(day=d, entry=by_day.get(d)) for d in month_days(year, month))
    return cells


def toggle_planned_day(
    monthly_schedule: Sequence[PlannedDay],
    regular_schedule: Sequence[RegularScheduleEntry],
    clicked: date,
) -> tuple[PlannedDay, ...]:
    """Remove the entry for ``clicked`` if there is one, otherwise plan the day.

    A newly planned day takes its hours from the weekly schedule entry for the
    same weekday, or the default window when there is none. Editing the time
    or status of an existing entry is not a toggle operation.
    """
    if any(entry.day == clicked for entry in monthly_schedule):
        return tuple(entry for entry in monthly_schedule if entry.day != clicked)

    start_time, end_time = DEFAULT_PLANNED_START, DEFAULT_PLANNED_END
    weekday = js_day_of_week(clicked)
    regular = next((e for e in regular_schedule if e.day_of_week == weekday), None)
    if regular is not None:
        start_time, end_time = regular.start_time, regular.end_time

    new_entry = PlannedDay(day=clicked, status=PlannedDayStatus.PLANNED, start_time=start_time, end_time=end_time)
    return tuple(monthly_schedule) + (new_entry,)


def planned_events_by_date(contracts: Iterable[Contract], children: Iterable[Child]) -> dict[date, list[PlannedEvent]]:
    """Planned presences of all active contracts, keyed by date."""
    children_by_id = {c.child_id: c for c in children}
    events: dict[date, list[PlannedEvent]] = {}
    for contract in contracts:
        if contract.status != ContractStatus.ACTIVE:
            continue
        for planned in contract.monthly_schedule:
            if planned.status != PlannedDayStatus.PLANNED:
                continue
            events.setdefault(planned.day, []).append(
                PlannedEvent(
                    child_id=contract.child_id,
                    child_name=child_name(children_by_id, contract.child_id, GLOBAL_PLANNING_UNKNOWN_NAME),
                    start_time=planned.start_time,
                    end_time=planned.end_time,
                )
            )
    return events


def build_global_month_grid(year: int, month: int, events_by_date: dict[date, list[PlannedEvent]]) -> list[GlobalCalendarCell]:
    cells = [GlobalCalendarCell(day=None) for _ in range(leading_blank_count(year, month))]
    cells.extend(GlobalCalendarCell(day=d, events=tuple(events_by_date.get(d, ()))) for d in month_days(year, month))
    return cells
