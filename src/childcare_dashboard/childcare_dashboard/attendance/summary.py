"""Attendance state for one day, derived from that day's records.

Shared by the dashboard and the planning views so both classify children the
same way.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..children.model import Child
from ..common.datetime_utils import parse_time_minutes
from ..core.constants import INVALID_TIME
from ..core.enums import AttendanceStatus, ChildDayState
from .model import AttendanceRecord


def arrival_sort_key(record: AttendanceRecord) -> tuple[bool, int, str]:
    """Ascending arrival time; unknown arrivals last; ties by record id."""
    minutes = parse_time_minutes(record.arrival_time)
    return (minutes == INVALID_TIME, minutes, record.attendance_id)


def records_for_day(records: Iterable[AttendanceRecord], day: date) -> list[AttendanceRecord]:
    """The day's records in arrival order."""
    return sorted((r for r in records if r.day == day), key=arrival_sort_key)


def last_record_for_child(records: Iterable[AttendanceRecord], child_id: str, day: date) -> Optional[AttendanceRecord]:
    """The child's current record for the day (latest arrival), if any."""
    child_records = [r for r in records if r.child_id == child_id and r.day == day]
    if not child_records:
        return None
    return max(child_records, key=arrival_sort_key)


@dataclass(frozen=True)
class PresentChild:
    child: Child
    attendance_id: str
    arrival_time: Optional[str]

    def to_dict(self) -> dict:
        return {
            "childId": self.child.child_id,
            "firstName": self.child.first_name,
            "lastName": self.child.last_name,
            "photo": self.child.photo,
            "attendanceId": self.attendance_id,
            "arrivalTime": self.arrival_time,
        }


@dataclass(frozen=True)
class DaySummary:
    day: date
    present: tuple[PresentChild, ...]
    departed_child_ids: frozenset[str]
    absent_child_ids: frozenset[str]
    absent_count: int
    expected_count: int

    @property
    def present_count(self) -> int:
        return len(self.present)

    @property
    def departed_count(self) -> int:
        return len(self.departed_child_ids)

    def _present_entry(self, child_id: str) -> Optional[PresentChild]:
        return next((p for p in self.present if p.child.child_id == child_id), None)

    def is_present(self, child_id: str) -> bool:
        return self._present_entry(child_id) is not None

    def arrival_time_for(self, child_id: str) -> Optional[str]:
        entry = self._present_entry(child_id)
        return entry.arrival_time if entry else None

    def classify(self, child_id: str) -> ChildDayState:
        if self.is_present(child_id):
            return ChildDayState.PRESENT
        if child_id in self.departed_child_ids:
            return ChildDayState.DEPARTED
        if child_id in self.absent_child_ids:
            return ChildDayState.ABSENT
        return ChildDayState.NONE

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "presentCount": self.present_count,
            "departedCount": self.departed_count,
            "absentCount": self.absent_count,
            "expectedCount": self.expected_count,
            "present": [p.to_dict() for p in self.present],
        }


def summarize_day(records: Iterable[AttendanceRecord], children: Sequence[Child], day: date) -> DaySummary:
    """Fold the day's records into present / departed / absent.

    The three counts are not required to add up to the roster size: contracted
    days are not taken into account.
    """
    records = list(records)
    children_by_id = {c.child_id: c for c in children}
    day_records = records_for_day(records, day)

    # Insertion order is kept for children still present; a child who leaves
    # and comes back is re-appended.
    present: dict[str, PresentChild] = {}
    for record in day_records:
        if record.is_open_presence:
            child = children_by_id.get(record.child_id)
            if child is not None:
                present[record.child_id] = PresentChild(
                    child=child,
                    attendance_id=record.attendance_id,
                    arrival_time=record.arrival_time,
                )
        else:
            present.pop(record.child_id, None)

    departed = set()
    for child in children:
        last = last_record_for_child(day_records, child.child_id, day)
        if last is not None and last.status == AttendanceStatus.DEPARTED:
            departed.add(child.child_id)

    absent_records = [r for r in day_records if r.status == AttendanceStatus.ABSENT]

    return DaySummary(
        day=day,
        present=tuple(present.values()),
        departed_child_ids=frozenset(departed),
        absent_child_ids=frozenset(r.child_id for r in absent_records),
        absent_count=len(absent_records),
        expected_count=len(children),
    )


def children_awaiting_arrival(records: Iterable[AttendanceRecord], children: Sequence[Child], day: date) -> list[Child]:
    """Children who can be checked in: no record yet, or not currently present."""
    records = list(records)
    out = []
    for child in children:
        last = last_record_for_child(records, child.child_id, day)
        if last is None or not last.is_open_presence:
            out.append(child)
    return out


def children_without_record(records: Iterable[AttendanceRecord], children: Sequence[Child], day: date) -> list[Child]:
    """Children with nothing recorded for the day; only they can be declared absent."""
    seen = {r.child_id for r in records if r.day == day}
    return [c for c in children if c.child_id not in seen]


def filter_by_name(children: Iterable[Child], search: str) -> list[Child]:
    needle = (search or "").strip().lower()
    return [c for c in children if needle in c.full_name.lower()]


@dataclass(frozen=True)
class TimelineEntry:
    child: Child
    record: AttendanceRecord

    def to_dict(self) -> dict:
        return {
            "childId": self.child.child_id,
            "firstName": self.child.first_name,
            "lastName": self.child.last_name,
            "attendanceRecordId": self.record.attendance_id,
            "arrivalTime": self.record.arrival_time,
            "departureTime": self.record.departure_time,
            "status": self.record.status.value,
        }


def day_timeline(records: Iterable[AttendanceRecord], children: Sequence[Child], day: date) -> list[TimelineEntry]:
    """The day's records in arrival order, joined with their child; unknown children are skipped."""
    children_by_id = {c.child_id: c for c in children}
    return [
        TimelineEntry(child=children_by_id[r.child_id], record=r)
        for r in records_for_day(records, day)
        if r.child_id in children_by_id
    ]
