"""Attendance report: window filtering and attended-time aggregation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..children.model import Child
from ..common.datetime_utils import format_duration, month_bounds, parse_time_minutes, short_time, week_bounds
from ..core.constants import INVALID_TIME
from ..core.enums import ReportView
from .model import AttendanceRecord


def report_window(view: ReportView, selected: date) -> tuple[date, date]:
    """Inclusive (start, end) dates of the reporting window containing ``selected``."""
    if view == ReportView.WEEK:
        return week_bounds(selected)
    if view == ReportView.MONTH:
        return month_bounds(selected)
    return selected, selected


def filter_records(
    records: Iterable[AttendanceRecord],
    start: date,
    end: date,
    child_id: Optional[str] = None,
) -> list[AttendanceRecord]:
    return [
        r
        for r in records
        if start <= r.day <= end and (not child_id or r.child_id == child_id)
    ]


def sort_for_report(records: Iterable[AttendanceRecord], children: Sequence[Child]) -> list[AttendanceRecord]:
    """By date, then child full name; unknown children sort first within a day."""
    names = {c.child_id: c.full_name for c in children}
    return sorted(records, key=lambda r: (r.day, names.get(r.child_id, ""), r.attendance_id))


def record_minutes(record: AttendanceRecord) -> int:
    """Minutes between arrival and departure; 0 when either is missing or malformed."""
    if not record.arrival_time or not record.departure_time:
        return 0
    arrival = parse_time_minutes(record.arrival_time)
    departure = parse_time_minutes(record.departure_time)
    if arrival == INVALID_TIME or departure == INVALID_TIME:
        return 0
    return max(departure - arrival, 0)


def total_minutes(records: Iterable[AttendanceRecord]) -> int:
    return sum(record_minutes(r) for r in records)


@dataclass(frozen=True)
class ReportRow:
    record: AttendanceRecord
    child_name: str
    minutes: int

    def to_dict(self) -> dict:
        return {
            "id": self.record.attendance_id,
            "childId": self.record.child_id,
            "childName": self.child_name,
            "date": self.record.day.isoformat(),
            "arrivalTime": short_time(self.record.arrival_time),
            "departureTime": short_time(self.record.departure_time),
            "status": self.record.status.value,
            "duration": format_duration(self.minutes),
            "notes": self.record.notes or "",
        }


@dataclass(frozen=True)
class AttendanceReport:
    view: ReportView
    start: date
    end: date
    child_id: Optional[str]
    rows: list[ReportRow]
    summary: list[dict]
    total_minutes: int

    @property
    def total_label(self) -> str:
        return format_duration(self.total_minutes)

    def to_dict(self) -> dict:
        return {
            "view": self.view.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "childId": self.child_id,
            "rows": [r.to_dict() for r in self.rows],
            "summary": self.summary,
            "totalMinutes": self.total_minutes,
            "total": self.total_label,
        }


def build_report(
    records: Iterable[AttendanceRecord],
    children: Sequence[Child],
    *,
    view: ReportView,
    selected: date,
    child_id: Optional[str] = None,
) -> AttendanceReport:
    start, end = report_window(view, selected)
    names = {c.child_id: c.full_name for c in children}
    selected_records = sort_for_report(filter_records(records, start, end, child_id), children)

    rows: list[ReportRow] = []
    summary_map: dict[str, dict] = {}
    for r in selected_records:
        minutes = record_minutes(r)
        name = names.get(r.child_id, "")
        rows.append(ReportRow(record=r, child_name=name, minutes=minutes))

        s = summary_map.get(r.child_id)
        if not s:
            s = {"childId": r.child_id, "childName": name, "days": set(), "totalMinutes": 0}
            summary_map[r.child_id] = s
        s["days"].add(r.day)
        s["totalMinutes"] += minutes

    summary = []
    for s in summary_map.values():
        summary.append(
            {
                "childId": s["childId"],
                "childName": s["childName"],
                "days": len(s["days"]),
                "totalMinutes": s["totalMinutes"],
                "total": format_duration(s["totalMinutes"]),
            }
        )
    summary.sort(key=lambda s: (s["childName"], s["childId"]))

    return AttendanceReport(
        view=view,
        start=start,
        end=end,
        child_id=child_id or None,
        rows=rows,
        summary=summary,
        total_minutes=sum(r.minutes for r in rows),
    )
