"""Recent-activity feed built from daily records.

Each record expands into one lunch entry, one entry per nap and one
activities summary; entries are grouped by day, newest day first.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..children.model import Child, child_name
from ..common.datetime_utils import parse_time_minutes
from ..core.constants import FEED_ACTIVITIES_TIME, INVALID_TIME
from ..core.enums import MealQuality, NapQuality
from .model import DailyRecord

_EATEN_LABELS = {
    MealQuality.WELL: "ate well",
    MealQuality.AVERAGE: "ate some",
    MealQuality.POORLY: "ate little",
}

_NAP_LABELS = {
    NapQuality.GOOD: "good",
    NapQuality.AVERAGE: "average",
    NapQuality.POOR: "restless",
}


@dataclass(frozen=True)
class FeedEntry:
    entry_id: str
    child_id: str
    child_name: str
    day: date
    time: str
    kind: str
    description: str

    @property
    def start_time(self) -> str:
        # Naps show a "start - end" range.
        return self.time.split(" - ")[0]

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "childId": self.child_id,
            "childName": self.child_name,
            "date": self.day.isoformat(),
            "time": self.time,
            "type": self.kind,
            "description": self.description,
        }


@dataclass(frozen=True)
class FeedDay:
    day: date
    heading: str
    entries: tuple[FeedEntry, ...]

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "heading": self.heading,
            "entries": [e.to_dict() for e in self.entries],
        }


def _entry_sort_key(entry: FeedEntry) -> tuple:
    minutes = parse_time_minutes(entry.start_time)
    return (minutes == INVALID_TIME, minutes, entry.start_time)


def day_heading(day: date, today: date) -> str:
    if day == today:
        return "Today"
    return f"{day.strftime('%A')} {day.day} {day.strftime('%B')}"


def feed_entries(record: DailyRecord, name: str) -> list[FeedEntry]:
    entries = []

    lunch = record.meal("lunch")
    if lunch is not None:
        entries.append(
            FeedEntry(
                entry_id=f"{record.record_id}-lunch",
                child_id=record.child_id,
                child_name=name,
                day=record.day,
                time=lunch.time,
                kind="meal",
                description=f"Lunch: {lunch.description} ({_EATEN_LABELS[lunch.eaten]})",
            )
        )

    for i, nap in enumerate(record.naps):
        entries.append(
            FeedEntry(
                entry_id=f"{record.record_id}-nap-{i}",
                child_id=record.child_id,
                child_name=name,
                day=record.day,
                time=f"{nap.start_time} - {nap.end_time}",
                kind="nap",
                description=f"Nap: {_NAP_LABELS[nap.quality]}",
            )
        )

    entries.append(
        FeedEntry(
            entry_id=f"{record.record_id}-activities",
            child_id=record.child_id,
            child_name=name,
            day=record.day,
            time=FEED_ACTIVITIES_TIME,
            kind="activity",
            description=f"Activities: {', '.join(record.activities)}",
        )
    )
    return entries


def build_activity_feed(records: Iterable[DailyRecord], children: Sequence[Child], today: date) -> list[FeedDay]:
    children_by_id = {c.child_id: c for c in children}

    grouped: dict[date, list[FeedEntry]] = {}
    for record in records:
        name = child_name(children_by_id, record.child_id)
        grouped.setdefault(record.day, []).extend(feed_entries(record, name))

    return [
        FeedDay(
            day=day,
            heading=day_heading(day, today),
            entries=tuple(sorted(grouped[day], key=_entry_sort_key)),
        )
        for day in sorted(grouped, reverse=True)
    ]
