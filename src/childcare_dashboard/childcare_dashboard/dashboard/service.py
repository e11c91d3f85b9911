from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..attendance.summary import DaySummary
from ..core.constants import DEFAULT_FEED_LIMIT
from ..daily_records.activity_feed import FeedDay, build_activity_feed
from ..state import ChildcareState


@dataclass(frozen=True)
class QuickAction:
    key: str
    label: str
    method: str
    endpoint: str

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "method": self.method, "endpoint": self.endpoint}


QUICK_ACTIONS = (
    QuickAction("arrival", "Record an arrival", "POST", "/api/attendance/arrival"),
    QuickAction("absence", "Declare an absence", "POST", "/api/attendance/absence"),
    QuickAction("contract", "New contract", "POST", "/api/contracts"),
    QuickAction("activity", "Log an activity", "POST", "/api/daily-records"),
    QuickAction("photo", "Upload a photo", "POST", "/api/children/<id>/photo"),
    QuickAction("message", "Send a message", "POST", "/api/messages"),
)


@dataclass(frozen=True)
class DashboardView:
    summary: DaySummary
    feed: list[FeedDay]

    def to_dict(self) -> dict:
        return {
            "today": self.summary.to_dict(),
            "activityFeed": [d.to_dict() for d in self.feed],
            "quickActions": [a.to_dict() for a in QUICK_ACTIONS],
        }


class DashboardService:
    def __init__(self, state: ChildcareState, *, feed_limit: int = DEFAULT_FEED_LIMIT):
        self._state = state
        self._feed_limit = feed_limit

    def today(self, day: date) -> DashboardView:
        summary = self._state.summary_for(day)
        recent = sorted(self._state.daily_records(), key=lambda r: (r.day, r.record_id), reverse=True)
        feed = build_activity_feed(recent[: self._feed_limit], self._state.children(), day)
        return DashboardView(summary=summary, feed=feed)
