from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..children.repository import ChildRepository
from ..common.datetime_utils import today
from ..common.validators import optional_iso_date, require_in, require_non_empty, require_time
from ..core.constants import DEFAULT_FEED_LIMIT
from ..core.enums import MealQuality, Mood, NapQuality
from ..core.exceptions import NotFoundError, ValidationError
from .model import MEAL_SLOTS, DailyRecord, Meal, Nap
from .repository import DailyRecordRepository

logger = logging.getLogger(__name__)


def _parse_meals(data: Optional[dict]) -> dict[str, Meal]:
    meals: dict[str, Meal] = {}
    data = data or {}
    if not isinstance(data, dict):
        raise ValidationError("meals must be an object")
    for slot, item in data.items():
        if slot not in MEAL_SLOTS:
            raise ValidationError(f"Unknown meal {slot!r}")
        if not item:
            continue
        if not isinstance(item, dict):
            raise ValidationError(f"{slot} must be an object")
        meals[slot] = Meal(
            time=require_time(item.get("time"), f"{slot}.time"),
            description=(item.get("description") or "").strip(),
            eaten=require_in(item.get("eaten"), MealQuality, f"{slot}.eaten"),
        )
    return meals


def _parse_naps(items) -> tuple[Nap, ...]:
    naps = []
    items = items or []
    if not isinstance(items, list):
        raise ValidationError("naps must be a list")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"naps[{i}] must be an object")
        naps.append(
            Nap(
                start_time=require_time(item.get("startTime"), f"naps[{i}].startTime"),
                end_time=require_time(item.get("endTime"), f"naps[{i}].endTime"),
                quality=require_in(item.get("quality"), NapQuality, f"naps[{i}].quality"),
            )
        )
    return tuple(naps)


class DailyRecordService:
    """Use case: write and read the daily log of meals, naps and activities."""

    def __init__(self, records: DailyRecordRepository, children: ChildRepository):
        self._records = records
        self._children = children

    def list_records(self) -> Sequence[DailyRecord]:
        return self._records.list_all()

    def list_for_child(self, child_id: str) -> Sequence[DailyRecord]:
        return self._records.list_for_child(child_id)

    def list_recent(self, limit: int = DEFAULT_FEED_LIMIT) -> Sequence[DailyRecord]:
        return self._records.list_recent(max(int(limit), 1))

    def add_daily_record(self, data: dict) -> DailyRecord:
        child_id = require_non_empty(data.get("childId"), "childId")
        if not self._children.get_by_id(child_id):
            raise NotFoundError(f"Child {child_id} not found")

        activities = data.get("activities") or []
        if isinstance(activities, str):
            activities = activities.split(",")

        record = DailyRecord(
            record_id=str(uuid.uuid4()),
            child_id=child_id,
            day=optional_iso_date(data.get("date"), "date") or today(),
            mood=require_in(data.get("mood") or Mood.HAPPY.value, Mood, "mood"),
            meals=_parse_meals(data.get("meals")),
            naps=_parse_naps(data.get("naps")),
            activities=tuple(a.strip() for a in activities if a and a.strip()),
            notes=(data.get("notes") or "").strip(),
            photos=tuple(data.get("photos") or ()),
        )
        created = self._records.insert(record)
        logger.info("daily record added child=%s day=%s", child_id, record.day)
        return created
