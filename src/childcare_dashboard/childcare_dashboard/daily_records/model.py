from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import MealQuality, Mood, NapQuality

MEAL_SLOTS = ("breakfast", "lunch", "snack")


@dataclass(frozen=True)
class Meal:
    time: str
    description: str
    eaten: MealQuality

    @classmethod
    def from_dict(cls, data: dict) -> "Meal":
        return cls(
            time=str(data.get("time", "")),
            description=str(data.get("description", "")),
            eaten=MealQuality(data.get("eaten", MealQuality.WELL.value)),
        )

    def to_dict(self) -> dict:
        return {"time": self.time, "description": self.description, "eaten": self.eaten.value}


@dataclass(frozen=True)
class Nap:
    start_time: str
    end_time: str
    quality: NapQuality

    @classmethod
    def from_dict(cls, data: dict) -> "Nap":
        return cls(
            start_time=str(data.get("startTime", "")),
            end_time=str(data.get("endTime", "")),
            quality=NapQuality(data.get("quality", NapQuality.GOOD.value)),
        )

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time, "quality": self.quality.value}


@dataclass(frozen=True)
class DailyRecord:
    """What a child ate, slept and did on one day."""

    record_id: str
    child_id: str
    day: date
    mood: Mood
    meals: dict[str, Meal]
    naps: tuple[Nap, ...] = ()
    activities: tuple[str, ...] = ()
    notes: str = ""
    photos: tuple[str, ...] = ()

    def meal(self, slot: str) -> Optional[Meal]:
        return self.meals.get(slot)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "childId": self.child_id,
            "date": self.day.isoformat(),
            "meals": {slot: m.to_dict() for slot, m in self.meals.items()},
            "naps": [n.to_dict() for n in self.naps],
            "activities": list(self.activities),
            "mood": self.mood.value,
            "notes": self.notes,
            "photos": list(self.photos),
        }


def meals_from_dict(data: Optional[dict]) -> dict[str, Meal]:
    data = data or {}
    return {slot: Meal.from_dict(data[slot]) for slot in MEAL_SLOTS if data.get(slot)}
