from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import ContractStatus, ContractType, PlannedDayStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegularScheduleEntry:
    """Usual hours for one weekday; ``day_of_week`` is 0 = Sunday .. 6 = Saturday."""

    day_of_week: int
    start_time: str
    end_time: str

    @classmethod
    def from_dict(cls, data: dict) -> "RegularScheduleEntry":
        return cls(
            day_of_week=int(data["dayOfWeek"]),
            start_time=str(data.get("startTime", "")),
            end_time=str(data.get("endTime", "")),
        )

    def to_dict(self) -> dict:
        return {"dayOfWeek": self.day_of_week, "startTime": self.start_time, "endTime": self.end_time}


@dataclass(frozen=True)
class PlannedDay:
    """Single-date override in a contract's monthly schedule."""

    day: date
    status: PlannedDayStatus
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PlannedDay":
        return cls(
            day=parse_iso_date(str(data["date"])),
            status=PlannedDayStatus(data.get("status", PlannedDayStatus.PLANNED.value)),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict:
        out = {"date": self.day.isoformat(), "status": self.status.value}
        if self.start_time is not None:
            out["startTime"] = self.start_time
        if self.end_time is not None:
            out["endTime"] = self.end_time
        if self.notes is not None:
            out["notes"] = self.notes
        return out


def parse_monthly_schedule(items) -> tuple[PlannedDay, ...]:
    out = []
    for item in items or ():
        try:
            out.append(PlannedDay.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed planned day: %r", item)
    return tuple(out)


def parse_regular_schedule(items) -> tuple[RegularScheduleEntry, ...]:
    out = []
    for item in items or ():
        try:
            out.append(RegularScheduleEntry.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed weekly schedule entry: %r", item)
    return tuple(out)


@dataclass(frozen=True)
class Contract:
    """Domain entity: care agreement for one child."""

    contract_id: str
    child_id: str
    start_date: date
    contract_type: ContractType
    status: ContractStatus
    end_date: Optional[date] = None
    hours_per_week: float = 0
    hourly_rate: float = 0
    maintenance_allowance: float = 0
    meals_provided: bool = False
    meal_allowance: Optional[float] = None
    documents_url: tuple[str, ...] = ()
    notes: Optional[str] = None
    regular_schedule: tuple[RegularScheduleEntry, ...] = ()
    monthly_schedule: tuple[PlannedDay, ...] = field(default_factory=tuple)

    @property
    def days_per_week(self) -> list[int]:
        return sorted({e.day_of_week for e in self.regular_schedule})

    def to_dict(self) -> dict:
        return {
            "id": self.contract_id,
            "childId": self.child_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "type": self.contract_type.value,
            "hoursPerWeek": self.hours_per_week,
            "daysPerWeek": self.days_per_week,
            "hourlyRate": self.hourly_rate,
            "maintenanceAllowance": self.maintenance_allowance,
            "mealsProvided": self.meals_provided,
            "mealAllowance": self.meal_allowance,
            "documentsUrl": list(self.documents_url),
            "status": self.status.value,
            "notes": self.notes,
            "regularSchedule": [e.to_dict() for e in self.regular_schedule],
            "monthlySchedule": [d.to_dict() for d in self.monthly_schedule],
        }
