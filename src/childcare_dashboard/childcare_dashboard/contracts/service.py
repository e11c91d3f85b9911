from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import today as today_local
from ..common.validators import optional_iso_date, require_in, require_iso_date, require_non_empty, require_non_negative, require_time
from ..core.constants import DEFAULT_REGULAR_DAY_OF_WEEK, DEFAULT_REGULAR_END, DEFAULT_REGULAR_START
from ..core.enums import ContractStatus, ContractType, PlannedDayStatus
from ..core.exceptions import NotFoundError, ValidationError
from .calendar import toggle_planned_day
from .model import Contract, PlannedDay, RegularScheduleEntry
from .repository import ContractRepository

logger = logging.getLogger(__name__)


def parse_regular_entries(items: Any) -> tuple[RegularScheduleEntry, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValidationError("regularSchedule must be a list")

    out = []
    for item in items:
        try:
            day_of_week = int(item.get("dayOfWeek"))
        except (AttributeError, TypeError, ValueError):
            raise ValidationError("dayOfWeek must be a number between 0 and 6")
        if not 0 <= day_of_week <= 6:
            raise ValidationError("dayOfWeek must be a number between 0 and 6")
        out.append(
            RegularScheduleEntry(
                day_of_week=day_of_week,
                start_time=require_time(item.get("startTime"), "startTime"),
                end_time=require_time(item.get("endTime"), "endTime"),
            )
        )
    return tuple(out)


def parse_planned_days(items: Any) -> tuple[PlannedDay, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValidationError("monthlySchedule must be a list")

    out = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("monthlySchedule entries must be objects")
        start = item.get("startTime")
        end = item.get("endTime")
        out.append(
            PlannedDay(
                day=require_iso_date(item.get("date"), "date"),
                status=require_in(item.get("status", PlannedDayStatus.PLANNED.value), PlannedDayStatus, "status"),
                start_time=require_time(start, "startTime") if start else None,
                end_time=require_time(end, "endTime") if end else None,
                notes=item.get("notes") or None,
            )
        )
    return tuple(out)


def _optional_number(value, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return require_non_negative(value, field_name)


class ContractService:
    """Use case: manage contracts and their planning."""

    def __init__(self, contracts: ContractRepository):
        self._contracts = contracts

    def list_contracts(self) -> Sequence[Contract]:
        return self._contracts.list_all()

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        return self._contracts.get_by_id(contract_id)

    @staticmethod
    def new_regular_entry() -> RegularScheduleEntry:
        return RegularScheduleEntry(
            day_of_week=DEFAULT_REGULAR_DAY_OF_WEEK,
            start_time=DEFAULT_REGULAR_START,
            end_time=DEFAULT_REGULAR_END,
        )

    def add_contract(self, data: dict) -> Contract:
        child_id = require_non_empty(data.get("childId"), "Child")
        start_date = optional_iso_date(data.get("startDate"), "Start date") or today_local()
        end_date = optional_iso_date(data.get("endDate"), "End date")
        if end_date and end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        contract = Contract(
            contract_id=str(uuid.uuid4()),
            child_id=child_id,
            start_date=start_date,
            end_date=end_date,
            contract_type=require_in(data.get("type", ContractType.CDI.value), ContractType, "type"),
            status=require_in(data.get("status", ContractStatus.PENDING.value), ContractStatus, "status"),
            hours_per_week=require_non_negative(data.get("hoursPerWeek"), "hoursPerWeek"),
            hourly_rate=require_non_negative(data.get("hourlyRate"), "hourlyRate"),
            maintenance_allowance=require_non_negative(data.get("maintenanceAllowance"), "maintenanceAllowance"),
            meals_provided=bool(data.get("mealsProvided", False)),
            meal_allowance=_optional_number(data.get("mealAllowance"), "mealAllowance"),
            documents_url=tuple(data.get("documentsUrl") or ()),
            notes=data.get("notes") or None,
            regular_schedule=parse_regular_entries(data.get("regularSchedule")),
            monthly_schedule=parse_planned_days(data.get("monthlySchedule")),
        )
        stored = self._contracts.insert(contract)
        logger.info("Contract %s added for child %s", stored.contract_id, stored.child_id)
        return stored

    def update_contract(self, contract_id: str, data: dict) -> Contract:
        changes = self._parse_changes(data or {})
        if not changes:
            current = self._contracts.get_by_id(contract_id)
            if not current:
                raise NotFoundError(f"Contract {contract_id} not found")
            return current

        updated = self._contracts.update(contract_id, changes)
        if not updated:
            raise NotFoundError(f"Contract {contract_id} not found")
        return updated

    def delete_contract(self, contract_id: str) -> None:
        if not self._contracts.delete(contract_id):
            raise NotFoundError(f"Contract {contract_id} not found")
        logger.info("Contract %s deleted", contract_id)

    def toggle_day(self, contract_id: str, clicked: date) -> Contract:
        """Plan or unplan one calendar day of a stored contract."""

        contract = self._contracts.get_by_id(contract_id)
        if not contract:
            raise NotFoundError(f"Contract {contract_id} not found")
        if not contract.child_id:
            raise ValidationError("Select a child for this contract first")

        schedule = toggle_planned_day(contract.monthly_schedule, contract.regular_schedule, clicked)
        return self.update_contract_schedule(contract_id, schedule)

    def update_contract_schedule(self, contract_id: str, schedule: Sequence[PlannedDay]) -> Contract:
        updated = self._contracts.update(contract_id, {"monthly_schedule": tuple(schedule)})
        if not updated:
            raise NotFoundError(f"Contract {contract_id} not found")
        return updated

    @staticmethod
    def _parse_changes(data: dict) -> dict:
        changes: dict[str, Any] = {}
        if "childId" in data:
            changes["child_id"] = require_non_empty(data["childId"], "Child")
        if "startDate" in data:
            changes["start_date"] = require_iso_date(data["startDate"], "Start date")
        if "endDate" in data:
            changes["end_date"] = optional_iso_date(data["endDate"], "End date")
        if "type" in data:
            changes["contract_type"] = require_in(data["type"], ContractType, "type")
        if "status" in data:
            changes["status"] = require_in(data["status"], ContractStatus, "status")
        for wire, name in (
            ("hoursPerWeek", "hours_per_week"),
            ("hourlyRate", "hourly_rate"),
            ("maintenanceAllowance", "maintenance_allowance"),
        ):
            if wire in data:
                changes[name] = require_non_negative(data[wire], wire)
        if "mealAllowance" in data:
            changes["meal_allowance"] = _optional_number(data["mealAllowance"], "mealAllowance")
        if "mealsProvided" in data:
            changes["meals_provided"] = bool(data["mealsProvided"])
        if "documentsUrl" in data:
            changes["documents_url"] = tuple(data["documentsUrl"] or ())
        if "notes" in data:
            changes["notes"] = data["notes"] or None
        if "regularSchedule" in data:
            changes["regular_schedule"] = parse_regular_entries(data["regularSchedule"])
        if "monthlySchedule" in data:
            changes["monthly_schedule"] = parse_planned_days(data["monthlySchedule"])

        start, end = changes.get("start_date"), changes.get("end_date")
        if start and end and end < start:
            raise ValidationError("End date cannot be before start date")
        return changes
