from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional, Sequence

from ..common.validators import optional_iso_date, require_in, require_non_empty
from ..core.enums import Gender
from ..core.exceptions import NotFoundError, ValidationError
from .model import AuthorizedPickup, Child, MedicalInfo, ParentInfo
from .repository import ChildRepository

logger = logging.getLogger(__name__)

# Wire (camelCase) field -> domain field
_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "birthDate": "birth_date",
    "gender": "gender",
    "photo": "photo",
    "parentInfo": "parent_info",
    "medicalInfo": "medical_info",
    "authorizedPickups": "authorized_pickups",
}


def _split_list(value: Any) -> list[str]:
    # The edit form sends allergies/medications as "a, b, c".
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return [str(s).strip() for s in value or [] if str(s).strip()]


def _medical_info(data: Optional[dict]) -> MedicalInfo:
    data = dict(data or {})
    data["allergies"] = _split_list(data.get("allergies"))
    data["medications"] = _split_list(data.get("medications"))
    return MedicalInfo.from_dict(data)


def describe_age(birth_date: Optional[date], today: date) -> str:
    if birth_date is None:
        return "N/A"
    if birth_date > today:
        return "invalid date"

    years = today.year - birth_date.year
    months = today.month - birth_date.month
    if today.day < birth_date.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12

    month_label = f"{months} month{'s' if months != 1 else ''}"
    if years == 0:
        return month_label
    return f"{years} year{'s' if years > 1 else ''} and {month_label}"


class ChildService:
    """Use case: manage child records."""

    def __init__(self, children: ChildRepository):
        self._children = children

    def list_children(self) -> Sequence[Child]:
        return self._children.list_all()

    def get_child(self, child_id: str) -> Optional[Child]:
        return self._children.get_by_id(child_id)

    def add_child(
        self,
        *,
        first_name: str,
        last_name: str,
        birth_date,
        gender: str,
        photo: Optional[str] = None,
        parent_info: Optional[dict] = None,
        medical_info: Optional[dict] = None,
        authorized_pickups: Optional[list] = None,
    ) -> Child:
        child = Child(
            child_id=str(uuid.uuid4()),
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            birth_date=optional_iso_date(birth_date, "Birth date"),
            gender=require_in(gender, Gender, "Gender"),
            photo=photo or None,
            parent_info=ParentInfo.from_dict(parent_info),
            medical_info=_medical_info(medical_info),
            authorized_pickups=tuple(AuthorizedPickup.from_dict(p) for p in authorized_pickups or ()),
        )
        stored = self._children.insert(child)
        logger.info("Child %s added", stored.child_id)
        return stored

    def update_child(self, child_id: str, changes: dict) -> Child:
        """Partial update from wire field names. Unknown fields are ignored."""

        parsed = self._parse_changes(changes)
        if not parsed:
            current = self._children.get_by_id(child_id)
            if not current:
                raise NotFoundError(f"Child {child_id} not found")
            return current

        updated = self._children.update(child_id, parsed)
        if not updated:
            raise NotFoundError(f"Child {child_id} not found")
        return updated

    @staticmethod
    def _parse_changes(changes: dict) -> dict:
        parsed: dict[str, Any] = {}
        for wire_name, value in (changes or {}).items():
            name = _FIELD_MAP.get(wire_name)
            if name is None:
                continue
            if name in ("first_name", "last_name"):
                parsed[name] = require_non_empty(value, wire_name)
            elif name == "birth_date":
                parsed[name] = optional_iso_date(value, "Birth date")
            elif name == "gender":
                parsed[name] = require_in(value, Gender, "Gender")
            elif name == "parent_info":
                parsed[name] = ParentInfo.from_dict(value)
            elif name == "medical_info":
                parsed[name] = _medical_info(value)
            elif name == "authorized_pickups":
                if not isinstance(value, list):
                    raise ValidationError("authorizedPickups must be a list")
                parsed[name] = tuple(AuthorizedPickup.from_dict(p) for p in value)
            else:
                parsed[name] = value or None
        return parsed
