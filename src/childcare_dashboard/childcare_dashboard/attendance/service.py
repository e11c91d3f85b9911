from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..children.repository import ChildRepository
from ..common.datetime_utils import now_local, parse_time_minutes, to_store_time
from ..common.validators import require_in, require_non_empty
from ..core.constants import MIDNIGHT_DEPARTURE
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .summary import last_record_for_child

logger = logging.getLogger(__name__)

_FIELD_MAP = {
    "arrivalTime": "arrival_time",
    "departureTime": "departure_time",
    "status": "status",
    "notes": "notes",
}


def _departure_time(value: Optional[str]) -> Optional[str]:
    stored = to_store_time(value)
    # Stored "00:00:00" departures are read back as "not departed".
    if stored is not None and parse_time_minutes(stored) == 0:
        raise ValidationError("Departure time 00:00 is reserved for \"not departed\"; use 00:01 or later")
    return stored


def _clock_departure_time(now: datetime) -> str:
    # A check-out during the first minute after midnight is kept as 00:01.
    if now.hour == 0 and now.minute == 0:
        return to_store_time(MIDNIGHT_DEPARTURE)
    return _departure_time(now.strftime("%H:%M"))


class AttendanceService:
    """Use case: record arrivals, departures and absences."""

    def __init__(self, attendance: AttendanceRepository, children: ChildRepository):
        self._attendance = attendance
        self._children = children

    def list_records(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all()

    def list_for_day(self, day: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_day(day)

    def get_record(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return self._attendance.get_by_id(attendance_id)

    def _require_child(self, child_id: str) -> None:
        child_id = require_non_empty(child_id, "childId")
        if not self._children.get_by_id(child_id):
            raise NotFoundError(f"Child {child_id} not found")

    def record_arrival(self, child_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        day = now.date()
        self._require_child(child_id)

        last = last_record_for_child(self._attendance.list_for_day(day), child_id, day)
        if last is not None and last.is_open_presence:
            raise ValidationError("Child is already checked in")

        record = AttendanceRecord(
            attendance_id=str(uuid.uuid4()),
            child_id=child_id,
            day=day,
            status=AttendanceStatus.PRESENT,
            arrival_time=to_store_time(now.strftime("%H:%M")),
            departure_time=None,
        )
        created = self._attendance.insert(record)
        logger.info("arrival recorded child=%s at %s", child_id, record.arrival_time)
        return created

    def record_departure(self, attendance_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        if not record.is_open_presence:
            raise ValidationError("Child is not checked in")

        updated = self._attendance.update(
            attendance_id,
            {
                "status": AttendanceStatus.DEPARTED,
                "departure_time": _clock_departure_time(now),
            },
        )
        if updated is None:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        logger.info("departure recorded child=%s record=%s", record.child_id, attendance_id)
        return updated

    def declare_absence(self, child_id: str, *, day: Optional[date] = None, notes: Optional[str] = None) -> AttendanceRecord:
        day = day or now_local().date()
        self._require_child(child_id)

        if any(r.child_id == child_id for r in self._attendance.list_for_day(day)):
            raise ValidationError("Attendance already recorded for this child today")

        record = AttendanceRecord(
            attendance_id=str(uuid.uuid4()),
            child_id=child_id,
            day=day,
            status=AttendanceStatus.ABSENT,
            notes=(notes or "").strip() or None,
        )
        created = self._attendance.insert(record)
        logger.info("absence declared child=%s day=%s", child_id, day)
        return created

    def update_record(self, attendance_id: str, data: dict) -> AttendanceRecord:
        """Partial update from camelCase keys; unknown keys are ignored."""
        changes = {}
        for key, value in (data or {}).items():
            name = _FIELD_MAP.get(key)
            if name == "arrival_time":
                changes[name] = to_store_time(value)
            elif name == "departure_time":
                changes[name] = _departure_time(value)
            elif name == "status":
                changes[name] = require_in(value, AttendanceStatus, "status")
            elif name == "notes":
                changes[name] = (value or "").strip() or None

        updated = self._attendance.update(attendance_id, changes)
        if updated is None:
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        return updated

    def delete_record(self, attendance_id: str) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError(f"Attendance record {attendance_id} not found")
        logger.info("attendance record deleted id=%s", attendance_id)
