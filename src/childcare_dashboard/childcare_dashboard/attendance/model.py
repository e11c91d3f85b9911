from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one child/date presence entry.

    ``departure_time`` is None until the child leaves; a real time value is
    never used to mean "not departed".
    """

    attendance_id: str
    child_id: str
    day: date
    status: AttendanceStatus
    arrival_time: Optional[str] = None
    departure_time: Optional[str] = None
    notes: Optional[str] = None

    @property
    def has_departed(self) -> bool:
        return self.departure_time is not None

    @property
    def is_open_presence(self) -> bool:
        """Checked in and not checked out yet."""
        return self.status == AttendanceStatus.PRESENT and not self.has_departed

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "childId": self.child_id,
            "date": self.day.isoformat(),
            "arrivalTime": self.arrival_time,
            "departureTime": self.departure_time,
            "status": self.status.value,
            "notes": self.notes,
        }
