from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_day(self, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def update(self, attendance_id: str, changes: dict) -> Optional[AttendanceRecord]:
        """Partial update with keys among arrival_time, departure_time, status, notes."""

        raise NotImplementedError

    def delete(self, attendance_id: str) -> bool:
        raise NotImplementedError
