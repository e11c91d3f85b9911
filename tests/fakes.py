"""In-memory repositories used by the tests in place of MySQL."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from src.childcare_dashboard.childcare_dashboard.attendance.model import AttendanceRecord
from src.childcare_dashboard.childcare_dashboard.auth.model import StaffAccount
from src.childcare_dashboard.childcare_dashboard.children.model import Child
from src.childcare_dashboard.childcare_dashboard.contracts.model import Contract
from src.childcare_dashboard.childcare_dashboard.core.exceptions import StoreError
from src.childcare_dashboard.childcare_dashboard.daily_records.model import DailyRecord
from src.childcare_dashboard.childcare_dashboard.messaging.model import Message


@dataclass
class InMemoryChildren:
    rows: dict[str, Child] = field(default_factory=dict)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda c: (c.last_name, c.first_name))

    def get_by_id(self, child_id: str) -> Optional[Child]:
        return self.rows.get(child_id)

    def insert(self, child: Child) -> Child:
        self.rows[child.child_id] = child
        return child

    def update(self, child_id: str, changes: dict) -> Optional[Child]:
        if child_id not in self.rows:
            return None
        self.rows[child_id] = replace(self.rows[child_id], **changes)
        return self.rows[child_id]


@dataclass
class InMemoryContracts:
    rows: dict[str, Contract] = field(default_factory=dict)

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        return self.rows.get(contract_id)

    def insert(self, contract: Contract) -> Contract:
        self.rows[contract.contract_id] = contract
        return contract

    def update(self, contract_id: str, changes: dict) -> Optional[Contract]:
        if contract_id not in self.rows:
            return None
        self.rows[contract_id] = replace(self.rows[contract_id], **changes)
        return self.rows[contract_id]

    def delete(self, contract_id: str) -> bool:
        return self.rows.pop(contract_id, None) is not None


@dataclass
class InMemoryAttendance:
    rows: dict[str, AttendanceRecord] = field(default_factory=dict)
    fail_writes: bool = False

    def _check(self, operation: str) -> None:
        if self.fail_writes:
            raise StoreError(operation, ConnectionError("store unreachable"))

    def list_all(self):
        return list(self.rows.values())

    def list_for_day(self, day: date):
        return [r for r in self.rows.values() if r.day == day]

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return self.rows.get(attendance_id)

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        self._check("attendance.insert")
        self.rows[record.attendance_id] = record
        return record

    def update(self, attendance_id: str, changes: dict) -> Optional[AttendanceRecord]:
        self._check("attendance.update")
        if attendance_id not in self.rows:
            return None
        self.rows[attendance_id] = replace(self.rows[attendance_id], **changes)
        return self.rows[attendance_id]

    def delete(self, attendance_id: str) -> bool:
        self._check("attendance.delete")
        return self.rows.pop(attendance_id, None) is not None


@dataclass
class InMemoryDailyRecords:
    rows: dict[str, DailyRecord] = field(default_factory=dict)

    def list_all(self):
        return list(self.rows.values())

    def list_for_child(self, child_id: str):
        return [r for r in self.rows.values() if r.child_id == child_id]

    def list_recent(self, limit: int):
        return sorted(self.rows.values(), key=lambda r: r.day, reverse=True)[:limit]

    def get_by_id(self, record_id: str) -> Optional[DailyRecord]:
        return self.rows.get(record_id)

    def insert(self, record: DailyRecord) -> DailyRecord:
        self.rows[record.record_id] = record
        return record


@dataclass
class InMemoryMessages:
    rows: list[Message] = field(default_factory=list)
    fail_writes: bool = False

    def list_recent(self, limit: int):
        return sorted(self.rows, key=lambda m: m.created_at, reverse=True)[:limit]

    def list_for_child(self, child_id: str):
        return [m for m in self.list_recent(len(self.rows)) if m.child_id == child_id]

    def insert(self, message: Message) -> Message:
        if self.fail_writes:
            raise StoreError("messages.insert", ConnectionError("store unreachable"))
        self.rows.append(message)
        return message


@dataclass
class InMemoryAccounts:
    rows: dict[str, StaffAccount] = field(default_factory=dict)

    def get_by_email(self, email: str) -> Optional[StaffAccount]:
        return self.rows.get(email)


def make_child(child_id: str, first_name: str = "Emma", last_name: str = "Martin", **kwargs) -> Child:
    from src.childcare_dashboard.childcare_dashboard.core.enums import Gender

    kwargs.setdefault("birth_date", date(2022, 3, 14))
    kwargs.setdefault("gender", Gender.FEMALE)
    return Child(child_id=child_id, first_name=first_name, last_name=last_name, **kwargs)


def make_record(attendance_id: str, child_id: str, day: date, status, arrival=None, departure=None) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=attendance_id,
        child_id=child_id,
        day=day,
        status=status,
        arrival_time=arrival,
        departure_time=departure,
    )
