"""In-memory replica of the records the dashboard works with.

Reads are served from the replica. Every mutation goes to the record store
first; only when the store call succeeds is the returned record applied to
the replica. A failed call leaves the replica untouched and is reported as a
``MutationResult`` carrying the error instead of raising.

The replica is per process. ``refresh`` reloads it from the store, e.g. after
another worker changed data.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Generic, Optional, TypeVar

from .attendance.model import AttendanceRecord
from .attendance.service import AttendanceService
from .attendance.summary import DaySummary, summarize_day
from .children.model import Child
from .children.service import ChildService
from .contracts.model import Contract
from .contracts.service import ContractService
from .core.exceptions import DomainError
from .daily_records.model import DailyRecord
from .daily_records.service import DailyRecordService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    operation: str
    value: Optional[T] = None
    error: Optional[DomainError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _replace(items: tuple, item, key: Callable[[Any], str]) -> tuple:
    k = key(item)
    if any(key(x) == k for x in items):
        return tuple(item if key(x) == k else x for x in items)
    return items + (item,)


def _remove(items: tuple, item_id: str, key: Callable[[Any], str]) -> tuple:
    return tuple(x for x in items if key(x) != item_id)


def _child_key(c: Child) -> str:
    return c.child_id


def _contract_key(c: Contract) -> str:
    return c.contract_id


def _attendance_key(r: AttendanceRecord) -> str:
    return r.attendance_id


def _daily_key(r: DailyRecord) -> str:
    return r.record_id


class ChildcareState:
    def __init__(
        self,
        *,
        child_service: ChildService,
        contract_service: ContractService,
        attendance_service: AttendanceService,
        daily_record_service: DailyRecordService,
    ):
        self._child_service = child_service
        self._contract_service = contract_service
        self._attendance_service = attendance_service
        self._daily_record_service = daily_record_service

        # Re-entrant: apply callbacks run while the lock is held.
        self._lock = threading.RLock()
        self._loaded = False
        self._children: tuple[Child, ...] = ()
        self._contracts: tuple[Contract, ...] = ()
        self._attendance: tuple[AttendanceRecord, ...] = ()
        self._daily_records: tuple[DailyRecord, ...] = ()

    # ----- loading -----
    def refresh(self) -> MutationResult[None]:
        try:
            children = tuple(self._child_service.list_children())
            contracts = tuple(self._contract_service.list_contracts())
            attendance = tuple(self._attendance_service.list_records())
            daily_records = tuple(self._daily_record_service.list_records())
        except DomainError as e:
            logger.error("replica refresh failed: %s", e)
            return MutationResult("refresh", error=e)

        with self._lock:
            self._children = children
            self._contracts = contracts
            self._attendance = attendance
            self._daily_records = daily_records
            self._loaded = True
        logger.info(
            "replica loaded: %d children, %d contracts, %d attendance records, %d daily records",
            len(children), len(contracts), len(attendance), len(daily_records),
        )
        return MutationResult("refresh")

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._loaded:
                return
            result = self.refresh()
            if not result.ok:
                raise result.error

    # ----- reads -----
    def children(self) -> tuple[Child, ...]:
        with self._lock:
            self._ensure_loaded()
            return self._children

    def contracts(self) -> tuple[Contract, ...]:
        with self._lock:
            self._ensure_loaded()
            return self._contracts

    def attendance(self) -> tuple[AttendanceRecord, ...]:
        with self._lock:
            self._ensure_loaded()
            return self._attendance

    def daily_records(self) -> tuple[DailyRecord, ...]:
        with self._lock:
            self._ensure_loaded()
            return self._daily_records

    def get_child(self, child_id: str) -> Optional[Child]:
        return next((c for c in self.children() if c.child_id == child_id), None)

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        return next((c for c in self.contracts() if c.contract_id == contract_id), None)

    def get_attendance(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance() if r.attendance_id == attendance_id), None)

    def summary_for(self, day: date) -> DaySummary:
        with self._lock:
            return summarize_day(self.attendance(), self.children(), day)

    # ----- mutations -----
    def _mutate(self, operation: str, call: Callable[[], T], apply: Callable[[T], None]) -> MutationResult[T]:
        with self._lock:
            self._ensure_loaded()
        try:
            value = call()
        except DomainError as e:
            logger.warning("%s rejected: %s", operation, e)
            return MutationResult(operation, error=e)

        with self._lock:
            apply(value)
        return MutationResult(operation, value=value)

    def _put_child(self, child: Child) -> None:
        self._children = _replace(self._children, child, _child_key)

    def _put_contract(self, contract: Contract) -> None:
        self._contracts = _replace(self._contracts, contract, _contract_key)

    def _put_attendance(self, record: AttendanceRecord) -> None:
        self._attendance = _replace(self._attendance, record, _attendance_key)

    def add_child(self, **fields) -> MutationResult[Child]:
        return self._mutate("children.add", lambda: self._child_service.add_child(**fields), self._put_child)

    def update_child(self, child_id: str, changes: dict) -> MutationResult[Child]:
        return self._mutate(
            "children.update",
            lambda: self._child_service.update_child(child_id, changes),
            self._put_child,
        )

    def add_contract(self, data: dict) -> MutationResult[Contract]:
        return self._mutate("contracts.add", lambda: self._contract_service.add_contract(data), self._put_contract)

    def update_contract(self, contract_id: str, data: dict) -> MutationResult[Contract]:
        return self._mutate(
            "contracts.update",
            lambda: self._contract_service.update_contract(contract_id, data),
            self._put_contract,
        )

    def toggle_contract_day(self, contract_id: str, clicked: date) -> MutationResult[Contract]:
        return self._mutate(
            "contracts.toggle_day",
            lambda: self._contract_service.toggle_day(contract_id, clicked),
            self._put_contract,
        )

    def delete_contract(self, contract_id: str) -> MutationResult[None]:
        def apply(_):
            self._contracts = _remove(self._contracts, contract_id, _contract_key)

        return self._mutate("contracts.delete", lambda: self._contract_service.delete_contract(contract_id), apply)

    def record_arrival(self, child_id: str, *, now: Optional[datetime] = None) -> MutationResult[AttendanceRecord]:
        return self._mutate(
            "attendance.arrival",
            lambda: self._attendance_service.record_arrival(child_id, now=now),
            self._put_attendance,
        )

    def record_departure(self, attendance_id: str, *, now: Optional[datetime] = None) -> MutationResult[AttendanceRecord]:
        return self._mutate(
            "attendance.departure",
            lambda: self._attendance_service.record_departure(attendance_id, now=now),
            self._put_attendance,
        )

    def declare_absence(
        self, child_id: str, *, day: Optional[date] = None, notes: Optional[str] = None
    ) -> MutationResult[AttendanceRecord]:
        return self._mutate(
            "attendance.absence",
            lambda: self._attendance_service.declare_absence(child_id, day=day, notes=notes),
            self._put_attendance,
        )

    def update_attendance(self, attendance_id: str, data: dict) -> MutationResult[AttendanceRecord]:
        return self._mutate(
            "attendance.update",
            lambda: self._attendance_service.update_record(attendance_id, data),
            self._put_attendance,
        )

    def delete_attendance(self, attendance_id: str) -> MutationResult[None]:
        def apply(_):
            self._attendance = _remove(self._attendance, attendance_id, _attendance_key)

        return self._mutate(
            "attendance.delete",
            lambda: self._attendance_service.delete_record(attendance_id),
            apply,
        )

    def add_daily_record(self, data: dict) -> MutationResult[DailyRecord]:
        def apply(record: DailyRecord):
            self._daily_records = _replace(self._daily_records, record, _daily_key)

        return self._mutate(
            "daily_records.add",
            lambda: self._daily_record_service.add_daily_record(data),
            apply,
        )
