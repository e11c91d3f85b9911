from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import from_store_time
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, child_id, record_date, arrival_time, departure_time, status, notes"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        child_id=str(r["child_id"]),
        day=r["record_date"],
        status=AttendanceStatus(r["status"]),
        arrival_time=from_store_time(r.get("arrival_time")),
        # Rows written by the previous client stored "00:00:00" for "not departed".
        departure_time=from_store_time(r.get("departure_time"), legacy_unset=True),
        notes=r.get("notes"),
    )


def _to_column(name: str, value: Any) -> tuple[str, Any]:
    if name == "status":
        return "status", value.value
    return name, value


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY record_date DESC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_day(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_date=%s", (day,))
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory, operation="attendance.insert") as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.attendance_id,
                    record.child_id,
                    record.day,
                    record.arrival_time,
                    record.departure_time,
                    record.status.value,
                    record.notes,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (record.attendance_id,))
            return _row_to_record(fetchone(cur))

    def update(self, attendance_id: str, changes: dict) -> Optional[AttendanceRecord]:
        values = dict(_to_column(k, v) for k, v in changes.items())
        with db_cursor(self._conn_factory, operation="attendance.update") as (_, cur):
            if values:
                sql, params = build_update("attendance_records", values, key_column="attendance_id", key=attendance_id)
                cur.execute(sql, params)
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def delete(self, attendance_id: str) -> bool:
        with db_cursor(self._conn_factory, operation="attendance.delete") as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            return cur.rowcount > 0
