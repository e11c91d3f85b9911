from __future__ import annotations

from typing import Optional, Sequence

from ..common.json_fields import decode_json_field, encode_json_field
from ..core.enums import Mood
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyRecord, Nap, meals_from_dict
from .repository import DailyRecordRepository

_COLUMNS = "record_id, child_id, record_date, meals, naps, activities, mood, notes, photos"


def _row_to_record(r: dict) -> DailyRecord:
    return DailyRecord(
        record_id=str(r["record_id"]),
        child_id=str(r["child_id"]),
        day=r["record_date"],
        mood=Mood(r["mood"]),
        meals=meals_from_dict(decode_json_field(r.get("meals"), {})),
        naps=tuple(Nap.from_dict(n) for n in decode_json_field(r.get("naps"), [])),
        activities=tuple(str(a) for a in decode_json_field(r.get("activities"), [])),
        notes=r.get("notes") or "",
        photos=tuple(decode_json_field(r.get("photos"), [])),
    )


class MySQLDailyRecordRepository(DailyRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[DailyRecord]:
        with db_cursor(self._conn_factory, operation="daily_records.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_records ORDER BY record_date DESC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_child(self, child_id: str) -> Sequence[DailyRecord]:
        with db_cursor(self._conn_factory, operation="daily_records.select") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_records WHERE child_id=%s ORDER BY record_date DESC",
                (child_id,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[DailyRecord]:
        with db_cursor(self._conn_factory, operation="daily_records.select") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_records ORDER BY record_date DESC, record_id LIMIT %s",
                (int(limit),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, record_id: str) -> Optional[DailyRecord]:
        with db_cursor(self._conn_factory, operation="daily_records.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_records WHERE record_id=%s", (record_id,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def insert(self, record: DailyRecord) -> DailyRecord:
        with db_cursor(self._conn_factory, operation="daily_records.insert") as (_, cur):
            cur.execute(
                f"INSERT INTO daily_records({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                (
                    record.record_id,
                    record.child_id,
                    record.day,
                    encode_json_field({slot: m.to_dict() for slot, m in record.meals.items()}),
                    encode_json_field([n.to_dict() for n in record.naps]),
                    encode_json_field(list(record.activities)),
                    record.mood.value,
                    record.notes,
                    encode_json_field(list(record.photos)),
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM daily_records WHERE record_id=%s", (record.record_id,))
            return _row_to_record(fetchone(cur))
