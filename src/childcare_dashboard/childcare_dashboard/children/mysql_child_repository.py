from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.json_fields import decode_json_field, encode_json_field
from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import AuthorizedPickup, Child, MedicalInfo, ParentInfo
from .repository import ChildRepository

_COLUMNS = "child_id, first_name, last_name, birth_date, gender, photo, parent_info, medical_info, authorized_pickups"


def _row_to_child(r: dict) -> Child:
    return Child(
        child_id=str(r["child_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        birth_date=r.get("birth_date"),
        gender=Gender(r["gender"]),
        photo=r.get("photo"),
        parent_info=ParentInfo.from_dict(decode_json_field(r.get("parent_info"), {})),
        medical_info=MedicalInfo.from_dict(decode_json_field(r.get("medical_info"), {})),
        authorized_pickups=tuple(
            AuthorizedPickup.from_dict(p) for p in decode_json_field(r.get("authorized_pickups"), [])
        ),
    )


def _to_column(name: str, value: Any) -> tuple[str, Any]:
    if name == "gender":
        return "gender", value.value
    if name == "parent_info":
        return "parent_info", encode_json_field(value.to_dict())
    if name == "medical_info":
        return "medical_info", encode_json_field(value.to_dict())
    if name == "authorized_pickups":
        return "authorized_pickups", encode_json_field([p.to_dict() for p in value])
    return name, value


class MySQLChildRepository(ChildRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Child]:
        with db_cursor(self._conn_factory, operation="children.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM children ORDER BY last_name, first_name")
            return [_row_to_child(r) for r in fetchall(cur)]

    def get_by_id(self, child_id: str) -> Optional[Child]:
        with db_cursor(self._conn_factory, operation="children.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM children WHERE child_id=%s", (child_id,))
            r = fetchone(cur)
            return _row_to_child(r) if r else None

    def insert(self, child: Child) -> Child:
        with db_cursor(self._conn_factory, operation="children.insert") as (_, cur):
            cur.execute(
                f"""
                INSERT INTO children({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    child.child_id,
                    child.first_name,
                    child.last_name,
                    child.birth_date,
                    child.gender.value,
                    child.photo,
                    encode_json_field(child.parent_info.to_dict()),
                    encode_json_field(child.medical_info.to_dict()),
                    encode_json_field([p.to_dict() for p in child.authorized_pickups]),
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM children WHERE child_id=%s", (child.child_id,))
            return _row_to_child(fetchone(cur))

    def update(self, child_id: str, changes: dict) -> Optional[Child]:
        values = dict(_to_column(k, v) for k, v in changes.items())
        with db_cursor(self._conn_factory, operation="children.update") as (_, cur):
            if values:
                sql, params = build_update("children", values, key_column="child_id", key=child_id)
                cur.execute(sql, params)
            cur.execute(f"SELECT {_COLUMNS} FROM children WHERE child_id=%s", (child_id,))
            r = fetchone(cur)
            return _row_to_child(r) if r else None
