from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.json_fields import decode_json_field, encode_json_field
from ..core.enums import ContractStatus, ContractType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Contract, parse_monthly_schedule, parse_regular_schedule
from .repository import ContractRepository

_COLUMNS = (
    "contract_id, child_id, start_date, end_date, contract_type, hours_per_week, days_per_week, "
    "hourly_rate, maintenance_allowance, meals_provided, meal_allowance, documents_url, status, notes, "
    "regular_schedule, monthly_schedule"
)


def _num(value: Any) -> Optional[float]:
    # DECIMAL columns come back as Decimal.
    return None if value is None else float(value)


def _row_to_contract(r: dict) -> Contract:
    return Contract(
        contract_id=str(r["contract_id"]),
        child_id=str(r["child_id"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        contract_type=ContractType(r["contract_type"]),
        status=ContractStatus(r["status"]),
        hours_per_week=_num(r.get("hours_per_week")) or 0,
        hourly_rate=_num(r.get("hourly_rate")) or 0,
        maintenance_allowance=_num(r.get("maintenance_allowance")) or 0,
        meals_provided=bool(r.get("meals_provided")),
        meal_allowance=_num(r.get("meal_allowance")),
        documents_url=tuple(decode_json_field(r.get("documents_url"), [])),
        notes=r.get("notes"),
        regular_schedule=parse_regular_schedule(decode_json_field(r.get("regular_schedule"), [])),
        monthly_schedule=parse_monthly_schedule(decode_json_field(r.get("monthly_schedule"), [])),
    )


def _to_columns(name: str, value: Any) -> dict:
    if name == "contract_type":
        return {"contract_type": value.value}
    if name == "status":
        return {"status": value.value}
    if name == "meals_provided":
        return {"meals_provided": 1 if value else 0}
    if name == "documents_url":
        return {"documents_url": encode_json_field(list(value))}
    if name == "regular_schedule":
        entries = [e.to_dict() for e in value]
        days = sorted({e.day_of_week for e in value})
        return {
            "regular_schedule": encode_json_field(entries, empty_as_null=True),
            "days_per_week": encode_json_field(days),
        }
    if name == "monthly_schedule":
        return {"monthly_schedule": encode_json_field([d.to_dict() for d in value], empty_as_null=True)}
    return {name: value}


class MySQLContractRepository(ContractRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Contract]:
        with db_cursor(self._conn_factory, operation="contracts.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contracts ORDER BY start_date DESC")
            return [_row_to_contract(r) for r in fetchall(cur)]

    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        with db_cursor(self._conn_factory, operation="contracts.select") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contracts WHERE contract_id=%s", (contract_id,))
            r = fetchone(cur)
            return _row_to_contract(r) if r else None

    def insert(self, contract: Contract) -> Contract:
        values: dict[str, Any] = {
            "contract_id": contract.contract_id,
            "child_id": contract.child_id,
            "start_date": contract.start_date,
            "end_date": contract.end_date,
            "hours_per_week": contract.hours_per_week,
            "hourly_rate": contract.hourly_rate,
            "maintenance_allowance": contract.maintenance_allowance,
            "meal_allowance": contract.meal_allowance,
            "notes": contract.notes,
        }
        for name in ("contract_type", "status", "meals_provided", "documents_url", "regular_schedule", "monthly_schedule"):
            values.update(_to_columns(name, getattr(contract, name)))

        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory, operation="contracts.insert") as (_, cur):
            cur.execute(f"INSERT INTO contracts({columns}) VALUES({placeholders})", tuple(values.values()))
            cur.execute(f"SELECT {_COLUMNS} FROM contracts WHERE contract_id=%s", (contract.contract_id,))
            return _row_to_contract(fetchone(cur))

    def update(self, contract_id: str, changes: dict) -> Optional[Contract]:
        values: dict[str, Any] = {}
        for name, value in changes.items():
            values.update(_to_columns(name, value))

        with db_cursor(self._conn_factory, operation="contracts.update") as (_, cur):
            if values:
                sql, params = build_update("contracts", values, key_column="contract_id", key=contract_id)
                cur.execute(sql, params)
            cur.execute(f"SELECT {_COLUMNS} FROM contracts WHERE contract_id=%s", (contract_id,))
            r = fetchone(cur)
            return _row_to_contract(r) if r else None

    def delete(self, contract_id: str) -> bool:
        with db_cursor(self._conn_factory, operation="contracts.delete") as (_, cur):
            cur.execute("DELETE FROM contracts WHERE contract_id=%s", (contract_id,))
            return cur.rowcount > 0
