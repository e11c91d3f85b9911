from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import StaffAccount
from .repository import StaffAccountRepository


class MySQLStaffAccountRepository(StaffAccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[StaffAccount]:
        with db_cursor(self._conn_factory, operation="staff_accounts.select") as (_, cur):
            cur.execute(
                """
                SELECT account_id, email, full_name, password_hash, is_active
                FROM staff_accounts
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return StaffAccount(
                account_id=str(row["account_id"]),
                email=row["email"],
                full_name=row["full_name"],
                password_hash=row["password_hash"],
                is_active=bool(row.get("is_active", True)),
            )
