from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, operation: str, dictionary: bool = True):
    """Open a connection + cursor for one store operation.

    Commits on success and rolls back on error. Driver errors are logged and
    re-raised as ``StoreError`` naming ``operation``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Record store unreachable during %s: %s", operation, e)
        raise StoreError(operation, e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.exception("Record store call %s failed", operation)
        raise StoreError(operation, e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_update(table: str, values: Dict[str, Any], *, key_column: str, key: Any) -> tuple[str, tuple]:
    """Build ``UPDATE table SET a=%s, b=%s WHERE key=%s`` for a partial update."""
    assignments = ", ".join(f"{column}=%s" for column in values)
    sql = f"UPDATE {table} SET {assignments} WHERE {key_column}=%s"
    return sql, tuple(values.values()) + (key,)
