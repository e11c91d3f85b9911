from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Message
from .repository import MessageRepository

_COLUMNS = "message_id, author_name, body, child_id, photo_url, created_at"


def _row_to_message(r: dict) -> Message:
    return Message(
        message_id=str(r["message_id"]),
        author_name=r["author_name"],
        body=r["body"],
        child_id=r.get("child_id"),
        photo_url=r.get("photo_url"),
        created_at=r["created_at"],
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent(self, limit: int) -> Sequence[Message]:
        with db_cursor(self._conn_factory, operation="messages.select") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM messages ORDER BY created_at DESC, message_id LIMIT %s",
                (int(limit),),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def list_for_child(self, child_id: str) -> Sequence[Message]:
        with db_cursor(self._conn_factory, operation="messages.select") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM messages WHERE child_id=%s ORDER BY created_at DESC, message_id",
                (child_id,),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def insert(self, message: Message) -> Message:
        with db_cursor(self._conn_factory, operation="messages.insert") as (_, cur):
            cur.execute(
                f"INSERT INTO messages({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s)",
                (
                    message.message_id,
                    message.author_name,
                    message.body,
                    message.child_id,
                    message.photo_url,
                    message.created_at,
                ),
            )
        return message
