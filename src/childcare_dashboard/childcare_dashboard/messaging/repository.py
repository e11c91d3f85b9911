from __future__ import annotations

from typing import Protocol, Sequence

from .model import Message


class MessageRepository(Protocol):
    def list_recent(self, limit: int) -> Sequence[Message]:
        """Newest first."""

        raise NotImplementedError

    def list_for_child(self, child_id: str) -> Sequence[Message]:
        raise NotImplementedError

    def insert(self, message: Message) -> Message:
        raise NotImplementedError
