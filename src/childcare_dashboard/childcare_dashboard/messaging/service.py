from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..children.repository import ChildRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MESSAGE_LIMIT
from ..core.exceptions import NotFoundError
from .model import Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class MessageService:
    """Use case: staff-to-family messages, optionally about one child."""

    def __init__(self, messages: MessageRepository, children: ChildRepository):
        self._messages = messages
        self._children = children

    def list_recent(self, limit: int = DEFAULT_MESSAGE_LIMIT) -> Sequence[Message]:
        return self._messages.list_recent(max(int(limit), 1))

    def list_for_child(self, child_id: str) -> Sequence[Message]:
        return self._messages.list_for_child(child_id)

    def prepare_message(
        self,
        *,
        author_name: str,
        body: str,
        child_id: Optional[str] = None,
        photo_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Message:
        """Validate a new message without storing it."""
        child_id = (child_id or "").strip() or None
        if child_id and not self._children.get_by_id(child_id):
            raise NotFoundError(f"Child {child_id} not found")

        return Message(
            message_id=str(uuid.uuid4()),
            author_name=require_non_empty(author_name, "authorName"),
            body=require_non_empty(body, "body"),
            child_id=child_id,
            photo_url=(photo_url or "").strip() or None,
            created_at=(now or now_local()).replace(microsecond=0),
        )

    def save_message(self, message: Message) -> Message:
        created = self._messages.insert(message)
        logger.info("message posted id=%s child=%s", message.message_id, message.child_id)
        return created

    def post_message(
        self,
        *,
        author_name: str,
        body: str,
        child_id: Optional[str] = None,
        photo_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Message:
        message = self.prepare_message(
            author_name=author_name, body=body, child_id=child_id, photo_url=photo_url, now=now
        )
        return self.save_message(message)
