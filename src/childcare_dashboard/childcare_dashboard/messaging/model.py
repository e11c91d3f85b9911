from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Message:
    message_id: str
    author_name: str
    body: str
    created_at: datetime
    child_id: Optional[str] = None
    photo_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.message_id,
            "authorName": self.author_name,
            "body": self.body,
            "childId": self.child_id,
            "photoUrl": self.photo_url,
            "createdAt": self.created_at.isoformat(timespec="seconds"),
        }
