from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StaffAccount:
    """A staff member allowed to sign in to the dashboard."""

    account_id: str
    email: str
    full_name: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class AuthSession:
    """What we keep in the Flask session after login."""

    account_id: str
    email: str
    full_name: str
    issued_at: datetime

    @classmethod
    def from_dict(cls, data: dict) -> "AuthSession":
        return cls(
            account_id=str(data["account_id"]),
            email=str(data["email"]),
            full_name=str(data.get("full_name", "")),
            issued_at=datetime.fromisoformat(data["issued_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "account_id": self.account_id,
            "email": self.email,
            "full_name": self.full_name,
            "issued_at": self.issued_at.isoformat(timespec="seconds"),
        }
