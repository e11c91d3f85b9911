from __future__ import annotations

from typing import Optional, Protocol

from .model import StaffAccount


class StaffAccountRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[StaffAccount]:
        raise NotImplementedError
