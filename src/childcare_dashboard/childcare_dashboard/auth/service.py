from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .model import AuthSession
from .repository import StaffAccountRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate a staff member (login)."""

    def __init__(self, accounts: StaffAccountRepository):
        self._accounts = accounts

    def authenticate(self, email: str, password: str, *, now: Optional[datetime] = None) -> AuthSession:
        email = require_non_empty(email, "email").lower()
        account = self._accounts.get_by_email(email)
        if not account or not account.is_active:
            logger.info("login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes in the table.
            ok = False

        if not ok:
            logger.info("login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        return AuthSession(
            account_id=account.account_id,
            email=account.email,
            full_name=account.full_name,
            issued_at=(now or now_local()).replace(microsecond=0),
        )
