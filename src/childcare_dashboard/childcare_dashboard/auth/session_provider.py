"""Current-session access backed by the Flask session cookie.

``subscribe`` lets other parts of the app react to sign-in and sign-out
(e.g. refreshing the in-memory replica); it returns the matching unsubscribe
callable.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from flask import session

from ..core.enums import AuthEvent
from .model import AuthSession

logger = logging.getLogger(__name__)

SESSION_KEY = "auth"

SessionListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class SessionProvider:
    def __init__(self):
        self._listeners: list[SessionListener] = []
        self._lock = threading.Lock()

    def get_current_session(self) -> Optional[AuthSession]:
        data = session.get(SESSION_KEY)
        if not data:
            return None
        try:
            return AuthSession.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed session cookie")
            session.pop(SESSION_KEY, None)
            return None

    def sign_in(self, auth_session: AuthSession) -> None:
        session.clear()
        session[SESSION_KEY] = auth_session.to_dict()
        logger.info("signed in account=%s", auth_session.account_id)
        self._notify(AuthEvent.SIGNED_IN, auth_session)

    def sign_out(self) -> None:
        current = self.get_current_session()
        session.clear()
        if current is not None:
            logger.info("signed out account=%s", current.account_id)
        self._notify(AuthEvent.SIGNED_OUT, None)

    def subscribe(self, callback: SessionListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: AuthEvent, auth_session: Optional[AuthSession]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event, auth_session)
