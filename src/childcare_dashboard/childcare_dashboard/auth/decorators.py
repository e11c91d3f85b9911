from __future__ import annotations

from functools import wraps

from flask import jsonify

from .session_provider import SessionProvider


def login_required(sessions: SessionProvider):
    """Reject the request with a 401 JSON body when nobody is signed in."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if sessions.get_current_session() is None:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    return decorator
