from __future__ import annotations

from flask import Flask, request

from ..common.responses import error_response, ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    sessions = container.sessions

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            auth_session = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except (ValidationError, AuthenticationError) as e:
            return error_response(e)
        sessions.sign_in(auth_session)
        return ok(auth_session.to_dict())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        sessions.sign_out()
        return ok()

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def current_session():
        current = sessions.get_current_session()
        return ok(current.to_dict() if current else None)
