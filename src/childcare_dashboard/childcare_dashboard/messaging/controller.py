from __future__ import annotations

from dataclasses import replace

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.responses import ok
from ..core.constants import DEFAULT_MESSAGE_LIMIT
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.sessions)

    @app.route("/api/messages", methods=["GET"], endpoint="messages_list")
    @auth
    def list_messages():
        child_id = request.args.get("child_id")
        if child_id:
            messages = container.message_service.list_for_child(child_id)
        else:
            try:
                limit = int(request.args.get("limit") or DEFAULT_MESSAGE_LIMIT)
            except ValueError:
                raise ValidationError("limit must be a number")
            messages = container.message_service.list_recent(limit)
        return ok([m.to_dict() for m in messages])

    @app.route("/api/messages", methods=["POST"], endpoint="messages_post")
    @auth
    def post_message():
        author = container.sessions.get_current_session()
        photo = request.files.get("photo")
        data = request.form if photo else (request.get_json(silent=True) or {})

        draft = container.message_service.prepare_message(
            author_name=author.full_name or author.email,
            body=data.get("body", ""),
            child_id=data.get("childId"),
            photo_url=data.get("photoUrl"),
        )
        if not photo:
            return ok(container.message_service.save_message(draft).to_dict(), 201)

        photo_url = container.photo_storage.upload(photo, author)
        try:
            message = container.message_service.save_message(replace(draft, photo_url=photo_url))
        except DomainError:
            container.photo_storage.discard(photo_url)
            raise
        return ok(message.to_dict(), 201)
