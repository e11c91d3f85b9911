from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.datetime_utils import today
from ..common.responses import error_response, ok, result_response
from ..core.exceptions import NotFoundError
from ..container import Container
from .service import describe_age


def _child_payload(child, day) -> dict:
    payload = child.to_dict()
    payload["age"] = describe_age(child.birth_date, day)
    return payload


def register(app: Flask, container: Container) -> None:
    state = container.state
    auth = login_required(container.sessions)

    @app.route("/api/children", methods=["GET"], endpoint="children_list")
    @auth
    def list_children():
        search = request.args.get("search", "").strip().lower()
        day = today()
        children = [c for c in state.children() if search in c.full_name.lower()]
        return ok([_child_payload(c, day) for c in children])

    @app.route("/api/children", methods=["POST"], endpoint="children_add")
    @auth
    def add_child():
        data = request.get_json(silent=True) or {}
        result = state.add_child(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            birth_date=data.get("birthDate"),
            gender=data.get("gender", ""),
            photo=data.get("photo"),
            parent_info=data.get("parentInfo"),
            medical_info=data.get("medicalInfo"),
            authorized_pickups=data.get("authorizedPickups"),
        )
        return result_response(result, 201)

    @app.route("/api/children/<child_id>", methods=["GET"], endpoint="children_get")
    @auth
    def get_child(child_id: str):
        child = state.get_child(child_id)
        if child is None:
            return error_response(NotFoundError(f"Child {child_id} not found"))
        payload = _child_payload(child, today())
        payload["contracts"] = [c.to_dict() for c in state.contracts() if c.child_id == child_id]
        payload["messages"] = [m.to_dict() for m in container.message_service.list_for_child(child_id)]
        return ok(payload)

    @app.route("/api/children/<child_id>", methods=["PATCH"], endpoint="children_update")
    @auth
    def update_child(child_id: str):
        return result_response(state.update_child(child_id, request.get_json(silent=True) or {}))

    @app.route("/api/children/<child_id>/photo", methods=["POST"], endpoint="children_photo")
    @auth
    def upload_photo(child_id: str):
        if state.get_child(child_id) is None:
            return error_response(NotFoundError(f"Child {child_id} not found"))
        url = container.photo_storage.upload(request.files.get("photo"), container.sessions.get_current_session())
        result = state.update_child(child_id, {"photo": url})
        if not result.ok:
            container.photo_storage.discard(url)
        return result_response(result)
