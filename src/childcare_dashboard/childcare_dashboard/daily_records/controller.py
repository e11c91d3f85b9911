from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.datetime_utils import today
from ..common.responses import ok, result_response
from ..container import Container
from .activity_feed import build_activity_feed


def register(app: Flask, container: Container) -> None:
    state = container.state
    auth = login_required(container.sessions)

    @app.route("/api/daily-records", methods=["GET"], endpoint="daily_records_list")
    @auth
    def list_daily_records():
        child_id = request.args.get("child_id")
        records = [r for r in state.daily_records() if not child_id or r.child_id == child_id]
        records.sort(key=lambda r: (r.day, r.record_id), reverse=True)
        payload = {"records": [r.to_dict() for r in records]}
        if request.args.get("feed"):
            payload["feed"] = [d.to_dict() for d in build_activity_feed(records, state.children(), today())]
        return ok(payload)

    @app.route("/api/daily-records", methods=["POST"], endpoint="daily_records_add")
    @auth
    def add_daily_record():
        return result_response(state.add_daily_record(request.get_json(silent=True) or {}), 201)
