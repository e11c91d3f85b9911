from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.datetime_utils import today
from ..common.responses import ok, result_response
from ..common.validators import optional_iso_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.sessions)

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @auth
    def dashboard():
        day = optional_iso_date(request.args.get("date"), "date") or today()
        return ok(container.dashboard_service.today(day).to_dict())

    @app.route("/api/state/refresh", methods=["POST"], endpoint="state_refresh")
    @auth
    def refresh_state():
        result = container.state.refresh()
        return result_response(
            result,
            serialize=lambda _: {
                "children": len(container.state.children()),
                "contracts": len(container.state.contracts()),
                "attendance": len(container.state.attendance()),
                "dailyRecords": len(container.state.daily_records()),
            },
        )
