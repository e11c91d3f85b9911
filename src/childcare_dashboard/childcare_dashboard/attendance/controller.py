from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.datetime_utils import today
from ..common.responses import ok, result_response
from ..common.validators import optional_iso_date, require_in, require_non_empty
from ..core.enums import ReportView
from ..container import Container
from .report import build_report
from .summary import children_awaiting_arrival, children_without_record, day_timeline, filter_by_name


def register(app: Flask, container: Container) -> None:
    state = container.state
    auth = login_required(container.sessions)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @auth
    def list_attendance():
        day = optional_iso_date(request.args.get("date"), "date")
        child_id = request.args.get("child_id")
        records = [
            r
            for r in state.attendance()
            if (day is None or r.day == day) and (not child_id or r.child_id == child_id)
        ]
        return ok([r.to_dict() for r in records])

    @app.route("/api/attendance/arrival", methods=["POST"], endpoint="attendance_arrival")
    @auth
    def record_arrival():
        data = request.get_json(silent=True) or {}
        child_id = require_non_empty(data.get("childId"), "childId")
        return result_response(state.record_arrival(child_id), 201)

    @app.route("/api/attendance/<attendance_id>/departure", methods=["POST"], endpoint="attendance_departure")
    @auth
    def record_departure(attendance_id: str):
        return result_response(state.record_departure(attendance_id))

    @app.route("/api/attendance/absence", methods=["POST"], endpoint="attendance_absence")
    @auth
    def declare_absence():
        data = request.get_json(silent=True) or {}
        child_id = require_non_empty(data.get("childId"), "childId")
        day = optional_iso_date(data.get("date"), "date")
        return result_response(state.declare_absence(child_id, day=day, notes=data.get("notes")), 201)

    @app.route("/api/attendance/<attendance_id>", methods=["PATCH"], endpoint="attendance_update")
    @auth
    def update_attendance(attendance_id: str):
        return result_response(state.update_attendance(attendance_id, request.get_json(silent=True) or {}))

    @app.route("/api/attendance/<attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @auth
    def delete_attendance(attendance_id: str):
        return result_response(state.delete_attendance(attendance_id))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @auth
    def attendance_today():
        day = optional_iso_date(request.args.get("date"), "date") or today()
        search = request.args.get("search", "")
        records = state.attendance()
        children = state.children()
        summary = state.summary_for(day)
        return ok(
            {
                "summary": summary.to_dict(),
                "timeline": [e.to_dict() for e in day_timeline(records, children, day)],
                "awaitingArrival": [
                    c.to_dict() for c in filter_by_name(children_awaiting_arrival(records, children, day), search)
                ],
                "canDeclareAbsent": [
                    c.to_dict() for c in filter_by_name(children_without_record(records, children, day), search)
                ],
                "states": {c.child_id: summary.classify(c.child_id).value for c in children},
            }
        )

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @auth
    def attendance_report():
        view = require_in(request.args.get("view") or ReportView.DAY.value, ReportView, "view")
        selected = optional_iso_date(request.args.get("date"), "date") or today()
        report = build_report(
            state.attendance(),
            state.children(),
            view=view,
            selected=selected,
            child_id=request.args.get("child_id") or None,
        )
        return ok(report.to_dict())
