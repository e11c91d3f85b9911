from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import login_required
from ..common.datetime_utils import today
from ..common.responses import error_response, ok, result_response
from ..common.validators import require_iso_date
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .calendar import build_global_month_grid, build_month_grid, planned_events_by_date, shift_month


def _year_month_args() -> tuple[int, int]:
    current = today()
    try:
        year = int(request.args.get("year") or current.year)
        month = int(request.args.get("month") or current.month)
    except ValueError:
        raise ValidationError("year and month must be numbers")
    return year, month


def _navigation(year: int, month: int) -> dict:
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return {
        "year": year,
        "month": month,
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month},
    }


def register(app: Flask, container: Container) -> None:
    state = container.state
    auth = login_required(container.sessions)

    @app.route("/api/contracts", methods=["GET"], endpoint="contracts_list")
    @auth
    def list_contracts():
        child_id = request.args.get("child_id")
        contracts = [c for c in state.contracts() if not child_id or c.child_id == child_id]
        return ok([c.to_dict() for c in contracts])

    @app.route("/api/contracts", methods=["POST"], endpoint="contracts_add")
    @auth
    def add_contract():
        return result_response(state.add_contract(request.get_json(silent=True) or {}), 201)

    @app.route("/api/contracts/<contract_id>", methods=["PATCH"], endpoint="contracts_update")
    @auth
    def update_contract(contract_id: str):
        return result_response(state.update_contract(contract_id, request.get_json(silent=True) or {}))

    @app.route("/api/contracts/<contract_id>", methods=["DELETE"], endpoint="contracts_delete")
    @auth
    def delete_contract(contract_id: str):
        return result_response(state.delete_contract(contract_id))

    @app.route("/api/contracts/regular-entry", methods=["GET"], endpoint="contracts_regular_entry")
    @auth
    def new_regular_entry():
        return ok(container.contract_service.new_regular_entry().to_dict())

    @app.route("/api/contracts/<contract_id>/calendar", methods=["GET"], endpoint="contracts_calendar")
    @auth
    def contract_calendar(contract_id: str):
        contract = state.get_contract(contract_id)
        if contract is None:
            return error_response(NotFoundError(f"Contract {contract_id} not found"))
        year, month = _year_month_args()
        cells = build_month_grid(year, month, contract.monthly_schedule)
        payload = _navigation(year, month)
        payload["cells"] = [c.to_dict() for c in cells]
        return ok(payload)

    @app.route("/api/contracts/<contract_id>/calendar/toggle", methods=["POST"], endpoint="contracts_calendar_toggle")
    @auth
    def toggle_calendar_day(contract_id: str):
        data = request.get_json(silent=True) or {}
        clicked = require_iso_date(data.get("date"), "date")
        return result_response(state.toggle_contract_day(contract_id, clicked))

    @app.route("/api/planning/global", methods=["GET"], endpoint="planning_global")
    @auth
    def global_planning():
        year, month = _year_month_args()
        events = planned_events_by_date(state.contracts(), state.children())
        payload = _navigation(year, month)
        payload["cells"] = [c.to_dict() for c in build_global_month_grid(year, month, events)]
        return ok(payload)
