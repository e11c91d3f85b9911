from datetime import datetime

import pytest

from src.childcare_dashboard.childcare_dashboard.core.enums import AttendanceStatus
from src.childcare_dashboard.childcare_dashboard.core.exceptions import NotFoundError, StoreError, ValidationError


@pytest.fixture
def state(container):
    return container.state


def test_replica_loads_lazily(state, children_repo):
    assert {c.child_id for c in state.children()} == set(children_repo.rows)
    assert state.attendance() == ()


def test_successful_mutation_is_applied_locally(state, fixed_now):
    result = state.record_arrival("c1", now=fixed_now)

    assert result.ok
    assert result.value.status == AttendanceStatus.PRESENT
    assert state.get_attendance(result.value.attendance_id) == result.value
    assert state.summary_for(fixed_now.date()).is_present("c1")


def test_failed_store_call_leaves_replica_untouched(state, attendance_repo, fixed_now):
    arrival = state.record_arrival("c1", now=fixed_now)
    before = state.attendance()

    attendance_repo.fail_writes = True
    result = state.record_departure(arrival.value.attendance_id, now=fixed_now.replace(hour=17))

    assert not result.ok
    assert isinstance(result.error, StoreError)
    assert result.value is None
    assert state.attendance() == before
    assert state.summary_for(fixed_now.date()).is_present("c1")


def test_rejected_mutation_returns_typed_error(state, fixed_now):
    state.record_arrival("c1", now=fixed_now)
    again = state.record_arrival("c1", now=fixed_now)
    missing = state.delete_attendance("missing")

    assert isinstance(again.error, ValidationError)
    assert isinstance(missing.error, NotFoundError)
    assert again.operation == "attendance.arrival"


def test_departure_and_delete_update_replica(state, fixed_now):
    arrival = state.record_arrival("c1", now=fixed_now).value
    departed = state.record_departure(arrival.attendance_id, now=datetime(2025, 3, 12, 17, 0)).value

    assert state.get_attendance(arrival.attendance_id).departure_time == departed.departure_time
    assert state.summary_for(fixed_now.date()).departed_child_ids == {"c1"}

    assert state.delete_attendance(arrival.attendance_id).ok
    assert state.get_attendance(arrival.attendance_id) is None


def test_child_and_contract_mutations(state):
    child = state.add_child(first_name="Jade", last_name="Moreau", birth_date="2023-05-02", gender="female").value
    assert state.get_child(child.child_id) == child

    renamed = state.update_child(child.child_id, {"firstName": "Jeanne"})
    assert renamed.ok and state.get_child(child.child_id).first_name == "Jeanne"

    contract = state.add_contract({"childId": child.child_id, "startDate": "2025-01-06", "status": "active"}).value
    toggled = state.toggle_contract_day(contract.contract_id, datetime(2025, 3, 10).date())
    assert len(state.get_contract(contract.contract_id).monthly_schedule) == 1
    assert toggled.value.monthly_schedule == state.get_contract(contract.contract_id).monthly_schedule

    assert state.delete_contract(contract.contract_id).ok
    assert state.get_contract(contract.contract_id) is None


def test_lookups_of_unknown_ids_return_none(state):
    assert state.get_child("missing") is None
    assert state.get_contract("missing") is None
    assert state.get_attendance("missing") is None


def test_refresh_picks_up_external_changes(state, children_repo):
    from tests.fakes import make_child

    state.children()
    children_repo.insert(make_child("c3", "Noah", "Garcia"))
    assert state.get_child("c3") is None

    assert state.refresh().ok
    assert state.get_child("c3") is not None
