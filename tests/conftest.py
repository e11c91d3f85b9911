from __future__ import annotations

from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from src.childcare_dashboard.childcare_dashboard.auth.model import StaffAccount
from src.childcare_dashboard.childcare_dashboard.container import assemble_container
from src.childcare_dashboard.childcare_dashboard.main import create_app
from src.childcare_dashboard.childcare_dashboard.storage.photo_storage import LocalPhotoStorage

from tests.fakes import (
    InMemoryAccounts,
    InMemoryAttendance,
    InMemoryChildren,
    InMemoryContracts,
    InMemoryDailyRecords,
    InMemoryMessages,
    make_child,
)

STAFF_EMAIL = "staff@example.com"
STAFF_PASSWORD = "secret-pass"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 12, 8, 30)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def children_repo() -> InMemoryChildren:
    repo = InMemoryChildren()
    repo.insert(make_child("c1", "Emma", "Martin"))
    repo.insert(make_child("c2", "Lucas", "Bernard"))
    return repo


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def contracts_repo() -> InMemoryContracts:
    return InMemoryContracts()


@pytest.fixture
def container(tmp_path, children_repo, attendance_repo, contracts_repo):
    accounts = InMemoryAccounts()
    accounts.rows[STAFF_EMAIL] = StaffAccount(
        account_id="a1",
        email=STAFF_EMAIL,
        full_name="Sophie Martin",
        password_hash=generate_password_hash(STAFF_PASSWORD),
    )
    return assemble_container(
        accounts_repo=accounts,
        children_repo=children_repo,
        contracts_repo=contracts_repo,
        attendance_repo=attendance_repo,
        daily_records_repo=InMemoryDailyRecords(),
        messages_repo=InMemoryMessages(),
        photo_storage=LocalPhotoStorage(str(tmp_path), "http://testserver/uploads"),
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in_client(client):
    resp = client.post("/api/auth/login", json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    assert resp.status_code == 200
    return client
