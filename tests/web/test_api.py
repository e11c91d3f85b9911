import io

from PIL import Image

from src.childcare_dashboard.childcare_dashboard.common.datetime_utils import today
from src.childcare_dashboard.childcare_dashboard.core.exceptions import StoreError


def test_endpoints_require_login(client):
    for path in ("/api/children", "/api/dashboard", "/api/attendance/today", "/api/messages"):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.get_json()["success"] is False


def test_login_logout_and_session(client):
    bad = client.post("/api/auth/login", json={"email": "staff@example.com", "password": "nope"})
    assert bad.status_code == 401

    ok = client.post("/api/auth/login", json={"email": "staff@example.com", "password": "secret-pass"})
    assert ok.status_code == 200
    assert client.get("/api/auth/session").get_json()["data"]["email"] == "staff@example.com"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/session").get_json()["data"] is None
    assert client.get("/api/children").status_code == 401


def test_children_list_and_search(logged_in_client):
    data = logged_in_client.get("/api/children").get_json()["data"]
    assert {c["id"] for c in data} == {"c1", "c2"}
    assert all("age" in c for c in data)

    found = logged_in_client.get("/api/children?search=luc").get_json()["data"]
    assert [c["firstName"] for c in found] == ["Lucas"]

    assert logged_in_client.get("/api/children/missing").status_code == 404


def test_add_and_update_child(logged_in_client):
    resp = logged_in_client.post(
        "/api/children",
        json={"firstName": "Jade", "lastName": "Moreau", "birthDate": "2023-05-02", "gender": "female"},
    )
    assert resp.status_code == 201
    child_id = resp.get_json()["data"]["id"]

    patched = logged_in_client.patch(f"/api/children/{child_id}", json={"firstName": "Jeanne"})
    assert patched.get_json()["data"]["firstName"] == "Jeanne"

    invalid = logged_in_client.post("/api/children", json={"firstName": "A", "lastName": "B", "gender": "x"})
    assert invalid.status_code == 400
    assert invalid.get_json() == {"success": False, "message": "Gender must be one of: male, female"}


def test_arrival_departure_flow(logged_in_client):
    arrival = logged_in_client.post("/api/attendance/arrival", json={"childId": "c1"})
    assert arrival.status_code == 201
    record_id = arrival.get_json()["data"]["id"]

    again = logged_in_client.post("/api/attendance/arrival", json={"childId": "c1"})
    assert again.status_code == 400

    absent = logged_in_client.post("/api/attendance/absence", json={"childId": "c2"})
    assert absent.status_code == 201

    today_view = logged_in_client.get("/api/attendance/today").get_json()["data"]
    assert today_view["summary"]["presentCount"] == 1
    assert today_view["summary"]["absentCount"] == 1
    assert today_view["states"] == {"c1": "present", "c2": "absent"}
    assert today_view["canDeclareAbsent"] == []
    assert [c["id"] for c in today_view["awaitingArrival"]] == ["c2"]

    departure = logged_in_client.post(f"/api/attendance/{record_id}/departure")
    assert departure.status_code == 200
    assert departure.get_json()["data"]["status"] == "departed"

    assert logged_in_client.post("/api/attendance/missing/departure").status_code == 404


def test_update_and_delete_attendance(logged_in_client):
    record_id = logged_in_client.post("/api/attendance/arrival", json={"childId": "c1"}).get_json()["data"]["id"]

    patched = logged_in_client.patch(
        f"/api/attendance/{record_id}",
        json={"arrivalTime": "07:45", "departureTime": "12:15", "status": "departed"},
    )
    assert patched.status_code == 200
    assert patched.get_json()["data"]["departureTime"] == "12:15:00"

    report = logged_in_client.get(f"/api/attendance/report?view=day&date={today().isoformat()}").get_json()["data"]
    assert report["total"] == "4h30"
    assert report["rows"][0]["childName"] == "Emma Martin"

    assert logged_in_client.delete(f"/api/attendance/{record_id}").status_code == 200
    assert logged_in_client.delete(f"/api/attendance/{record_id}").status_code == 404


def test_report_rejects_unknown_view(logged_in_client):
    assert logged_in_client.get("/api/attendance/report?view=year").status_code == 400


def test_store_failure_maps_to_502(logged_in_client, attendance_repo):
    attendance_repo.fail_writes = True
    resp = logged_in_client.post("/api/attendance/arrival", json={"childId": "c1"})
    assert resp.status_code == 502
    assert "attendance.insert" not in resp.get_json()["message"]
    assert logged_in_client.get("/api/attendance").get_json()["data"] == []


def test_contract_calendar_and_toggle(logged_in_client):
    created = logged_in_client.post(
        "/api/contracts",
        json={
            "childId": "c1",
            "startDate": "2025-01-06",
            "status": "active",
            "regularSchedule": [{"dayOfWeek": 1, "startTime": "08:30", "endTime": "16:30"}],
        },
    )
    assert created.status_code == 201
    contract_id = created.get_json()["data"]["id"]

    toggled = logged_in_client.post(f"/api/contracts/{contract_id}/calendar/toggle", json={"date": "2025-03-10"})
    assert toggled.get_json()["data"]["monthlySchedule"] == [
        {"date": "2025-03-10", "status": "planned", "startTime": "08:30", "endTime": "16:30"}
    ]

    calendar = logged_in_client.get(f"/api/contracts/{contract_id}/calendar?year=2025&month=3").get_json()["data"]
    assert calendar["previous"] == {"year": 2025, "month": 2}
    assert calendar["cells"][5]["date"] == "2025-03-01"
    assert calendar["cells"][5 + 9]["entry"]["startTime"] == "08:30"

    planning = logged_in_client.get("/api/planning/global?year=2025&month=3").get_json()["data"]
    events = [e for c in planning["cells"] for e in c["events"]]
    assert events == [{"childId": "c1", "childName": "Emma Martin", "startTime": "08:30", "endTime": "16:30"}]

    assert logged_in_client.post(f"/api/contracts/{contract_id}/calendar/toggle", json={"date": "bad"}).status_code == 400
    assert logged_in_client.get(f"/api/contracts/{contract_id}/calendar?month=13").status_code == 400
    assert logged_in_client.delete(f"/api/contracts/{contract_id}").status_code == 200
    assert logged_in_client.get(f"/api/contracts/{contract_id}/calendar").status_code == 404


def test_daily_records_messages_and_dashboard(logged_in_client):
    created = logged_in_client.post(
        "/api/daily-records",
        json={
            "childId": "c1",
            "mood": "happy",
            "meals": {"lunch": {"time": "11:45", "description": "pasta", "eaten": "well"}},
            "activities": ["painting"],
        },
    )
    assert created.status_code == 201

    listed = logged_in_client.get("/api/daily-records?feed=1").get_json()["data"]
    assert len(listed["records"]) == 1
    assert listed["feed"][0]["heading"] == "Today"

    posted = logged_in_client.post("/api/messages", json={"body": "Emma painted today", "childId": "c1"})
    assert posted.status_code == 201
    assert posted.get_json()["data"]["authorName"] == "Sophie Martin"
    assert logged_in_client.post("/api/messages", json={"body": ""}).status_code == 400

    messages = logged_in_client.get("/api/messages").get_json()["data"]
    assert [m["body"] for m in messages] == ["Emma painted today"]

    dashboard = logged_in_client.get("/api/dashboard").get_json()["data"]
    assert dashboard["today"]["expectedCount"] == 2
    assert dashboard["activityFeed"][0]["entries"][0]["type"] == "activity"
    assert {a["key"] for a in dashboard["quickActions"]} >= {"arrival", "absence", "message"}

    refreshed = logged_in_client.post("/api/state/refresh").get_json()["data"]
    assert refreshed["dailyRecords"] == 1


def test_child_photo_upload(logged_in_client, tmp_path):
    buf = io.BytesIO()
    Image.new("RGB", (2, 2)).save(buf, format="JPEG")
    buf.seek(0)

    resp = logged_in_client.post(
        "/api/children/c1/photo",
        data={"photo": (buf, "emma.jpg")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    photo = resp.get_json()["data"]["photo"]
    assert photo.startswith("http://testserver/uploads/photos/public/")
    assert photo.endswith(".jpg")
    assert len(list((tmp_path / "photos" / "public").iterdir())) == 1


def _jpeg(name="photo.jpg"):
    buf = io.BytesIO()
    Image.new("RGB", (2, 2)).save(buf, format="JPEG")
    buf.seek(0)
    return buf, name


def _stored_photos(tmp_path):
    folder = tmp_path / "photos" / "public"
    return list(folder.iterdir()) if folder.exists() else []


def test_message_with_photo_is_stored_after_validation(logged_in_client, tmp_path):
    resp = logged_in_client.post(
        "/api/messages",
        data={"body": "Look at this", "childId": "c1", "photo": _jpeg()},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["photoUrl"].startswith("http://testserver/uploads/photos/public/")
    assert len(_stored_photos(tmp_path)) == 1


def test_rejected_message_leaves_no_photo(logged_in_client, tmp_path):
    empty_body = logged_in_client.post(
        "/api/messages",
        data={"body": "", "photo": _jpeg()},
        content_type="multipart/form-data",
    )
    assert empty_body.status_code == 400

    unknown_child = logged_in_client.post(
        "/api/messages",
        data={"body": "Hello", "childId": "ghost", "photo": _jpeg()},
        content_type="multipart/form-data",
    )
    assert unknown_child.status_code == 404

    assert _stored_photos(tmp_path) == []


def test_message_photo_is_removed_when_save_fails(logged_in_client, container, tmp_path):
    container.messages_repo.fail_writes = True

    resp = logged_in_client.post(
        "/api/messages",
        data={"body": "Hello", "photo": _jpeg()},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 502
    assert _stored_photos(tmp_path) == []


def test_child_photo_is_removed_when_update_fails(logged_in_client, children_repo, monkeypatch, tmp_path):
    def failing_update(child_id, changes):
        raise StoreError("children.update", ConnectionError("store unreachable"))

    monkeypatch.setattr(children_repo, "update", failing_update)

    resp = logged_in_client.post(
        "/api/children/c1/photo",
        data={"photo": _jpeg("emma.jpg")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 502
    assert _stored_photos(tmp_path) == []
