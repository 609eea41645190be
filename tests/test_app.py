from __future__ import annotations

import pytest

from src.school_admin.school_admin.main import create_app


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app()
    with app.test_client() as c:
        yield c


def _login(client, teacher_id, password):
    resp = client.post("/session", json={"teacherId": teacher_id, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def test_startup_without_backends_runs_on_local_tier(client):
    status = client.get("/sync/status").get_json()

    assert status["activeSource"] == "LOCAL"
    assert status["dataLoaded"] is True
    assert status["tiers"]["SQL"] == "UNCONFIGURED"
    assert status["tiers"]["DOCUMENT"] == "UNCONFIGURED"
    assert status["teachers"] == 3


def test_login_failure_and_anonymous_access(client):
    resp = client.post("/session", json={"teacherId": "t2", "password": "nope"})
    assert resp.status_code == 401

    assert client.get("/leaves").status_code == 401
    assert client.get("/session").status_code == 401


def test_submit_then_director_approves(client):
    _login(client, "t2", "123456")
    resp = client.post(
        "/leaves",
        json={"type": "Sick", "startDate": "2024-06-03", "endDate": "2024-06-04", "reason": "flu"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Saved offline"
    leave_id = body["record"]["id"]
    assert body["record"]["status"] == "Pending"

    # A plain teacher cannot decide.
    assert client.post(f"/leaves/{leave_id}/approve").status_code == 403
    client.delete("/session")

    _login(client, "dir_001", "password")
    pending = client.get("/leaves").get_json()["pending"]
    assert leave_id in {r["id"] for r in pending}
    assert "seed_leave_2" in {r["id"] for r in pending}

    resp = client.post(f"/leaves/{leave_id}/approve")
    assert resp.status_code == 200
    record = resp.get_json()["record"]
    assert record["status"] == "Approved"
    assert record["directorSignature"] == "นายอำนวย การดี"

    assert client.post(f"/leaves/{leave_id}/reject").status_code == 400

    report = client.get("/reports/leaves?start=2024-06-03&end=2024-06-07").get_json()
    assert report["workingDays"] == 5
    top = report["summary"][0]
    assert top["teacher_id"] == "t2"
    assert top["totalLeaveDays"] == 2
    assert top["present_days"] == 3


def test_submit_validation_error_is_400(client):
    _login(client, "t2", "123456")

    resp = client.post("/leaves", json={"type": "Late", "startDate": "2024-06-03", "reason": "traffic"})

    assert resp.status_code == 400
    assert "Start time" in resp.get_json()["error"]


def test_stats_are_private_unless_viewer_can_view_all(client):
    _login(client, "t2", "123456")

    assert client.get("/leaves/stats/1111111111111").status_code == 403
    own = client.get("/leaves/stats/t2?start=2023-10-01&end=2023-10-31").get_json()
    assert own["late"] == 1
    assert own["totalRequests"] == 1
    assert client.get("/reports/leaves").status_code == 403


def test_admin_deletes_request(client):
    _login(client, "1111111111111", "password")

    resp = client.delete("/leaves/seed_leave_2")

    assert resp.status_code == 200
    assert resp.get_json()["deleted"] is True
    assert client.delete("/leaves/seed_leave_2").status_code == 404


def test_report_window_at_calendar_edges(client):
    _login(client, "dir_001", "password")

    last = client.get("/reports/leaves?start=9999-12-31&end=9999-12-31")
    assert last.status_code == 200
    assert last.get_json()["workingDays"] == 1

    first = client.get("/reports/leaves?end=0001-01-05")
    assert first.status_code == 200
    assert first.get_json()["start"] == "0001-01-01"
    assert first.get_json()["workingDays"] == 5


def test_non_string_dates_are_400(client):
    _login(client, "t2", "123456")

    resp = client.post("/leaves", json={"type": "Sick", "startDate": 20240603, "reason": "flu"})

    assert resp.status_code == 400
    assert "startDate" in resp.get_json()["error"]


def test_register_then_finish_first_login(client):
    resp = client.post("/register", json={"schoolId": "31030019", "teacherId": "3100000000001", "name": "ครูใหม่ ใจงาม"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Saved offline"
    assert body["teacher"]["isFirstLogin"] is True

    # Registration signs the new teacher in.
    assert client.get("/session").get_json()["id"] == "3100000000001"

    resp = client.post(
        "/profile/first-login",
        json={"newPassword": "s3cret!", "confirmPassword": "s3cret!", "position": "ครูผู้ช่วย"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["teacher"]["isFirstLogin"] is False
    assert client.post("/profile/first-login", json={}).status_code == 400

    client.delete("/session")
    login = _login(client, "3100000000001", "s3cret!")
    assert login["isFirstLogin"] is False
    assert client.post("/register", json={"schoolId": "31030019", "teacherId": "3100000000001", "name": "x"}).status_code == 400


def test_register_unknown_school_is_404(client):
    resp = client.post("/register", json={"schoolId": "99999999", "teacherId": "3100000000001", "name": "x"})

    assert resp.status_code == 404
    assert client.get("/session").status_code == 401


def test_profile_update_requires_login_and_saves_signature(client):
    assert client.put("/profile", json={"name": "x", "position": "ครู"}).status_code == 401

    _login(client, "t2", "123456")
    resp = client.put(
        "/profile",
        json={"name": "ครูวิภา รักเรียน", "position": "ครูชำนาญการ", "signatureBase64": "data:image/png;base64,AAA"},
    )

    assert resp.status_code == 200
    teacher = resp.get_json()["teacher"]
    assert teacher["position"] == "ครูชำนาญการ"
    assert teacher["hasSignature"] is True
    assert client.get("/session").get_json()["position"] == "ครูชำนาญการ"
    assert client.put("/profile", json={"name": "", "position": "ครู"}).status_code == 400
