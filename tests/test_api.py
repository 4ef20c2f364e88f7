from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.emp_hr.emp_hr.container import assemble_container
from src.emp_hr.emp_hr.core.enums import Role
from src.emp_hr.emp_hr.main import create_app
from tests.fakes import (
    InMemoryAttendance,
    InMemoryLeaves,
    InMemoryNotifications,
    InMemoryShifts,
    InMemoryTraining,
    InMemoryUsers,
    InMemoryWeekOffs,
    make_employee,
)

SETTINGS = SimpleNamespace(SECRET_KEY="test-secret", DEFAULT_SHIFT="General", JWT_EXPIRES_MINUTES=60)


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    users = InMemoryUsers(
        make_employee(1, reporting_manager_id=5),
        make_employee(2),
        make_employee(5, role=Role.TEAMLEADER),
        make_employee(9, role=Role.ADMIN),
    )
    container = assemble_container(
        users_repo=users,
        shifts_repo=InMemoryShifts(),
        attendance_repo=InMemoryAttendance(),
        leaves_repo=InMemoryLeaves(),
        weekoffs_repo=InMemoryWeekOffs(),
        notifications_repo=InMemoryNotifications(),
        training_repo=InMemoryTraining(),
        settings=SETTINGS,
    )
    app = create_app(container=container)
    return app.test_client()


def login(client, employee_id: int) -> dict:
    resp = client.post(
        "/api/auth/login",
        json={"work_email": f"user{employee_id}@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def test_login_rejects_bad_password(client):
    resp = client.post("/api/auth/login", json={"work_email": "user1@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_protected_routes_need_a_token(client):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_me_returns_profile_without_password(client):
    resp = client.get("/api/users/me", headers=login(client, 1))
    user = resp.get_json()["user"]
    assert user["work_email"] == "user1@example.com"
    assert "password_hash" not in user


def test_check_in_then_out(client):
    headers = login(client, 1)

    resp = client.post("/api/attendance/check-in", json={"location": {"lat": 12.9, "lng": 77.6}}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["check_out"] is None

    second = client.post("/api/attendance/check-in", headers=headers)
    assert second.status_code == 409
    assert second.get_json()["message"] == "Already checked in today"
    assert client.get("/api/attendance/today", headers=headers).get_json()["state"] == "in_progress"

    resp = client.post("/api/attendance/check-out", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["check_out"] is not None
    assert client.post("/api/attendance/check-out", headers=headers).status_code == 400


def test_invalid_location_is_rejected(client):
    resp = client.post("/api/attendance/check-in", json={"location": {"lat": "north"}}, headers=login(client, 1))
    assert resp.status_code == 400


def test_duplicate_leave_is_a_conflict(client):
    headers = login(client, 1)
    body = {"date": "2099-01-05", "type": "unpaid", "reason": "family"}

    assert client.post("/api/leaves", json=body, headers=headers).status_code == 201
    resp = client.post("/api/leaves", json=body, headers=headers)
    assert resp.status_code == 409


def test_manager_approves_leave_and_employee_is_notified(client):
    employee = login(client, 1)
    leave_id = client.post(
        "/api/leaves", json={"date": "2099-01-05", "type": "unpaid", "reason": "family"}, headers=employee
    ).get_json()["leave"]["leave_id"]

    assert client.get("/api/leaves/pending", headers=employee).status_code == 403

    manager = login(client, 5)
    pending = client.get("/api/leaves/pending", headers=manager).get_json()["leaves"]
    assert [l["leave_id"] for l in pending] == [leave_id]

    resp = client.post(f"/api/leaves/{leave_id}/approve", headers=manager)
    assert resp.status_code == 200
    assert resp.get_json()["leave"]["status"] == "approved"

    feed = client.get("/api/notifications", headers=employee).get_json()
    assert feed["unread_count"] == 1
    assert feed["notifications"][0]["title"] == "Leave approved"


def test_admin_routes_are_admin_only(client):
    assert client.get("/api/admin/users", headers=login(client, 1)).status_code == 403
    resp = client.get("/api/admin/stats", headers=login(client, 9))
    assert resp.status_code == 200
    assert resp.get_json()["stats"]["total_users"] == 4


def test_csv_export_has_header_and_one_row_per_day(client):
    resp = client.get(
        "/api/reports/attendance.csv?start=2026-02-01&end=2026-02-04",
        headers=login(client, 1),
    )

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_1_20260201_20260204.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("date,employee_id,full_name")
    assert len(lines) == 5


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Not found"}
