from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from src.attendance_tracker.attendance_tracker.container import build_services
from src.attendance_tracker.attendance_tracker.core.exceptions import StoreError
from src.attendance_tracker.attendance_tracker.main import create_app

from tests.fakes import PASSWORD, InMemoryUsers

SERVICE_MODULE = "src.attendance_tracker.attendance_tracker.attendance.service"


@pytest.fixture
def client(users_repo, attendance_repo):
    container = build_services(users_repo=users_repo, attendance_repo=attendance_repo)
    app = create_app(settings_module="config.testing", container=container)
    return app.test_client()


@pytest.fixture
def clock(monkeypatch):
    state = {"now": datetime(2026, 1, 5, 9, 15, 0)}
    monkeypatch.setattr(f"{SERVICE_MODULE}.now_local", lambda: state["now"])
    return state


def login(client, user_id: int) -> dict:
    resp = client.post("/api/auth/login", json={"email": f"user{user_id}@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "OK"


def test_register_employee_and_read_profile(client):
    resp = client.post(
        "/api/auth/register",
        json={"full_name": "New Hire", "email": "hire@example.com", "password": "secret123", "role": "employee", "manager_id": 1},
    )
    body = resp.get_json()

    assert resp.status_code == 201
    assert body["success"] is True
    assert body["user"]["employee_id"] == "EMP021"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.get_json()["user"]["email"] == "hire@example.com"


def test_register_employee_without_manager_is_400(client):
    resp = client.post(
        "/api/auth/register",
        json={"full_name": "X", "email": "x@example.com", "password": "secret123", "role": "employee"},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Manager is required for employee registration"}


def test_managers_listing_is_public(client):
    resp = client.get("/api/auth/managers")

    assert [m["employee_id"] for m in resp.get_json()["managers"]] == ["MGR001", "MGR002"]


def test_login_with_wrong_password_is_401(client):
    resp = client.post("/api/auth/login", json={"email": "user10@example.com", "password": "nope-nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_missing_token_is_401(client):
    resp = client.get("/api/attendance/today")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_employee_cannot_use_manager_endpoints(client):
    resp = client.get("/api/attendance/all", headers=login(client, 10))

    assert resp.status_code == 403


def test_manager_cannot_check_in(client):
    resp = client.post("/api/attendance/checkin", headers=login(client, 1))

    assert resp.status_code == 403


def test_checkin_checkout_flow(client, clock):
    headers = login(client, 10)

    resp = client.post("/api/attendance/checkin", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "present"

    again = client.post("/api/attendance/checkin", headers=headers)
    assert again.status_code == 409
    assert again.get_json()["message"] == "Already checked in today"

    clock["now"] = datetime(2026, 1, 5, 13, 20, 0)
    out = client.post("/api/attendance/checkout", headers=headers)
    assert out.get_json()["total_hours"] == 4.08
    assert out.get_json()["status"] == "present"

    twice = client.post("/api/attendance/checkout", headers=headers)
    assert twice.status_code == 409
    assert twice.get_json()["message"] == "Already checked out today"

    today = client.get("/api/attendance/today", headers=headers).get_json()
    assert today["checked_out"] is True


def test_checkout_before_checkin_is_409(client, clock):
    resp = client.post("/api/attendance/checkout", headers=login(client, 10))

    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Please check in first"


def test_manager_scope_is_enforced(client, clock):
    client.post("/api/attendance/checkin", headers=login(client, 20))
    headers = login(client, 1)

    other = client.get("/api/attendance/employee/20", headers=headers)
    assert other.status_code == 403
    assert other.get_json()["message"] == "Employee not found or not under your management"

    own = client.get("/api/attendance/employee/10", headers=headers)
    assert own.status_code == 200
    assert own.get_json()["attendance"] == []


def test_manager_all_filters_by_status(client, clock):
    client.post("/api/attendance/checkin", headers=login(client, 10))
    clock["now"] = datetime(2026, 1, 5, 9, 50, 0)
    client.post("/api/attendance/checkin", headers=login(client, 11))

    headers = login(client, 1)
    late = client.get("/api/attendance/all?status=late", headers=headers).get_json()["attendance"]
    assert [r["employee_id"] for r in late] == ["EMP011"]

    bad = client.get("/api/attendance/all?status=bogus", headers=headers)
    assert bad.status_code == 400


def test_export_returns_csv_attachment(client, clock):
    client.post("/api/attendance/checkin", headers=login(client, 10))

    resp = client.get("/api/attendance/export", headers=login(client, 1))

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.headers["Content-Disposition"].startswith("attachment; filename=attendance-")
    assert resp.get_data(as_text=True).splitlines()[0].startswith("Employee ID,Name,Email")


def test_unknown_route_uses_json_error_shape(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize(
    "path, payload",
    [
        ("/api/auth/register", [1]),
        ("/api/auth/register", {"full_name": "X", "email": "x@example.com", "password": 1234567, "role": "manager"}),
        ("/api/auth/login", {"email": 42, "password": PASSWORD}),
        ("/api/auth/login", {"email": "user10@example.com", "password": ["secret123"]}),
    ],
)
def test_malformed_json_input_is_400(client, path, payload):
    resp = client.post(path, json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_malformed_token_is_401(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-real-token"})

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid token"}


def test_expired_token_is_401(client):
    with client.application.app_context():
        token = create_access_token(
            identity="10",
            additional_claims={"role": "employee", "email": "user10@example.com"},
            expires_delta=timedelta(seconds=-1),
        )

    resp = client.get("/api/attendance/today", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Token expired"}


class FailingUsers(InMemoryUsers):
    def get_by_email(self, email):
        raise StoreError("db down")


def test_store_error_is_500_without_detail(attendance_repo):
    container = build_services(users_repo=FailingUsers(), attendance_repo=attendance_repo)
    client = create_app(settings_module="config.testing", container=container).test_client()

    resp = client.post("/api/auth/login", json={"email": "user10@example.com", "password": PASSWORD})

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Server error"}
    assert "db down" not in resp.get_data(as_text=True)
