from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from talenttrack.database.seed import ensure_admin_user
from talenttrack.main import create_app


@pytest.fixture
def app(settings, container):
    return create_app(settings, container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username, password):
    resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['data']['token']}"}


@pytest.fixture
def admin_headers(client, container):
    ensure_admin_user(container.db, username="admin", email="admin@example.com", password="admin-pw")
    return _login(client, "admin", "admin-pw")


@pytest.fixture
def employee_headers(client, container):
    container.users_repo.create(
        {
            "username": "emp",
            "email": "emp@example.com",
            "password_hash": generate_password_hash("emp-pw"),
            "role": "employee",
        }
    )
    return _login(client, "emp", "emp-pw")


def test_startup_connects_and_syncs(app, container):
    status = container.db.get_status()

    assert status.is_connected is True
    assert container.db.query("SELECT count(*) AS n FROM users") == [{"n": 0}]


def test_health_and_status(client):
    health = client.get("/health")
    status = client.get("/api/v1/status")

    assert health.status_code == 200
    assert health.get_json()["status"] == "OK"
    assert status.get_json()["database"]["is_connected"] is True
    assert "config" not in status.get_json()["database"]
    assert client.get("/api/v1").get_json()["message"] == "TalentTrack API v1"


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.get_json() == {
        "success": False,
        "error": {"message": "Route /api/v1/nope not found", "code": "NOT_FOUND_ERROR"},
    }


def test_protected_route_needs_token(client):
    resp = client.get("/api/v1/employees")

    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "AUTHENTICATION_ERROR"


def test_garbage_token_is_token_error(client):
    resp = client.get("/api/v1/employees", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "TOKEN_ERROR"


def test_wrong_password(client, admin_headers):
    resp = client.post("/api/v1/auth/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_me_and_refresh(client, admin_headers):
    me = client.get("/api/v1/auth/me", headers=admin_headers).get_json()["data"]
    login = client.post("/api/v1/auth/login", json={"username": "admin@example.com", "password": "admin-pw"})
    refresh_token = login.get_json()["data"]["refresh_token"]
    refreshed = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})

    assert me["user"]["username"] == "admin"
    assert "password_hash" not in me["user"]
    assert "delete" in me["permissions"]["employees"]
    assert refreshed.status_code == 200
    assert client.post("/api/v1/auth/refresh", json={}).status_code == 400


def test_employee_crud(client, admin_headers):
    payload = {
        "employee_id": "E-100",
        "first_name": "Ana",
        "last_name": "Silva",
        "email": "ana@example.com",
        "hire_date": "2025-01-06",
    }

    created = client.post("/api/v1/employees", json=payload, headers=admin_headers)
    emp_id = created.get_json()["data"]["id"]
    listed = client.get("/api/v1/employees?limit=10", headers=admin_headers).get_json()["data"]
    updated = client.put(f"/api/v1/employees/{emp_id}", json={"position": "Analyst"}, headers=admin_headers)
    duplicate = client.post("/api/v1/employees", json=payload, headers=admin_headers)
    deleted = client.delete(f"/api/v1/employees/{emp_id}", headers=admin_headers)
    missing = client.get(f"/api/v1/employees/{emp_id}", headers=admin_headers)

    assert created.status_code == 201
    assert listed["total"] == 1
    assert listed["items"][0]["employee_id"] == "E-100"
    assert updated.get_json()["data"]["position"] == "Analyst"
    assert duplicate.status_code == 409
    assert deleted.status_code == 200
    assert missing.status_code == 404
    assert missing.get_json()["error"]["message"] == f"Employee with ID {emp_id} not found"


def test_missing_required_field(client, admin_headers):
    resp = client.post("/api/v1/departments", json={"description": "no name"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == {"message": "name is required", "code": "VALIDATION_ERROR", "field": "name"}


def test_employee_role_is_limited(client, employee_headers):
    read = client.get("/api/v1/employees", headers=employee_headers)
    delete = client.delete("/api/v1/employees/1", headers=employee_headers)
    payroll = client.get("/api/v1/payroll", headers=employee_headers)

    assert read.status_code == 200
    assert delete.status_code == 403
    assert payroll.status_code == 403
    assert payroll.get_json()["error"]["code"] == "AUTHORIZATION_ERROR"


def test_leave_workflow(client, admin_headers, employee_headers):
    created = client.post(
        "/api/v1/leaves",
        json={"employee_id": 1, "type": "sick", "start_date": "2026-03-02", "end_date": "2026-03-03"},
        headers=employee_headers,
    )
    leave_id = created.get_json()["data"]["id"]

    self_approve = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=employee_headers)
    approved = client.post(f"/api/v1/leaves/{leave_id}/approve", headers=admin_headers)
    again = client.post(f"/api/v1/leaves/{leave_id}/reject", json={"rejection_reason": "late"}, headers=admin_headers)

    assert created.status_code == 201
    assert created.get_json()["data"]["days_requested"] == 2
    assert self_approve.status_code == 403
    assert approved.get_json()["data"]["status"] == "approved"
    assert again.status_code == 422
    assert again.get_json()["error"]["code"] == "BUSINESS_LOGIC_ERROR"


def test_errors_are_written_to_error_log(client, container):
    client.get("/api/v1/employees")

    files = list(container.error_logger.log_dir.glob("error-*.log"))
    assert len(files) == 1
    assert "AuthenticationError" in files[0].read_text(encoding="utf-8")


def test_enumerated_field_is_validated(client, admin_headers):
    resp = client.post(
        "/api/v1/employees",
        json={
            "employee_id": "E-200",
            "first_name": "Bo",
            "last_name": "Lee",
            "email": "bo@example.com",
            "hire_date": "2025-01-06",
            "status": "retired",
        },
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"]["field"] == "status"


def test_status_shows_connection_details_to_staff(client, admin_headers):
    database = client.get("/api/v1/status", headers=admin_headers).get_json()["database"]

    assert database["config"]["dialect"] == "sqlite"
    assert database["retry_count"] == 0


def test_user_listing_is_staff_only(client, admin_headers, employee_headers):
    as_admin = client.get("/api/v1/users?role=employee", headers=admin_headers)
    as_employee = client.get("/api/v1/users", headers=employee_headers)

    assert [u["username"] for u in as_admin.get_json()["data"]] == ["emp"]
    assert as_employee.status_code == 403


@pytest.mark.parametrize("body", [[{"name": "x"}], "Ops", 42])
def test_non_object_json_body_is_rejected(client, admin_headers, body):
    resp = client.post("/api/v1/departments", json=body, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == {"message": "Request body must be a JSON object", "code": "VALIDATION_ERROR"}


def test_leave_put_cannot_approve(client, admin_headers):
    created = client.post(
        "/api/v1/leaves",
        json={"employee_id": 1, "type": "vacation", "start_date": "2026-03-02", "end_date": "2026-03-06"},
        headers=admin_headers,
    )
    leave_id = created.get_json()["data"]["id"]

    resp = client.put(f"/api/v1/leaves/{leave_id}", json={"status": "approved"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"]["field"] == "status"
