"""
Test HTTP API

Exercises the routers through FastAPI's TestClient:
- Login and bearer tokens
- Timesheet lifecycle over HTTP and error-to-status mapping
- Admin analytics and the manager team view
"""

from conftest import TEST_PASSWORD

from app.services.auth import decode_access_token

TEST_ENTRY = {
    "date": "2024-03-01",
    "task_description": "Quarterly report",
    "hours_worked": 8,
    "notes": "",
}


def _create(test_client, headers, project_id, **overrides):
    payload = {**TEST_ENTRY, "project_id": str(project_id), **overrides}
    return test_client.post("/api/v1/timesheets/", json=payload, headers=headers)


def test_health(test_client):
    assert test_client.get("/health").json() == {"ok": True}


def test_login_and_me(test_client, people):
    """Test a token from /login authenticates /me"""
    response = test_client.post(
        "/api/v1/auth/login", json={"email": "EMPLOYEE@test.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["role"] == "employee"

    me = test_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "employee@test.com"


def test_login_failures(test_client, people):
    response = test_client.post("/api/v1/auth/login", json={"email": "employee@test.com", "password": "nope"})
    assert response.status_code == 401
    assert test_client.get("/api/v1/auth/me").status_code == 401
    assert test_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_non_ascii_token_is_unauthorized(test_client, people):
    assert decode_access_token("a.1.\xe9") is None
    response = test_client.get("/api/v1/auth/me", headers={"Authorization": b"Bearer a.1.\xe9"})
    assert response.status_code == 401


def test_timesheet_lifecycle_over_http(test_client, people, projects, as_user):
    """Test create, submit, reject with comment, and the follow-up refusals"""
    created = _create(test_client, as_user(people.employee), projects.active.id)
    assert created.status_code == 201
    entry = created.json()
    assert entry["status"] == "draft"
    assert entry["hours_worked"] == 8
    entry_id = entry["id"]

    submitted = test_client.post(f"/api/v1/timesheets/{entry_id}/submit", headers=as_user(people.employee))
    assert submitted.status_code == 200
    assert submitted.json()["submitted_at"] is not None

    edit = test_client.put(
        f"/api/v1/timesheets/{entry_id}", json={"notes": "late"}, headers=as_user(people.employee)
    )
    assert edit.status_code == 403

    foreign = test_client.post(f"/api/v1/timesheets/{entry_id}/approve", headers=as_user(people.manager2))
    assert foreign.status_code == 403

    admin = test_client.post(f"/api/v1/timesheets/{entry_id}/approve", headers=as_user(people.admin))
    assert admin.status_code == 403

    rejected = test_client.post(
        f"/api/v1/timesheets/{entry_id}/reject",
        json={"comment": "missing project code"},
        headers=as_user(people.manager),
    )
    assert rejected.status_code == 200
    body = rejected.json()
    assert body["timesheet"]["status"] == "rejected"
    assert body["timesheet"]["reviewed_by"] == str(people.manager.id)
    assert body["comment"]["comment"] == "missing project code"
    assert body["comment_error"] is None

    again = test_client.post(f"/api/v1/timesheets/{entry_id}/submit", headers=as_user(people.employee))
    assert again.status_code == 409

    listed = test_client.get("/api/v1/timesheets/", headers=as_user(people.employee)).json()
    assert len(listed) == 1
    assert listed[0]["comments"][0]["commenter_id"] == str(people.manager.id)

    comments = test_client.get(f"/api/v1/timesheets/{entry_id}/comments", headers=as_user(people.employee))
    assert [c["comment"] for c in comments.json()] == ["missing project code"]


def test_validation_errors_map_to_400(test_client, people, projects, as_user):
    assert _create(test_client, as_user(people.employee), projects.active.id, hours_worked=25).status_code == 400
    assert _create(test_client, as_user(people.employee), projects.active.id, hours_worked=0).status_code == 400
    assert _create(test_client, as_user(people.employee), projects.inactive.id).status_code == 400
    assert _create(test_client, as_user(people.employee), projects.active.id, hours_worked=24).status_code == 201


def test_managers_cannot_log_time(test_client, people, projects, as_user):
    assert _create(test_client, as_user(people.manager), projects.active.id).status_code == 403


def test_visibility_over_http(test_client, people, projects, as_user):
    entry = _create(test_client, as_user(people.employee), projects.active.id).json()

    assert test_client.get(f"/api/v1/timesheets/{entry['id']}", headers=as_user(people.employee2)).status_code == 404
    assert test_client.get(f"/api/v1/timesheets/{entry['id']}", headers=as_user(people.manager)).status_code == 200
    assert test_client.get("/api/v1/timesheets/", headers=as_user(people.manager2)).json() == []
    assert len(test_client.get("/api/v1/timesheets/", headers=as_user(people.admin)).json()) == 1


def test_delete_draft(test_client, people, projects, as_user):
    entry = _create(test_client, as_user(people.employee), projects.active.id).json()
    assert test_client.delete(f"/api/v1/timesheets/{entry['id']}", headers=as_user(people.employee2)).status_code == 403
    assert test_client.delete(f"/api/v1/timesheets/{entry['id']}", headers=as_user(people.employee)).status_code == 200
    assert test_client.get("/api/v1/timesheets/", headers=as_user(people.employee)).json() == []


def test_admin_endpoints_require_admin(test_client, people, as_user):
    assert test_client.get("/api/v1/users/", headers=as_user(people.manager)).status_code == 403
    assert test_client.get("/api/v1/analytics/", headers=as_user(people.employee)).status_code == 403
    assert test_client.get("/api/v1/team/members", headers=as_user(people.admin)).status_code == 403


def test_user_management(test_client, people, as_user):
    created = test_client.post(
        "/api/v1/users/",
        json={
            "email": "new@test.com",
            "password": "s3cret!!",
            "full_name": "New Hire",
            "role": "employee",
            "manager_id": str(people.manager.id),
        },
        headers=as_user(people.admin),
    )
    assert created.status_code == 201
    user_id = created.json()["id"]

    users = test_client.get("/api/v1/users/", headers=as_user(people.admin)).json()
    assert user_id in [u["id"] for u in users]

    managers = test_client.get("/api/v1/users/managers", headers=as_user(people.admin)).json()
    assert {m["email"] for m in managers} == {"manager@test.com", "manager2@test.com"}

    bad_manager = test_client.put(
        f"/api/v1/users/{user_id}",
        json={"manager_id": str(people.employee.id)},
        headers=as_user(people.admin),
    )
    assert bad_manager.status_code == 400

    assert test_client.delete(f"/api/v1/users/{user_id}", headers=as_user(people.admin)).status_code == 200
    login = test_client.post("/api/v1/auth/login", json={"email": "new@test.com", "password": "s3cret!!"})
    assert login.status_code == 401


def test_projects_endpoints(test_client, people, projects, as_user):
    names = [p["name"] for p in test_client.get("/api/v1/projects/", headers=as_user(people.employee)).json()]
    assert names == ["Apollo"]

    created = test_client.post(
        "/api/v1/projects/", json={"name": "Hermes"}, headers=as_user(people.admin)
    )
    assert created.status_code == 201
    assert test_client.post(
        "/api/v1/projects/", json={"name": "Nope"}, headers=as_user(people.employee)
    ).status_code == 403

    everything = test_client.get(
        "/api/v1/projects/", params={"include_inactive": True}, headers=as_user(people.admin)
    ).json()
    assert [p["name"] for p in everything] == ["Apollo", "Hermes", "Zeus"]


def test_analytics_and_team_views(test_client, people, projects, as_user):
    """Test approved hours roll up for admins and team counts for managers"""
    first = _create(test_client, as_user(people.employee), projects.active.id, hours_worked=6.5).json()
    _create(test_client, as_user(people.employee), projects.active.id, date="2024-03-02", hours_worked=2)
    test_client.post(f"/api/v1/timesheets/{first['id']}/submit", headers=as_user(people.employee))
    test_client.post(f"/api/v1/timesheets/{first['id']}/approve", headers=as_user(people.manager))

    data = test_client.get("/api/v1/analytics/", headers=as_user(people.admin)).json()
    assert data["total_hours"] == 6.5
    assert data["status_counts"] == {"draft": 1, "submitted": 0, "approved": 1, "rejected": 0}
    assert [p["name"] for p in data["hours_by_project"]] == ["Apollo"]
    assert [e["name"] for e in data["hours_by_employee"]] == ["Emery Employee"]

    filtered = test_client.get(
        "/api/v1/analytics/", params={"date_from": "2024-03-02"}, headers=as_user(people.admin)
    ).json()
    assert filtered["entries"] == 1
    assert filtered["hours_by_project"] == []

    overview = test_client.get("/api/v1/analytics/overview", headers=as_user(people.admin)).json()
    assert overview["employees"] == 2
    assert overview["managers"] == 2
    assert overview["active_projects"] == 1
    assert overview["total_hours"] == 6.5

    members = test_client.get("/api/v1/team/members", headers=as_user(people.manager)).json()
    assert [m["email"] for m in members] == ["employee@test.com"]

    team = test_client.get("/api/v1/team/overview", headers=as_user(people.manager)).json()
    assert team == {"team_size": 1, "pending": 0, "approved": 1, "rejected": 0}
