"""Tests for project and task endpoints."""

from __future__ import annotations

from models import db
from models.project import Project
from models.task import Task
from models.team import Team, TeamMember


def _team_with_member(app, name: str, member_id: int | None = None) -> int:
    with app.app_context():
        team = Team(name=name)
        db.session.add(team)
        db.session.flush()
        if member_id is not None:
            db.session.add(TeamMember(team_id=team.id, user_id=member_id))
        db.session.commit()
        return team.id


def test_team_lead_creates_project_with_default_statuses(app, client, make_user, auth_headers):
    lead_id = make_user("lead@example.com", role="team_lead")
    team_id = _team_with_member(app, "Builders", lead_id)

    response = client.post(
        "/api/projects",
        json={"name": "Launch", "teamId": team_id, "startDate": "2024-05-01"},
        headers=auth_headers(lead_id),
    )

    assert response.status_code == 201
    project = response.get_json()["project"]
    assert project["status"] == "planning"
    assert project["owner_id"] == lead_id
    assert project["start_date"] == "2024-05-01"
    assert [status["title"] for status in project["statuses"]][:2] == ["planning", "active"]


def test_project_creation_validation(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    employee_id = make_user("emp@example.com")
    team_id = _team_with_member(app, "Checks")

    headers = auth_headers(admin_id)
    assert client.post("/api/projects", json={"teamId": team_id}, headers=headers).status_code == 400
    assert client.post("/api/projects", json={"name": "x"}, headers=headers).status_code == 400
    assert client.post(
        "/api/projects", json={"name": "x", "teamId": 999}, headers=headers
    ).status_code == 404
    assert client.post(
        "/api/projects",
        json={"name": "x", "teamId": team_id, "startDate": "2024-05-02", "endDate": "2024-05-01"},
        headers=headers,
    ).status_code == 400
    assert client.post(
        "/api/projects", json={"name": "x", "teamId": team_id}, headers=auth_headers(employee_id)
    ).status_code == 403


def test_non_admins_only_see_their_teams_projects(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    member_id = make_user("member@example.com")
    mine = _team_with_member(app, "Mine", member_id)
    theirs = _team_with_member(app, "Theirs")

    for name, team_id in (("Visible", mine), ("Hidden", theirs)):
        client.post(
            "/api/projects", json={"name": name, "teamId": team_id}, headers=auth_headers(admin_id)
        )

    member_view = client.get("/api/projects", headers=auth_headers(member_id)).get_json()
    admin_view = client.get("/api/projects", headers=auth_headers(admin_id)).get_json()

    assert [project["name"] for project in member_view] == ["Visible"]
    assert {project["name"] for project in admin_view} == {"Visible", "Hidden"}


def test_member_adds_and_lists_tasks(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    member_id = make_user("member@example.com")
    outsider_id = make_user("outsider@example.com")
    team_id = _team_with_member(app, "Taskers", member_id)
    project_id = client.post(
        "/api/projects", json={"name": "Work", "teamId": team_id}, headers=auth_headers(admin_id)
    ).get_json()["project"]["id"]

    created = client.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "Write docs", "assignedToId": member_id, "expectedTime": 90},
        headers=auth_headers(member_id),
    )
    assert created.status_code == 201
    task = created.get_json()["task"]
    assert task["status"] == "todo"
    assert task["expected_time"] == 90

    listed = client.get(f"/api/projects/{project_id}/tasks", headers=auth_headers(member_id))
    assert [item["title"] for item in listed.get_json()["tasks"]] == ["Write docs"]

    blocked = client.get(f"/api/projects/{project_id}/tasks", headers=auth_headers(outsider_id))
    assert blocked.status_code == 403


def test_task_validation(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    team_id = _team_with_member(app, "Validators")
    project_id = client.post(
        "/api/projects", json={"name": "Checks", "teamId": team_id}, headers=auth_headers(admin_id)
    ).get_json()["project"]["id"]
    headers = auth_headers(admin_id)

    assert client.post(f"/api/projects/{project_id}/tasks", json={"description": "x"},
                       headers=headers).status_code == 400
    assert client.post(f"/api/projects/{project_id}/tasks",
                       json={"title": "t", "assignedToId": 999}, headers=headers).status_code == 400
    assert client.post(f"/api/projects/{project_id}/tasks",
                       json={"title": "t", "expectedTime": -1}, headers=headers).status_code == 400
    assert client.post("/api/projects/999/tasks", json={"title": "t"},
                       headers=headers).status_code == 404


def _project(client, admin_id, auth_headers, team_id, **fields) -> int:
    response = client.post(
        "/api/projects",
        json={"name": "Workflow", "teamId": team_id, **fields},
        headers=auth_headers(admin_id),
    )
    assert response.status_code == 201
    return response.get_json()["project"]["id"]


def test_member_reads_project_with_team_members(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    member_id = make_user("member@example.com")
    outsider_id = make_user("outsider@example.com")
    team_id = _team_with_member(app, "Readers", member_id)
    project_id = _project(client, admin_id, auth_headers, team_id)

    response = client.get(f"/api/projects/{project_id}", headers=auth_headers(member_id))

    assert response.status_code == 200
    project = response.get_json()["project"]
    assert project["owner"]["id"] == admin_id
    assert [member["id"] for member in project["members"]] == [member_id]
    assert client.get(
        f"/api/projects/{project_id}", headers=auth_headers(outsider_id)
    ).status_code == 403
    assert client.get("/api/projects/999", headers=auth_headers(admin_id)).status_code == 404
    assert client.get("/api/projects/abc", headers=auth_headers(admin_id)).status_code == 400
    assert client.get(f"/api/projects/{project_id}").status_code == 401


def test_team_lead_moves_project_through_statuses(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    lead_id = make_user("lead@example.com", role="team_lead")
    team_id = _team_with_member(app, "Movers", lead_id)
    project_id = _project(client, admin_id, auth_headers, team_id)

    response = client.patch(
        f"/api/projects/{project_id}",
        json={"statusTitle": "active", "priority": "high", "endDate": "2024-12-31"},
        headers=auth_headers(lead_id),
    )

    assert response.status_code == 200
    project = response.get_json()["project"]
    assert project["status"] == "active"
    assert project["priority"] == "high"
    assert project["end_date"] == "2024-12-31"


def test_project_update_rejects_bad_input_and_roles(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    employee_id = make_user("emp@example.com")
    outside_lead_id = make_user("lead@example.com", role="team_lead")
    team_id = _team_with_member(app, "Strict", employee_id)
    project_id = _project(client, admin_id, auth_headers, team_id)
    url = f"/api/projects/{project_id}"
    headers = auth_headers(admin_id)

    assert client.patch(url, json={"status": "shipping"}, headers=headers).status_code == 400
    assert client.patch(
        url, json={"startDate": "2024-05-02", "endDate": "2024-05-01"}, headers=headers
    ).status_code == 400
    assert client.patch(url, json={"teamId": 999}, headers=headers).status_code == 404
    assert client.patch(
        url, json={"status": "active"}, headers=auth_headers(employee_id)
    ).status_code == 403
    assert client.patch(
        url, json={"status": "active"}, headers=auth_headers(outside_lead_id)
    ).status_code == 403

    unchanged = client.get(url, headers=headers).get_json()["project"]
    assert unchanged["status"] == "planning"
    assert unchanged["start_date"] is None


def test_custom_statuses_define_allowed_project_statuses(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    team_id = _team_with_member(app, "Custom")
    project_id = _project(
        client,
        admin_id,
        auth_headers,
        team_id,
        customStatuses=[{"id": 1, "title": "draft", "color": "#000000"}],
        status="draft",
    )
    url = f"/api/projects/{project_id}"
    headers = auth_headers(admin_id)

    assert client.patch(url, json={"status": "active"}, headers=headers).status_code == 400
    assert client.patch(
        url, json={"customStatuses": [{"title": ""}]}, headers=headers
    ).status_code == 400


def test_admin_deletes_project_with_its_tasks(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    lead_id = make_user("lead@example.com", role="team_lead")
    team_id = _team_with_member(app, "Cleanup", lead_id)
    doomed = _project(client, admin_id, auth_headers, team_id)
    kept = _project(client, admin_id, auth_headers, team_id)
    for project_id in (doomed, doomed, kept):
        client.post(
            f"/api/projects/{project_id}/tasks", json={"title": "t"}, headers=auth_headers(admin_id)
        )

    assert client.delete(f"/api/projects/{doomed}", headers=auth_headers(lead_id)).status_code == 403

    response = client.delete(f"/api/projects/{doomed}", headers=auth_headers(admin_id))

    assert response.status_code == 200
    assert response.get_json() == {
        "message": "Project deleted successfully",
        "deletedTasks": 2,
    }
    with app.app_context():
        assert db.session.get(Project, doomed) is None
        assert Task.query.filter_by(project_id=doomed).count() == 0
        assert Task.query.filter_by(project_id=kept).count() == 1
    assert client.delete(f"/api/projects/{doomed}", headers=auth_headers(admin_id)).status_code == 404


def test_task_deadline_must_fall_inside_project_dates(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    team_id = _team_with_member(app, "Deadlines")
    project_id = _project(
        client, admin_id, auth_headers, team_id, startDate="2024-05-01", endDate="2024-05-31"
    )
    url = f"/api/projects/{project_id}/tasks"
    headers = auth_headers(admin_id)

    assert client.post(url, json={"title": "early", "deadline": "2024-04-30"},
                       headers=headers).status_code == 400
    assert client.post(url, json={"title": "late", "deadline": "2024-06-01"},
                       headers=headers).status_code == 400
    created = client.post(url, json={"title": "ok", "deadline": "2024-05-15"}, headers=headers)
    assert created.status_code == 201
    assert [status["title"] for status in created.get_json()["task"]["statuses"]] == [
        "todo",
        "inProgress",
        "testing",
        "done",
    ]
