"""Tests for account administration."""

from __future__ import annotations

import pytest

from models import db
from models.project import Project
from models.team import Team, TeamMember
from models.user import User


def test_admin_approves_pending_user_who_can_then_log_in(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    pending_id = make_user("pending@example.com", "PendingPass1", approved=False)

    response = client.put(f"/api/users/{pending_id}/approve", headers=auth_headers(admin_id))

    assert response.status_code == 200
    assert response.get_json()["user"]["is_approved"] is True

    login = client.post(
        "/api/auth/login", json={"email": "pending@example.com", "password": "PendingPass1"}
    )
    assert login.status_code == 200


def test_reject_marks_user_unapproved_and_inactive(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    user_id = make_user("member@example.com")

    response = client.put(f"/api/users/{user_id}/reject", headers=auth_headers(admin_id))

    assert response.status_code == 200
    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.is_approved is False
        assert user.is_active is False


@pytest.mark.parametrize(
    "action, status_code",
    [("approve", 400), ("activate", 400), ("explode", 400)],
)
def test_redundant_or_unknown_actions_are_rejected(client, make_user, auth_headers, action, status_code):
    admin_id = make_user("admin@example.com", role="admin")
    user_id = make_user("member@example.com")

    response = client.put(f"/api/users/{user_id}/{action}", headers=auth_headers(admin_id))

    assert response.status_code == status_code


def test_users_cannot_act_on_themselves_except_deactivate(client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")

    blocked = client.put(f"/api/users/{admin_id}/reject", headers=auth_headers(admin_id))
    allowed = client.put(f"/api/users/{admin_id}/deactivate", headers=auth_headers(admin_id))

    assert blocked.status_code == 400
    assert allowed.status_code == 200


def test_team_lead_cannot_modify_admin_or_delete(client, make_user, auth_headers):
    lead_id = make_user("lead@example.com", role="team_lead")
    admin_id = make_user("admin@example.com", role="admin")
    user_id = make_user("member@example.com")

    assert client.put(
        f"/api/users/{admin_id}/deactivate", headers=auth_headers(lead_id)
    ).status_code == 403
    assert client.put(
        f"/api/users/{user_id}/delete", headers=auth_headers(lead_id)
    ).status_code == 403


def test_employee_cannot_use_actions(client, make_user, auth_headers):
    employee_id = make_user("emp@example.com")
    other_id = make_user("other@example.com")

    response = client.put(f"/api/users/{other_id}/deactivate", headers=auth_headers(employee_id))

    assert response.status_code == 403


def test_admin_deletes_user_and_memberships(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    user_id = make_user("leaving@example.com")
    with app.app_context():
        team = Team(name="Crew", team_lead_id=user_id)
        db.session.add(team)
        db.session.flush()
        db.session.add(TeamMember(team_id=team.id, user_id=user_id))
        db.session.commit()
        team_id = team.id

    response = client.put(f"/api/users/{user_id}/delete", headers=auth_headers(admin_id))

    assert response.status_code == 200
    with app.app_context():
        assert db.session.get(User, user_id) is None
        assert TeamMember.query.filter_by(user_id=user_id).count() == 0
        assert db.session.get(Team, team_id).team_lead_id is None


def test_deleting_project_owner_conflicts(app, client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    owner_id = make_user("owner@example.com", role="team_lead")
    with app.app_context():
        team = Team(name="Owned")
        db.session.add(team)
        db.session.flush()
        db.session.add(Project(name="Mine", team_id=team.id, owner_id=owner_id))
        db.session.commit()

    response = client.put(f"/api/users/{owner_id}/delete", headers=auth_headers(admin_id))

    assert response.status_code == 409


def test_admin_lists_pending_users_and_edits_role(client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    pending_id = make_user("waiting@example.com", approved=False)
    make_user("approved@example.com")

    listing = client.get("/api/admin/users?pending=true", headers=auth_headers(admin_id))
    assert [user["id"] for user in listing.get_json()["users"]] == [pending_id]

    update = client.put(
        f"/api/admin/users/{pending_id}",
        json={"role": "teamLead", "isApproved": True},
        headers=auth_headers(admin_id),
    )
    assert update.status_code == 200
    user = update.get_json()["user"]
    assert user["role"] == "team_lead"
    assert user["is_approved"] is True


def test_admin_user_edit_validates_role(client, make_user, auth_headers):
    admin_id = make_user("admin@example.com", role="admin")
    user_id = make_user("someone@example.com")

    response = client.put(
        f"/api/admin/users/{user_id}", json={"role": "overlord"}, headers=auth_headers(admin_id)
    )

    assert response.status_code == 400
