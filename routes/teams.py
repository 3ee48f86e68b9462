"""Teams blueprint: listing, creation, details, membership and cascade delete."""

from __future__ import annotations

import math
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from models import db
from models.project import Project
from models.team import Team, TeamMember, delete_team_cascade
from models.user import User
from utils.auth import current_claims, login_required, parse_id, require_role
from utils.errors import ConflictError, InternalError, NotFoundError, ValidationError
from utils.request_validation import id_list, optional_text, parse_json_request

teams_bp = Blueprint("teams", __name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _positive_int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a positive integer.") from None
    if value < 1:
        raise ValidationError(f"{name} must be a positive integer.")
    return value


def _get_team_or_404(team_id: int) -> Team:
    team = db.session.get(Team, team_id)
    if team is None:
        raise NotFoundError("Team not found.")
    return team


@teams_bp.route("", methods=["GET"])
def list_teams():
    """Return active teams, newest first, one page at a time."""

    require_role("admin", message="Only admins can view teams.")

    page = _positive_int_arg("page", 1)
    limit = min(_positive_int_arg("limit", DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

    query = Team.query.filter(Team.is_active.is_(True))
    total = query.count()
    teams = (
        query.order_by(Team.created_at.desc(), Team.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return jsonify(
        {
            "teams": [team.to_dict(include_members=True) for team in teams],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }
    )


@teams_bp.route("", methods=["POST"])
def create_team():
    """Create a team led by the caller."""

    claims = require_role(
        "admin", "team_lead", message="Only admins or team leads can create teams."
    )
    payload = parse_json_request(request)
    name = optional_text(payload.get("name"), "name", max_length=100)
    if not name:
        raise ValidationError("Team name is required.")
    description = optional_text(payload.get("description"), "description")

    if Team.query.filter_by(name=name).first() is not None:
        raise ConflictError(
            "A team with this name already exists. Please choose a different name."
        )

    team = Team(
        name=name,
        description=description,
        is_active=True,
        team_lead_id=claims["userId"],
    )
    db.session.add(team)
    db.session.commit()

    return (
        jsonify({"team": team.to_dict(), "message": "Team created successfully"}),
        HTTPStatus.CREATED,
    )


@teams_bp.route("/<team_id>/details", methods=["GET"])
@login_required
def team_details(team_id: str):
    """Return a team with its lead, members and projects (latest update first)."""

    team = _get_team_or_404(parse_id(team_id, "team"))
    projects = (
        Project.query.filter_by(team_id=team.id)
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .all()
    )

    return jsonify(
        {
            "team": team.to_dict(include_members=True),
            "projects": [project.to_summary() for project in projects],
            "projectCount": len(projects),
        }
    )


@teams_bp.route("/<team_id>/cascade", methods=["DELETE"])
def delete_team(team_id: str):
    """Delete a team with every project, task and membership that depends on it."""

    require_role("admin", message="Only admins can delete teams.")
    team = _get_team_or_404(parse_id(team_id, "team"))

    try:
        deleted_projects = delete_team_cascade(team)
    except Exception as exc:
        current_app.logger.exception("Cascade delete of team %s failed", team_id)
        raise InternalError("Internal server error.") from exc

    return jsonify(
        {
            "message": "Team and all associated projects deleted successfully",
            "deletedProjects": deleted_projects,
        }
    )


@teams_bp.route("/<team_id>/members", methods=["GET"])
@login_required
def list_members(team_id: str):
    """Return the users belonging to a team."""

    team = _get_team_or_404(parse_id(team_id, "team"))
    return jsonify({"members": [member.to_summary() for member in team.members]})


@teams_bp.route("/<team_id>/members", methods=["PUT"])
def replace_members(team_id: str):
    """Replace a team's whole membership with ``userIds``."""

    require_role("admin", message="Only admins can update team members.")
    team = _get_team_or_404(parse_id(team_id, "team"))
    payload = parse_json_request(request, allow_empty=True)
    user_ids = id_list(payload.get("userIds"), "userIds")

    if user_ids:
        existing = {
            row.id for row in User.query.with_entities(User.id).filter(User.id.in_(user_ids))
        }
        invalid = [user_id for user_id in user_ids if user_id not in existing]
        if invalid:
            raise ValidationError(
                "Invalid user IDs: {}".format(", ".join(str(user_id) for user_id in invalid))
            )

    try:
        TeamMember.query.filter_by(team_id=team.id).delete(synchronize_session=False)
        db.session.add_all(
            TeamMember(team_id=team.id, user_id=user_id, role="member", is_active=True)
            for user_id in user_ids
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({"message": "Team members updated successfully"})


@teams_bp.route("/<team_id>/members", methods=["DELETE"])
def remove_member(team_id: str):
    """Remove one user from a team."""

    require_role("admin", message="Only admins can remove members.")
    team = _get_team_or_404(parse_id(team_id, "team"))
    payload = parse_json_request(request)
    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise ValidationError("userId must be an integer.")

    removed = TeamMember.query.filter_by(team_id=team.id, user_id=user_id).delete(
        synchronize_session=False
    )
    db.session.commit()
    if not removed:
        raise NotFoundError("User is not a member of this team.")

    return jsonify({"message": "Member removed successfully"})


def is_team_member(team_id: int, user_id: int) -> bool:
    return (
        TeamMember.query.filter_by(team_id=team_id, user_id=user_id, is_active=True).first()
        is not None
    )


def caller_can_see_team(team_id: int) -> bool:
    claims = current_claims()
    return claims["role"] == "admin" or is_team_member(team_id, claims["userId"])
