"""Projects blueprint: project lifecycle plus per-project task listing and creation."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from models import db
from models.project import (
    DEFAULT_PROJECT_STATUSES,
    PROJECT_PRIORITIES,
    Project,
    delete_project_cascade,
)
from models.task import DEFAULT_TASK_STATUSES, Task
from models.team import Team, TeamMember
from routes.tasks import check_deadline, validate_assignee
from routes.teams import caller_can_see_team
from utils.auth import current_claims, login_required, parse_id, require_role
from utils.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from utils.request_validation import (
    non_negative_int,
    optional_date,
    optional_text,
    parse_json_request,
    status_list,
)

projects_bp = Blueprint("projects", __name__)


def _get_project_or_404(project_id: int) -> Project:
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found.")
    return project


def _get_visible_project(raw_id: str) -> Project:
    project = _get_project_or_404(parse_id(raw_id, "project"))
    if not caller_can_see_team(project.team_id):
        raise ForbiddenError("You are not a member of this project's team.")
    return project


def _team_id(value: object) -> int:
    if not value:
        raise ValidationError("Team ID is required.")
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError("Team ID must be an integer.")
    if db.session.get(Team, value) is None:
        raise NotFoundError("Team not found.")
    return value


def _priority(value: object) -> str:
    priority = value or "medium"
    if priority not in PROJECT_PRIORITIES:
        raise ValidationError("priority must be one of: low, medium, high.")
    return priority


def _check_date_range(project: Project) -> None:
    if project.start_date and project.end_date and project.end_date < project.start_date:
        raise ValidationError("endDate must not be before startDate.")


@projects_bp.route("", methods=["GET"])
def list_projects():
    """Admins see every project; everyone else only their teams' projects."""

    claims = current_claims()
    query = Project.query
    if claims["role"] != "admin":
        member_teams = db.select(TeamMember.team_id).where(
            TeamMember.user_id == claims["userId"], TeamMember.is_active.is_(True)
        )
        query = query.filter(Project.team_id.in_(member_teams))

    projects = query.order_by(Project.updated_at.desc(), Project.id.desc()).all()
    return jsonify([project.to_dict() for project in projects])


@projects_bp.route("", methods=["POST"])
def create_project():
    """Create a project under an existing team."""

    claims = require_role(
        "admin", "team_lead", message="Only admins or team leads can create projects."
    )
    payload = parse_json_request(request)

    name = optional_text(payload.get("name"), "name", max_length=200)
    if not name:
        raise ValidationError("Project name is required.")
    team_id = _team_id(payload.get("teamId"))

    custom_statuses = payload.get("customStatuses")
    if custom_statuses:
        statuses = status_list(custom_statuses, "customStatuses")
    else:
        statuses = DEFAULT_PROJECT_STATUSES

    project = Project(
        name=name,
        description=optional_text(payload.get("description"), "description"),
        status_title=optional_text(payload.get("status"), "status", max_length=50)
        or "planning",
        priority=_priority(payload.get("priority")),
        statuses=statuses,
        start_date=optional_date(payload.get("startDate"), "startDate"),
        end_date=optional_date(payload.get("endDate"), "endDate"),
        team_id=team_id,
        owner_id=claims["userId"],
    )
    _check_date_range(project)
    db.session.add(project)
    db.session.commit()

    return jsonify({"project": project.to_dict()}), HTTPStatus.CREATED


@projects_bp.route("/<project_id>", methods=["GET"])
@login_required
def get_project(project_id: str):
    """Return a project with its owner and its team's members."""

    project = _get_visible_project(project_id)
    data = project.to_dict()
    data["owner"] = project.owner.to_summary() if project.owner else None
    data["members"] = [member.to_summary() for member in project.team.members]
    return jsonify({"project": data})


@projects_bp.route("/<project_id>", methods=["PATCH"])
def update_project(project_id: str):
    """Edit a project, including moving it to another status."""

    require_role(
        "admin", "team_lead", message="Only admins or team leads can update projects."
    )
    project = _get_visible_project(project_id)
    payload = parse_json_request(request)

    if "name" in payload:
        name = optional_text(payload["name"], "name", max_length=200)
        if not name:
            raise ValidationError("Project name is required.")
        project.name = name
    if "description" in payload:
        project.description = optional_text(payload["description"], "description")
    if "priority" in payload:
        project.priority = _priority(payload["priority"])
    if "customStatuses" in payload:
        project.statuses = status_list(payload["customStatuses"], "customStatuses")
    if "startDate" in payload:
        project.start_date = optional_date(payload["startDate"], "startDate")
    if "endDate" in payload:
        project.end_date = optional_date(payload["endDate"], "endDate")
    _check_date_range(project)

    if "teamId" in payload:
        team_id = _team_id(payload["teamId"])
        if not caller_can_see_team(team_id):
            raise ForbiddenError("You are not a member of the target team.")
        project.team_id = team_id

    status = payload.get("status", payload.get("statusTitle"))
    if status is not None:
        if not isinstance(status, str) or status not in project.status_titles():
            raise ValidationError("Invalid project status.")
        project.status_title = status

    db.session.commit()
    current_app.logger.info("Project %s updated (status %s)", project.id, project.status_title)

    return jsonify({"message": "Project updated successfully", "project": project.to_dict()})


@projects_bp.route("/<project_id>", methods=["DELETE"])
def delete_project(project_id: str):
    """Delete a project together with its tasks."""

    require_role("admin", message="Only admins can delete projects.")
    project = _get_project_or_404(parse_id(project_id, "project"))

    try:
        deleted_tasks = delete_project_cascade(project)
    except Exception as exc:
        current_app.logger.exception("Delete of project %s failed", project_id)
        raise InternalError("Internal server error.") from exc

    return jsonify({"message": "Project deleted successfully", "deletedTasks": deleted_tasks})


@projects_bp.route("/<project_id>/tasks", methods=["GET"])
def list_project_tasks(project_id: str):
    project = _get_visible_project(project_id)
    tasks = Task.query.filter_by(project_id=project.id).order_by(Task.id.asc()).all()
    return jsonify({"tasks": [task.to_dict() for task in tasks]})


@projects_bp.route("/<project_id>/tasks", methods=["POST"])
def create_task(project_id: str):
    """Add a task to a project the caller can see."""

    project = _get_visible_project(project_id)
    payload = parse_json_request(request)

    title = optional_text(payload.get("title"), "title", max_length=200)
    if not title:
        raise ValidationError("Task title is required.")

    deadline = optional_date(payload.get("deadline"), "deadline")
    check_deadline(project, deadline)

    task = Task(
        title=title,
        description=optional_text(payload.get("description"), "description"),
        status_title=optional_text(payload.get("status"), "status", max_length=50) or "todo",
        statuses=DEFAULT_TASK_STATUSES,
        deadline=deadline,
        expected_time=non_negative_int(payload.get("expectedTime"), "expectedTime"),
        spent_time=non_negative_int(payload.get("spentTime"), "spentTime"),
        project_id=project.id,
        assigned_to_id=validate_assignee(payload.get("assignedToId")),
    )
    db.session.add(task)
    db.session.commit()

    return jsonify({"task": task.to_dict()}), HTTPStatus.CREATED
