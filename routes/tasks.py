"""Tasks blueprint: listing, reading, updating and deleting tasks."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify, request

from models import db
from models.project import Project
from models.task import Task
from models.team import TeamMember
from models.user import User
from routes.teams import caller_can_see_team
from utils.auth import current_claims, login_required, parse_id
from utils.errors import ForbiddenError, NotFoundError, ValidationError
from utils.request_validation import (
    non_negative_int,
    optional_date,
    optional_text,
    parse_json_request,
    status_list,
)

tasks_bp = Blueprint("tasks", __name__)


def check_deadline(project: Project, deadline: date | None) -> None:
    """Reject a deadline outside the project's start and end dates."""

    if deadline is None:
        return
    if project.start_date and deadline < project.start_date:
        raise ValidationError("Task deadline is before the project start date.")
    if project.end_date and deadline > project.end_date:
        raise ValidationError("Task deadline is after the project end date.")


def validate_assignee(value: object) -> int | None:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError("assignedToId must be an integer.")
    if db.session.get(User, value) is None:
        raise ValidationError("Assigned user does not exist.")
    return value


def _get_visible_task(task_id: int) -> Task:
    task = db.session.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found.")
    if not caller_can_see_team(task.project.team_id):
        raise ForbiddenError("You are not a member of this task's team.")
    return task


def _move_to_project(task: Task, project_id: object) -> None:
    if not isinstance(project_id, int) or isinstance(project_id, bool):
        raise ValidationError("projectId must be an integer.")
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found.")
    if not caller_can_see_team(project.team_id):
        raise ForbiddenError("You are not a member of this project's team.")
    task.project = project


def _apply_updates(task: Task, payload: dict) -> None:
    """Copy the updatable fields present in ``payload`` onto ``task``."""

    if "title" in payload:
        title = optional_text(payload["title"], "title", max_length=200)
        if not title:
            raise ValidationError("Task title is required.")
        task.title = title
    if "description" in payload:
        task.description = optional_text(payload["description"], "description")
    if "projectId" in payload:
        _move_to_project(task, payload["projectId"])
    if "statuses" in payload:
        task.statuses = status_list(payload["statuses"], "statuses")

    status = payload.get("status", payload.get("statusTitle"))
    if status is not None:
        if not isinstance(status, str) or status not in task.allowed_statuses():
            raise ValidationError("Invalid task status.")
        task.status_title = status

    for key in ("dueDate", "deadline"):
        if key in payload:
            task.deadline = optional_date(payload[key], key)
    if "dueDate" in payload or "deadline" in payload or "projectId" in payload:
        check_deadline(task.project, task.deadline)

    if "expectedTime" in payload:
        task.expected_time = non_negative_int(payload["expectedTime"], "expectedTime")
    if "spentTime" in payload:
        task.spent_time = non_negative_int(payload["spentTime"], "spentTime")
    if "assignedToId" in payload:
        task.assigned_to_id = validate_assignee(payload["assignedToId"])


def _update_response(task: Task):
    db.session.commit()
    current_app.logger.info("Task %s updated (status %s)", task.id, task.status_title)
    return jsonify({"message": "Task updated successfully", "task": task.to_dict()})


def _delete(task: Task):
    task_id = task.id
    db.session.delete(task)
    db.session.commit()
    current_app.logger.info("Task %s deleted", task_id)
    return jsonify({"message": "Task deleted successfully"})


@tasks_bp.route("", methods=["GET"])
def list_tasks():
    """Return tasks newest first, optionally for one ``projectId``."""

    claims = current_claims()
    query = Task.query

    raw_project_id = request.args.get("projectId")
    if raw_project_id:
        query = query.filter(Task.project_id == parse_id(raw_project_id, "project"))

    if claims["role"] != "admin":
        member_teams = db.select(TeamMember.team_id).where(
            TeamMember.user_id == claims["userId"], TeamMember.is_active.is_(True)
        )
        visible_projects = db.select(Project.id).where(Project.team_id.in_(member_teams))
        query = query.filter(Task.project_id.in_(visible_projects))

    tasks = query.order_by(Task.created_at.desc(), Task.id.desc()).all()
    return jsonify({"tasks": [task.to_dict() for task in tasks]})


@tasks_bp.route("", methods=["PATCH"])
@login_required
def patch_task():
    """Update the task named by ``id`` in the body."""

    payload = parse_json_request(request)
    task_id = payload.get("id")
    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 1:
        raise ValidationError("Task ID is required.")

    task = _get_visible_task(task_id)
    _apply_updates(task, payload)
    return _update_response(task)


@tasks_bp.route("", methods=["DELETE"])
@login_required
def delete_task_by_query():
    task = _get_visible_task(parse_id(request.args.get("id"), "task"))
    return _delete(task)


@tasks_bp.route("/<task_id>", methods=["GET"])
@login_required
def get_task(task_id: str):
    task = _get_visible_task(parse_id(task_id, "task"))
    data = task.to_dict()
    data["assignedTo"] = task.assigned_to.to_summary() if task.assigned_to else None
    return jsonify({"task": data})


@tasks_bp.route("/<task_id>", methods=["PUT"])
@login_required
def update_task(task_id: str):
    """Update a task; moving it between statuses is the board workflow."""

    task = _get_visible_task(parse_id(task_id, "task"))
    _apply_updates(task, parse_json_request(request))
    return _update_response(task)


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@login_required
def delete_task(task_id: str):
    task = _get_visible_task(parse_id(task_id, "task"))
    return _delete(task)
