"""User account actions: activate, deactivate, approve, reject and delete."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from models import db
from models.project import Project
from models.task import Task
from models.team import Team, TeamMember
from models.user import User
from utils.auth import parse_id, require_role
from utils.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError

users_bp = Blueprint("users", __name__)

USER_ACTIONS = ("activate", "deactivate", "approve", "reject", "delete")
PAST_TENSE = {
    "activate": "activated",
    "deactivate": "deactivated",
    "approve": "approved",
    "reject": "rejected",
}


def _apply_action(user: User, action: str) -> None:
    if action == "activate":
        if user.is_active:
            raise ValidationError("User is already active.")
        user.is_active = True
    elif action == "deactivate":
        if not user.is_active:
            raise ValidationError("User is already inactive.")
        user.is_active = False
    elif action == "approve":
        if user.is_approved:
            raise ValidationError("User is already approved.")
        user.is_approved = True
    elif action == "reject":
        if not user.is_approved and not user.is_active:
            raise ValidationError("User is already rejected.")
        user.is_approved = False
        user.is_active = False


def _delete_user(user: User) -> None:
    """Remove a user, detaching rows that merely reference them."""

    if Project.query.filter_by(owner_id=user.id).first() is not None:
        raise ConflictError("User owns projects; reassign them before deleting.")

    try:
        TeamMember.query.filter_by(user_id=user.id).delete(synchronize_session=False)
        Task.query.filter_by(assigned_to_id=user.id).update(
            {Task.assigned_to_id: None}, synchronize_session=False
        )
        Team.query.filter_by(team_lead_id=user.id).update(
            {Team.team_lead_id: None}, synchronize_session=False
        )
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


@users_bp.route("/<user_id>/<action>", methods=["PUT"])
def perform_action(user_id: str, action: str):
    """Apply an account action on behalf of an admin or team lead."""

    claims = require_role("admin", "team_lead")
    target_id = parse_id(user_id, "user")

    if action not in USER_ACTIONS:
        raise ValidationError("Invalid action.")

    user = db.session.get(User, target_id)
    if user is None:
        raise NotFoundError("User not found.")

    if target_id == claims["userId"] and action != "deactivate":
        raise ValidationError("Cannot perform this action on yourself.")
    if claims["role"] != "admin" and user.role == "admin":
        raise ForbiddenError("Cannot modify admin users.")

    if action == "delete":
        if claims["role"] != "admin":
            raise ForbiddenError("Only admins can delete users.")
        _delete_user(user)
        current_app.logger.info("User %s deleted by %s", target_id, claims["userId"])
        return jsonify({"message": "User deleted successfully"})

    _apply_action(user, action)
    db.session.commit()
    current_app.logger.info("User %s %s by %s", target_id, PAST_TENSE[action], claims["userId"])

    return jsonify(
        {"message": f"User {PAST_TENSE[action]} successfully", "user": user.to_dict()}
    )
