"""Admin blueprint: admin sign-in and account administration."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func

from models import db
from models.user import USER_ROLES, User
from utils.auth import parse_id, require_role
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.request_validation import normalize_email, optional_text, parse_json_request

from routes.auth import authenticate, login_response, read_credentials

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/login", methods=["POST"])
def admin_login():
    """Authenticate an administrator with a shorter-lived token."""

    email, password = read_credentials()
    user = authenticate(email, password, admin_only=True)
    return login_response(user, current_app.config["ADMIN_TOKEN_TTL"])


@admin_bp.route("/users", methods=["GET"])
def list_users():
    """List accounts, optionally only those awaiting approval."""

    require_role("admin", message="Only admins can list users.")

    query = User.query
    pending = (request.args.get("pending") or "").strip().lower()
    if pending in {"1", "true", "yes"}:
        query = query.filter(User.is_approved.is_(False))

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify({"users": [user.to_dict() for user in users], "total": len(users)})


@admin_bp.route("/users/<user_id>", methods=["PUT"])
def update_user(user_id: str):
    """Edit an account's profile, role, password or flags."""

    require_role("admin", message="Only admins can edit users.")
    target_id = parse_id(user_id, "user")
    payload = parse_json_request(request)

    user = db.session.get(User, target_id)
    if user is None:
        raise NotFoundError("User not found.")

    if "name" in payload:
        name = optional_text(payload.get("name"), "name", max_length=100)
        if not name:
            raise ValidationError("name must not be empty.")
        user.name = name

    if "email" in payload:
        email = normalize_email(payload.get("email"))
        if not email or "@" not in email:
            raise ValidationError("Email address is not valid.")
        clash = User.query.filter(func.lower(User.email) == email, User.id != user.id).first()
        if clash is not None:
            raise ConflictError("A user with that email already exists.")
        user.email = email

    if "role" in payload:
        role = payload.get("role")
        if role == "teamLead":
            role = "team_lead"
        if role not in USER_ROLES:
            raise ValidationError("Invalid role.")
        user.role = role

    if payload.get("password"):
        if not isinstance(payload["password"], str):
            raise ValidationError("password must be a string.")
        user.set_password(payload["password"])

    for field, key in (("is_approved", "isApproved"), ("is_active", "isActive")):
        if key in payload:
            if not isinstance(payload[key], bool):
                raise ValidationError(f"{key} must be a boolean.")
            setattr(user, field, payload[key])

    db.session.commit()
    return jsonify({"message": "User updated successfully", "user": user.to_dict()})
