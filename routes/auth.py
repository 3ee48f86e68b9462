"""Authentication blueprint: register, login, logout and token verification."""

from __future__ import annotations

from datetime import timedelta
from http import HTTPStatus

from flask import Blueprint, Response, current_app, jsonify, request
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies
from sqlalchemy import func

from models import db
from models.user import User
from utils.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    PendingApprovalError,
    ValidationError,
)
from utils.request_validation import normalize_email, optional_text, parse_json_request
from utils.tokens import issue_token, verify_token

SELF_REGISTER_ROLES = {"employee", "team_lead"}
auth_bp = Blueprint("auth", __name__)


def read_credentials() -> tuple[str, str]:
    payload = parse_json_request(request, allow_empty=True)
    email = normalize_email(payload.get("email"))
    password = payload.get("password")
    if not isinstance(password, str):
        password = ""

    if not email or not password:
        raise ValidationError("Email and password are required.")
    return email, password


def _find_user(email: str) -> User | None:
    return User.query.filter(func.lower(User.email) == email).first()


def authenticate(email: str, password: str, *, admin_only: bool = False) -> User:
    """Return the approved user owning ``email``/``password``.

    Unknown accounts and wrong passwords raise the same
    ``InvalidCredentialsError``; only the logs tell them apart. Approval
    state is reported separately through ``PendingApprovalError``.
    """

    logger = current_app.logger
    logger.info("Login attempt for %s", email)

    user = _find_user(email)
    if user is None or (admin_only and user.role != "admin"):
        logger.warning("Login rejected for %s: no matching account", email)
        raise InvalidCredentialsError()

    if not user.is_approved:
        logger.info("Login rejected for %s: pending approval", email)
        raise PendingApprovalError()

    if not user.check_password(password):
        logger.warning("Login rejected for %s: password mismatch", email)
        raise InvalidCredentialsError()

    return user


def login_response(user: User, ttl: timedelta) -> Response:
    """Build the success payload and attach the token as an HTTP-only cookie."""

    token = issue_token(user, expires_delta=ttl)
    response = jsonify(
        {"message": "Login successful", "user": user.to_dict(), "token": token}
    )
    set_access_cookies(response, token, max_age=int(ttl.total_seconds()))
    current_app.logger.info("Login succeeded for user %s", user.id)
    return response


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Create an account that waits for admin approval before it can sign in."""

    payload = parse_json_request(request)
    name = optional_text(payload.get("name"), "name", max_length=100)
    email = normalize_email(payload.get("email"))
    password = payload.get("password") if isinstance(payload.get("password"), str) else ""
    raw_role = payload.get("role") or "employee"

    if not name or not email or not password:
        raise ValidationError("Name, email and password are required.")
    if "@" not in email:
        raise ValidationError("Email address is not valid.")
    if raw_role not in SELF_REGISTER_ROLES:
        raise ValidationError("Role must be one of: employee, team_lead.")

    if _find_user(email) is not None:
        raise ConflictError("A user with that email already exists.")

    user = User(name=name, email=email, role=raw_role, is_approved=False)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    return (
        jsonify(
            {
                "message": "Registration successful. Your account is pending approval.",
                "user": user.to_dict(),
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a user, returning the token in the body and in a cookie."""

    email, password = read_credentials()
    user = authenticate(email, password)
    return login_response(user, current_app.config["USER_TOKEN_TTL"])


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Clear the auth cookie. Issued tokens stay valid until they expire."""

    response = jsonify({"message": "Logged out"})
    unset_jwt_cookies(response)
    return response


def _verification_response(token: str | None) -> tuple:
    try:
        claims = verify_token(token)
    except InvalidTokenError as error:
        return jsonify({"valid": False, "message": error.description}), HTTPStatus.UNAUTHORIZED
    return jsonify({"valid": True, "user": claims}), HTTPStatus.OK


@auth_bp.route("/verify", methods=["POST"])
def verify_from_body() -> tuple:
    """Verify a token passed as ``{"token": ...}``."""

    payload = request.get_json(silent=True)
    token = payload.get("token") if isinstance(payload, dict) else None
    return _verification_response(token)


@auth_bp.route("/verify", methods=["GET"])
def verify_from_header() -> tuple:
    """Verify a token passed as ``Authorization: Bearer <token>``."""

    header = request.headers.get("Authorization", "")
    token = header[len("Bearer "):].strip() if header.startswith("Bearer ") else None
    return _verification_response(token)
