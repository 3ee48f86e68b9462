"""HTTP error types raised by the API.

Each error is a Werkzeug ``HTTPException`` so the application's JSON error
handler renders it with the right status code.
"""

from __future__ import annotations

from werkzeug.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
INVALID_TOKEN_MESSAGE = "Invalid or expired token."
PENDING_APPROVAL_MESSAGE = "Your account is pending approval by admin."


class ValidationError(BadRequest):
    """Malformed or missing request input."""


class InvalidCredentialsError(Unauthorized):
    """Unknown account or wrong password; the two are never distinguished."""

    description = INVALID_CREDENTIALS_MESSAGE

    def __init__(self, description: str | None = None):
        super().__init__(description or INVALID_CREDENTIALS_MESSAGE)


class InvalidTokenError(Unauthorized):
    """Missing, malformed, expired or wrongly signed token."""

    description = INVALID_TOKEN_MESSAGE

    def __init__(self, description: str | None = None):
        super().__init__(description or INVALID_TOKEN_MESSAGE)


class PendingApprovalError(Forbidden):
    description = PENDING_APPROVAL_MESSAGE

    def __init__(self, description: str | None = None):
        super().__init__(description or PENDING_APPROVAL_MESSAGE)


class ForbiddenError(Forbidden):
    """Authenticated but not allowed to perform the action."""


class NotFoundError(NotFound):
    pass


class ConflictError(Conflict):
    pass


class InternalError(InternalServerError):
    """Unexpected persistence or crypto failure."""
