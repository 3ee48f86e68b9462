"""Request authentication helpers shared by the API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import request

from utils.errors import ForbiddenError, ValidationError
from utils.tokens import token_from_request, verify_token


def current_claims() -> dict:
    """Return the verified claims of the current request or raise a 401."""

    return verify_token(token_from_request(request))


def require_role(*roles: str, message: str = "Insufficient permissions.") -> dict:
    """Return the current claims, raising ``ForbiddenError`` for other roles."""

    claims = current_claims()
    if roles and claims["role"] not in roles:
        raise ForbiddenError(message)
    return claims


def login_required(view: Callable) -> Callable:
    """Reject the request with 401 unless it carries a valid token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        current_claims()
        return view(*args, **kwargs)

    return wrapper


def parse_id(raw: str, label: str) -> int:
    """Parse a numeric path identifier or raise a 400."""

    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID.") from None
