"""Page route guard run before every request."""

from __future__ import annotations

from typing import Callable

from flask import Flask, current_app, redirect, request

from utils.errors import InvalidTokenError
from utils.tokens import token_from_request, verify_token

PUBLIC_PATHS = frozenset({"/", "/login", "/register", "/health"})
PASS_THROUGH_PREFIXES = ("/api/", "/static/")
ADMIN_PREFIX = "/admin"
ADMIN_LOGIN_PATH = "/admin/login"
HOME_PATH = "/"


def _is_admin_path(path: str) -> bool:
    return path.startswith(ADMIN_PREFIX)


def resolve_redirect(
    path: str,
    load_claims: Callable[[], dict],
    environment: str,
) -> str | None:
    """Return the path to redirect to, or ``None`` to let the request through.

    ``load_claims`` is only called for protected admin pages and must raise
    ``InvalidTokenError`` when the caller has no usable token.
    """

    if path in PUBLIC_PATHS or path == "/api" or path.startswith(PASS_THROUGH_PREFIXES):
        return None

    if not _is_admin_path(path):
        return None

    if environment != "production":
        return None

    if path == ADMIN_LOGIN_PATH:
        return None

    try:
        claims = load_claims()
    except InvalidTokenError:
        return ADMIN_LOGIN_PATH

    if claims.get("role") != "admin":
        return HOME_PATH
    return None


def register_route_guard(app: Flask) -> None:
    """Install the guard as a ``before_request`` hook on ``app``."""

    @app.before_request
    def _guard_pages():
        target = resolve_redirect(
            request.path,
            lambda: verify_token(token_from_request(request)),
            current_app.config.get("APP_ENV", "production"),
        )
        if target is not None:
            current_app.logger.info("Route guard redirecting %s to %s", request.path, target)
            return redirect(target)
        return None
