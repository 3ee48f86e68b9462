"""Issue and verify signed bearer tokens.

Tokens are HS256 JWTs produced by flask-jwt-extended with the application's
``JWT_SECRET_KEY``. Validity is decided only by signature and expiration;
there is no server-side revocation.
"""

from __future__ import annotations

from datetime import timedelta

import jwt
from flask import Request, current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from models.user import User
from utils.errors import InvalidTokenError

CLAIM_KEYS = ("userId", "email", "role", "iat", "exp")


def issue_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Return a signed token carrying the user's id, email and role."""

    if expires_delta is None:
        expires_delta = current_app.config["USER_TOKEN_TTL"]
    return create_access_token(
        identity=str(user.id),
        additional_claims={"userId": user.id, "email": user.email, "role": user.role},
        expires_delta=expires_delta,
    )


def verify_token(token: str | None) -> dict:
    """Decode ``token`` and return its identity claims.

    Raises ``InvalidTokenError`` for every failure: absent, malformed,
    wrongly signed, expired, or carrying claims of the wrong shape.
    """

    if not token or not isinstance(token, str):
        raise InvalidTokenError()

    try:
        payload = decode_token(token)
    except (jwt.PyJWTError, JWTExtendedException, ValueError) as exc:
        current_app.logger.debug("Token rejected: %s", exc)
        raise InvalidTokenError() from exc

    user_id = payload.get("userId")
    if (
        not isinstance(user_id, int)
        or isinstance(user_id, bool)
        or not isinstance(payload.get("email"), str)
        or not isinstance(payload.get("role"), str)
        or not isinstance(payload.get("iat"), int)
        or not isinstance(payload.get("exp"), int)
    ):
        current_app.logger.warning("Token rejected: unexpected claim shape")
        raise InvalidTokenError()

    return {key: payload[key] for key in CLAIM_KEYS}


def token_from_request(req: Request) -> str | None:
    """Return the bearer header token, falling back to the auth cookie."""

    header = req.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token

    cookie_name = current_app.config.get("JWT_ACCESS_COOKIE_NAME", "authToken")
    return req.cookies.get(cookie_name) or None
