"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from utils.tokens import issue_token  # noqa: E402

TEST_SECRET = "test-signing-secret-with-enough-length"


class _BaseTestConfig(Config):
    TESTING = True
    APP_ENV = "production"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = TEST_SECRET
    RATE_LIMIT = "1000 per minute"


def build_app(**overrides) -> Flask:
    """Create an application from the test config with ``overrides`` applied."""

    class TestConfig(_BaseTestConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    return create_app(TestConfig)


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = build_app()

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., int]:
    """Return a helper that persists a user and returns its id."""

    def _make_user(
        email: str,
        password: str = "Secret123!",
        role: str = "employee",
        *,
        approved: bool = True,
        name: str | None = None,
    ) -> int:
        with app.app_context():
            user = User(
                name=name or email.split("@", 1)[0],
                email=email,
                role=role,
                is_approved=approved,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def auth_headers(app: Flask) -> Callable[[int], dict[str, str]]:
    """Return a helper building a bearer header for a stored user id."""

    def _auth_headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            token = issue_token(db.session.get(User, user_id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def app_factory() -> Callable[..., Flask]:
    """Return ``build_app`` for tests that need non-default configuration."""

    return build_app
