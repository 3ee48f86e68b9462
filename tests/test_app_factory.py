"""Tests for the Flask application factory."""
from __future__ import annotations

import pytest

from config import ConfigurationError, engine_options


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_blueprints_registered(app):
    """Application factory should register expected blueprints."""
    bps = set(app.blueprints.keys())
    assert {"auth", "admin", "users", "teams", "projects", "pages"}.issubset(bps)


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_signing_secret_refuses_to_start(app_factory, secret):
    """Without a signing secret the factory fails instead of using a default."""
    with pytest.raises(ConfigurationError):
        app_factory(JWT_SECRET_KEY=secret)


def test_engine_options_carry_driver_timeouts():
    sqlite_options = engine_options("sqlite:///app.db", 7.5)
    assert sqlite_options["connect_args"] == {"timeout": 7.5}

    postgres_options = engine_options("postgresql://db/app", 7.5)
    assert postgres_options["connect_args"] == {"connect_timeout": 7}


def test_app_applies_engine_timeouts(app):
    options = app.config["SQLALCHEMY_ENGINE_OPTIONS"]
    assert options["connect_args"]["timeout"] == app.config["DB_TIMEOUT"]
