"""Application configuration module."""

import os
from datetime import timedelta


class ConfigurationError(RuntimeError):
    """Raised when the application is started with unusable configuration."""


def engine_options(database_uri: str, timeout: float) -> dict:
    """Return SQLAlchemy engine options with driver-level timeouts applied."""

    if database_uri.startswith("sqlite"):
        connect_args = {"timeout": timeout}
    else:
        connect_args = {"connect_timeout": int(timeout)}
    return {"pool_pre_ping": True, "connect_args": connect_args}


class Config:
    """Base configuration for the Flask application."""

    # Core
    APP_ENV = os.getenv("APP_ENV", "production").strip().lower()
    SECRET_KEY = os.getenv("SECRET_KEY")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_TIMEOUT = float(os.getenv("DB_TIMEOUT", "15"))

    # Tokens (no default secret: create_app refuses to start without one)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = "HS256"
    USER_TOKEN_TTL = timedelta(days=7)
    ADMIN_TOKEN_TTL = timedelta(hours=8)
    JWT_ACCESS_TOKEN_EXPIRES = USER_TOKEN_TTL
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "authToken"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_CSRF_PROTECT = False

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")
