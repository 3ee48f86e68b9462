"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .team import Team, TeamMember  # noqa: E402,F401
from .project import Project  # noqa: E402,F401
from .task import Task  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "Team",
    "TeamMember",
    "Project",
    "Task",
]
