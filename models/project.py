"""Project model definition."""

from __future__ import annotations

import logging
from datetime import datetime

from . import db
from .task import Task

logger = logging.getLogger(__name__)


PROJECT_PRIORITIES = ("low", "medium", "high")

DEFAULT_PROJECT_STATUSES = [
    {"id": 1, "title": "planning", "description": "Project is in planning phase", "color": "#6B7280"},
    {"id": 2, "title": "active", "description": "Project is actively being worked on", "color": "#3B82F6"},
    {"id": 3, "title": "on-hold", "description": "Project is temporarily paused", "color": "#F59E0B"},
    {"id": 4, "title": "completed", "description": "Project has been completed", "color": "#10B981"},
    {"id": 5, "title": "cancelled", "description": "Project has been cancelled", "color": "#EF4444"},
]


class Project(db.Model):
    """A unit of work owned by a team."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status_title = db.Column(db.String(50), nullable=False, default="planning")
    priority = db.Column(
        db.Enum(*PROJECT_PRIORITIES, name="project_priority"),
        nullable=False,
        default="medium",
    )
    statuses = db.Column(db.JSON, nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False, index=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    owner = db.relationship("User")
    team = db.relationship("Team")

    def to_dict(self) -> dict:
        """Serialize the project."""

        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status_title,
            "priority": self.priority,
            "statuses": self.statuses or [],
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "team_id": self.team_id,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status_title,
            "priority": self.priority,
        }

    def status_titles(self) -> set[str]:
        statuses = self.statuses or DEFAULT_PROJECT_STATUSES
        return {status.get("title") for status in statuses if isinstance(status, dict)}


def delete_project_cascade(project: Project) -> int:
    """Delete a project and its tasks in one transaction.

    Returns the number of deleted tasks. The session is rolled back and the
    error re-raised if anything fails.
    """

    project_id = project.id
    try:
        deleted_tasks = Task.query.filter(Task.project_id == project_id).delete(
            synchronize_session=False
        )
        db.session.delete(project)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Deleted project %s with %d tasks", project_id, deleted_tasks)
    return deleted_tasks
