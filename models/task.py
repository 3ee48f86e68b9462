"""Task model definition."""

from datetime import datetime

from . import db

TASK_STATUSES = ("todo", "inProgress", "testing", "completed", "done")

DEFAULT_TASK_STATUSES = [
    {"id": 1, "title": "todo", "description": "Item is pending", "color": "#6B7280"},
    {"id": 2, "title": "inProgress", "description": "Item is in progress", "color": "#3B82F6"},
    {"id": 3, "title": "testing", "description": "Item is being tested", "color": "#F59E0B"},
    {"id": 4, "title": "done", "description": "Item is completed", "color": "#10B981"},
]


class Task(db.Model):
    """A tracked piece of work inside a project."""

    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status_title = db.Column(db.String(50), nullable=False, default="todo", index=True)
    statuses = db.Column(db.JSON, nullable=True)
    deadline = db.Column(db.Date, nullable=True, index=True)
    # minutes
    expected_time = db.Column(db.Integer, nullable=False, default=0)
    spent_time = db.Column(db.Integer, nullable=False, default=0)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id"), nullable=False, index=True
    )
    assigned_to_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=True, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    assigned_to = db.relationship("User")
    project = db.relationship("Project")

    def allowed_statuses(self) -> set[str]:
        """Return the status titles this task may move to."""

        titles = {status.get("title") for status in self.statuses or [] if isinstance(status, dict)}
        return titles.union(TASK_STATUSES)

    def to_dict(self) -> dict:
        """Serialize the task."""

        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status_title,
            "statuses": self.statuses or [],
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "expected_time": self.expected_time,
            "spent_time": self.spent_time,
            "project_id": self.project_id,
            "assigned_to_id": self.assigned_to_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
