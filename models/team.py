"""Team and team membership models, plus the cascading team delete."""

from __future__ import annotations

import logging
from datetime import datetime

from . import db
from .project import Project
from .task import Task

logger = logging.getLogger(__name__)

MEMBER_ROLES = ("owner", "admin", "member", "viewer")


class Team(db.Model):
    """A group of users that owns projects."""

    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    team_lead_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    team_lead = db.relationship("User", foreign_keys=[team_lead_id])
    members = db.relationship(
        "User",
        secondary="team_members",
        viewonly=True,
        order_by="User.id",
    )

    def to_dict(self, include_members: bool = False) -> dict:
        """Serialize the team, optionally with its lead and members."""

        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "team_lead_id": self.team_lead_id,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_members:
            data["teamLead"] = self.team_lead.to_summary() if self.team_lead else None
            data["members"] = [member.to_summary() for member in self.members]
        return data


class TeamMember(db.Model):
    """Join row between a team and a user."""

    __tablename__ = "team_members"
    __table_args__ = (
        db.UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
    )

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey("teams.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    role = db.Column(
        db.Enum(*MEMBER_ROLES, name="team_member_role"),
        nullable=False,
        default="member",
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User")

    def __repr__(self) -> str:
        return f"<TeamMember team_id={self.team_id} user_id={self.user_id}>"


def _delete_tasks(project_ids: list[int]) -> int:
    if not project_ids:
        return 0
    return Task.query.filter(Task.project_id.in_(project_ids)).delete(
        synchronize_session=False
    )


def _delete_projects(team_id: int) -> int:
    return Project.query.filter(Project.team_id == team_id).delete(
        synchronize_session=False
    )


def _delete_memberships(team_id: int) -> int:
    return TeamMember.query.filter(TeamMember.team_id == team_id).delete(
        synchronize_session=False
    )


def delete_team_cascade(team: Team) -> int:
    """Delete a team with its projects, their tasks and its memberships.

    All rows go in one transaction, children before parents. On any failure
    the session is rolled back and the exception re-raised, so either every
    row is gone or none is. Returns the number of deleted projects.
    """

    team_id = team.id
    project_ids = [
        row.id
        for row in Project.query.with_entities(Project.id).filter(Project.team_id == team_id)
    ]

    try:
        deleted_tasks = _delete_tasks(project_ids)
        _delete_projects(team_id)
        deleted_members = _delete_memberships(team_id)
        db.session.delete(team)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Deleted team %s with %d projects, %d tasks, %d memberships",
        team_id,
        len(project_ids),
        deleted_tasks,
        deleted_members,
    )
    return len(project_ids)
