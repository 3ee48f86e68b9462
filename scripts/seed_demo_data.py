"""Seed demo users, a team, projects and tasks."""

from datetime import date, timedelta

from app import create_app
from models import db
from models.project import DEFAULT_PROJECT_STATUSES, Project
from models.task import DEFAULT_TASK_STATUSES, Task
from models.team import Team, TeamMember
from models.user import User

DEMO_PASSWORD = "DemoPass123"


def get_or_create_user(email: str, name: str, role: str) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, name=name, role=role, is_approved=True)
        user.set_password(DEMO_PASSWORD)
        db.session.add(user)
    else:
        user.role = role
        user.is_approved = True
    db.session.flush()
    return user


def get_or_create_team(name: str, lead: User, members: list[User]) -> Team:
    team = Team.query.filter_by(name=name).first()
    if team is None:
        team = Team(name=name, description=f"{name} demo team", team_lead_id=lead.id)
        db.session.add(team)
        db.session.flush()

    existing = {row.user_id for row in TeamMember.query.filter_by(team_id=team.id)}
    for member in [lead, *members]:
        if member.id not in existing:
            db.session.add(TeamMember(team_id=team.id, user_id=member.id))
    return team


def get_or_create_project(name: str, team: Team, owner: User) -> Project:
    project = Project.query.filter_by(name=name, team_id=team.id).first()
    if project is None:
        project = Project(
            name=name,
            description=f"{name} demo project",
            team_id=team.id,
            owner_id=owner.id,
            statuses=DEFAULT_PROJECT_STATUSES,
            start_date=date.today(),
            end_date=date.today() + timedelta(days=30),
        )
        db.session.add(project)
        db.session.flush()
    return project


def main() -> None:
    app = create_app()
    with app.app_context():
        lead = get_or_create_user("lead@example.com", "Demo Lead", "team_lead")
        alice = get_or_create_user("alice@example.com", "Alice", "employee")
        bob = get_or_create_user("bob@example.com", "Bob", "employee")

        team = get_or_create_team("Platform", lead, [alice, bob])
        project = get_or_create_project("Website relaunch", team, lead)

        if not Task.query.filter_by(project_id=project.id).first():
            db.session.add_all(
                [
                    Task(title="Draft sitemap", project_id=project.id, assigned_to_id=alice.id,
                         expected_time=120, statuses=DEFAULT_TASK_STATUSES),
                    Task(title="Set up CI", project_id=project.id, assigned_to_id=bob.id,
                         expected_time=240, status_title="inProgress",
                         statuses=DEFAULT_TASK_STATUSES),
                ]
            )

        db.session.commit()
        print(f"Seeded team {team.name!r} with project {project.name!r}")


if __name__ == "__main__":
    main()
