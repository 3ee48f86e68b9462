"""Seed an approved administrator account.

Reads ``ADMIN_EMAIL`` (default ``admin@example.com``) and ``ADMIN_PASSWORD``
from the environment.
"""

import os
import sys

from app import create_app
from models import db
from models.user import User

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")


def main() -> None:
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        sys.exit("ADMIN_PASSWORD must be set.")

    app = create_app()
    with app.app_context():
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        if admin is None:
            admin = User(
                name=ADMIN_NAME,
                email=ADMIN_EMAIL,
                role="admin",
                is_approved=True,
                is_active=True,
            )
            admin.set_password(password)
            db.session.add(admin)
            action = "created"
        else:
            admin.role = "admin"
            admin.is_approved = True
            admin.is_active = True
            admin.set_password(password)
            action = "updated"
        db.session.commit()
        print(f"Admin user {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
