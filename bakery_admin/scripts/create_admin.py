#!/usr/bin/env python3
"""
Create an admin account, or promote an existing user to admin.

Usage:
  python -m bakery_admin.scripts.create_admin --email owner@bakery.com --password secret --name Owner
"""

import argparse
import sys

from ..data.database import SessionLocal, create_tables
from ..data.models import User, UserRole
from ..utils.logger import get_logger
from ..utils.security import hash_password

logger = get_logger()


def create_admin(db, email: str, password: str, name: str = "") -> User:
    """Create the admin, or promote and reset the password of an existing account."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name or email.split("@")[0])
        db.add(user)
        logger.info("Creating admin account")
    else:
        logger.info("Promoting existing user %s to admin", user.id)
        if name:
            user.name = name
    user.role = UserRole.admin
    user.password_hash = hash_password(password)
    db.commit()
    db.refresh(user)
    return user


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote a bakery admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="")
    args = parser.parse_args(argv)

    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    create_tables()
    db = SessionLocal()
    try:
        user = create_admin(db, args.email, args.password, args.name)
        print(f"Admin ready: #{user.id} {user.email}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
