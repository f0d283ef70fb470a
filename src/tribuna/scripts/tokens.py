# src/tribuna/scripts/tokens.py
"""Mint a bearer token for an existing user.

Identity providers live outside this service; this script lets operators and
developers obtain a token for a known username, optionally creating the user.
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from tribuna.core.security import create_access_token
from tribuna.db.session import SessionLocal
from tribuna.models import User, UserRole


def get_or_create_user(db: Session, username: str, *, role: UserRole | None, create: bool) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        if not create:
            raise LookupError(f"User {username!r} not found")
        user = User(username=username, role=role or UserRole.USER)
        db.add(user)
    elif role is not None:
        user.role = role
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print a bearer token for a user")
    parser.add_argument("username")
    parser.add_argument("--create", action="store_true", help="Create the user if missing")
    parser.add_argument("--role", choices=[role.value for role in UserRole], default=None)
    args = parser.parse_args(argv)

    with SessionLocal() as db:
        try:
            user = get_or_create_user(
                db,
                args.username,
                role=UserRole(args.role) if args.role else None,
                create=args.create,
            )
        except LookupError as exc:
            print(f"[tokens] ERROR: {exc}", file=sys.stderr)
            sys.exit(1)
        print(create_access_token(user.id))


if __name__ == "__main__":
    main()
