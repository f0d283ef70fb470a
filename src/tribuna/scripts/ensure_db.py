"""Create the configured Postgres database when it does not exist yet."""
from __future__ import annotations

import argparse
import sys

import psycopg
from psycopg import sql
from sqlalchemy.engine import make_url

from tribuna.core.settings import settings


def split_database_url(db_url: str) -> tuple[str, str]:
    """Return ``(maintenance_dsn, target_db)`` for a SQLAlchemy or libpq URL.

    Driver suffixes such as ``postgresql+psycopg`` are dropped, and the
    maintenance DSN points at the ``postgres`` database on the same server.
    """
    url = make_url(db_url.strip().strip("'\""))
    if not url.drivername.startswith("postgresql"):
        raise ValueError(f"Not a Postgres URL: {db_url!r}")
    target_db = url.database or "postgres"
    admin = url.set(drivername="postgresql", database="postgres")
    return admin.render_as_string(hide_password=False), target_db


def ensure_database_exists(db_url: str) -> bool:
    """Create the target database if missing.

    Returns:
        True if the database was created by this call.
    """
    admin_dsn, target_db = split_database_url(db_url)
    with psycopg.connect(admin_dsn, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            print(f"[ensure_db] database {target_db} already exists")
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
    print(f"[ensure_db] created database {target_db}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database exists")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()

    try:
        ensure_database_exists(args.url or settings.effective_database_url)
    except (ValueError, psycopg.Error) as exc:
        print(f"[ensure_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
