# mypy: ignore-errors
# tests/test_scripts.py
"""Tests for the operator scripts that do not need a live Postgres server."""

import pytest

from tribuna.core.security import decode_subject
from tribuna.models import User, UserRole
from tribuna.scripts.ensure_db import split_database_url
from tribuna.scripts.tokens import get_or_create_user, main as tokens_main


def test_split_database_url_drops_driver() -> None:
    admin, target = split_database_url("postgresql+psycopg://app:secret@db:5432/tribuna")
    assert admin == "postgresql://app:secret@db:5432/postgres"
    assert target == "tribuna"


def test_split_database_url_rejects_sqlite() -> None:
    with pytest.raises(ValueError):
        split_database_url("sqlite:///./tribuna.db")


def test_get_or_create_user(db_session) -> None:
    created = get_or_create_user(db_session, "ana", role=None, create=True)
    assert created.role == UserRole.USER

    promoted = get_or_create_user(db_session, "ana", role=UserRole.MOD, create=False)
    assert promoted.id == created.id
    assert promoted.role == UserRole.MOD
    assert db_session.query(User).filter(User.username == "ana").count() == 1


def test_get_or_create_user_missing(db_session) -> None:
    with pytest.raises(LookupError):
        get_or_create_user(db_session, "ghost", role=None, create=False)


def test_tokens_cli_prints_token(db_session, monkeypatch, capsys) -> None:
    monkeypatch.setattr("tribuna.scripts.tokens.SessionLocal", lambda: _SessionContext(db_session))

    tokens_main(["bruno", "--create"])

    token = capsys.readouterr().out.strip()
    user = db_session.query(User).filter(User.username == "bruno").one()
    assert decode_subject(token) == str(user.id)


class _SessionContext:
    def __init__(self, session) -> None:
        self._session = session

    def __enter__(self):
        return self._session

    def __exit__(self, *exc) -> None:
        return None
