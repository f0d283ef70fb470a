# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from tribuna.core.security import create_access_token  # noqa: E402
from tribuna.db.session import Base  # noqa: E402
from tribuna.db.session import get_db as app_get_session  # noqa: E402
from tribuna.main import app as fastapi_app  # noqa: E402
from tribuna.models import (  # noqa: E402
    Comment,
    CommentVote,
    Topic,
    TopicOption,
    TopicType,
    User,
    UserRole,
)

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)

_SLUG_COUNTER = count(1)
_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db: Session, role: UserRole = UserRole.USER) -> User:
    user = User(username=f"user{next(_USER_COUNTER)}", name="Test User", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def make_topic(
    db: Session,
    author: User,
    *,
    type_: TopicType = TopicType.YES_NO,
    options: list[str] | None = None,
    allow_multiple_votes: bool = False,
    max_choices: int = 1,
    **fields: object,
) -> Topic:
    topic = Topic(
        slug=f"topic-{next(_SLUG_COUNTER)}",
        title=fields.pop("title", "Should we debate this?"),
        description=fields.pop("description", "A sufficiently long topic description."),
        tags=fields.pop("tags", ["politics"]),
        type=type_,
        allow_multiple_votes=allow_multiple_votes,
        max_choices=max_choices,
        created_by_id=author.id,
        **fields,
    )
    for order, label in enumerate(options or []):
        topic.options.append(TopicOption(label=label, order=order))
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return topic


def make_comment(
    db: Session,
    topic: Topic,
    author: User,
    *,
    minutes: int = 0,
    **fields: object,
) -> Comment:
    created = BASE_TIME + timedelta(minutes=minutes)
    comment = Comment(
        topic_id=topic.id,
        user_id=author.id,
        content=fields.pop("content", "An argument"),
        created_at=created,
        updated_at=created,
        **fields,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def upvote(db: Session, comment: Comment, voters: list[User]) -> None:
    db.add_all(CommentVote(comment_id=comment.id, user_id=voter.id, value=1) for voter in voters)
    db.commit()


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session)


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session)


@pytest.fixture()
def moderator(db_session: Session) -> User:
    return make_user(db_session, UserRole.MOD)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def mod_auth_token(moderator: User) -> dict[str, str]:
    return auth_headers(moderator)


@pytest.fixture()
def yes_no_topic(db_session: Session, other_user: User) -> Topic:
    return make_topic(db_session, other_user)


@pytest.fixture()
def multi_topic(db_session: Session, other_user: User) -> Topic:
    """Multi-choice topic allowing up to two of three options."""
    return make_topic(
        db_session,
        other_user,
        type_=TopicType.MULTI_CHOICE,
        options=["A", "B", "C"],
        allow_multiple_votes=True,
        max_choices=2,
    )


@pytest.fixture()
def single_choice_topic(db_session: Session, other_user: User) -> Topic:
    return make_topic(
        db_session,
        other_user,
        type_=TopicType.MULTI_CHOICE,
        options=["A", "B", "C"],
    )
