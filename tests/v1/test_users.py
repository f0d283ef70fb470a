# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for the public user profile endpoint."""

from fastapi import status

from tests.conftest import make_comment, make_topic, make_user, upvote
from tribuna.models import CommentStatus, TopicStatus
from tribuna.scripts.seed_achievements import seed_achievements
from tribuna.services.karma import record_activity


def test_get_profile(client, test_user) -> None:
    response = client.get(f"/api/users/{test_user.username}")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_user.id
    assert data["username"] == test_user.username
    assert data["role"] == "USER"
    assert data["karma"] == 0
    assert data["achievements"] == []
    assert data["topics"] == []
    assert data["comments"] == []
    assert data["stats"] == {"totalTopics": 0, "totalComments": 0, "totalVotesReceived": 0}


def test_get_missing_profile(client) -> None:
    response = client.get("/api/users/nobody")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Utilizador não encontrado"}


def test_profile_shows_karma_and_achievements(client, db_session, test_user, other_user) -> None:
    seed_achievements(db_session)
    topic = make_topic(db_session, other_user)
    make_comment(db_session, topic, test_user)
    record_activity(db_session, test_user, 5)
    db_session.commit()

    data = client.get(f"/api/v1/users/{test_user.username}").json()
    assert data["karma"] == 5
    assert [item["key"] for item in data["achievements"]] == ["first_comment"]
    assert data["achievements"][0]["name"] == "Primeiro argumento"
    assert data["achievements"][0]["unlockedAt"]


def test_profile_lists_active_topics_only(client, db_session, test_user, other_user) -> None:
    active = make_topic(db_session, test_user, tags=["science"])
    make_topic(db_session, test_user, status=TopicStatus.HIDDEN)
    make_comment(db_session, active, other_user)

    data = client.get(f"/api/users/{test_user.username}").json()
    assert [item["slug"] for item in data["topics"]] == [active.slug]
    assert data["topics"][0]["tags"] == ["science"]
    assert data["topics"][0]["commentCount"] == 1
    assert data["topics"][0]["voteCount"] == 0
    assert data["stats"]["totalTopics"] == 1


def test_profile_comments_with_votes_received(client, db_session, test_user, other_user) -> None:
    topic = make_topic(db_session, other_user, title="Energia nuclear?")
    older = make_comment(db_session, topic, test_user, content="Primeiro")
    newer = make_comment(db_session, topic, test_user, minutes=5, content="Segundo")
    make_comment(db_session, topic, test_user, minutes=9, status=CommentStatus.DELETED)
    upvote(db_session, older, [other_user, make_user(db_session)])
    upvote(db_session, newer, [other_user])

    data = client.get(f"/api/users/{test_user.username}").json()
    assert [item["id"] for item in data["comments"]] == [newer.id, older.id]
    assert [item["votes"] for item in data["comments"]] == [1, 2]
    assert data["comments"][0]["topic"] == {"slug": topic.slug, "title": "Energia nuclear?"}
    assert data["comments"][1]["createdAt"] == "2025-01-01T00:00:00Z"
    assert data["stats"]["totalComments"] == 2
    assert data["stats"]["totalVotesReceived"] == 3


def test_profile_database_error(client, test_user, monkeypatch) -> None:
    from sqlalchemy.exc import OperationalError

    from tribuna.api.v1.endpoints import users

    def _fail(db, user):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    monkeypatch.setattr(users, "build_user_profile", _fail)
    response = client.get(f"/api/users/{test_user.username}")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Erro ao carregar perfil do utilizador"}
