# mypy: ignore-errors
# tests/v1/test_topics.py
"""Tests for topic endpoints."""

from fastapi import status

from tests.conftest import make_comment, make_topic
from tribuna.models import Topic, TopicOption, TopicStatus, TopicType


def _topic_payload(**overrides) -> dict:
    payload = {
        "title": "Devemos adotar a semana de quatro dias?",
        "description": "Uma discussão sobre produtividade e qualidade de vida.",
        "tags": ["trabalho", "economia"],
    }
    payload.update(overrides)
    return payload


def test_create_yes_no_topic(client, auth_token, test_user, db_session) -> None:
    response = client.post("/api/topics", json=_topic_payload(), headers=auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["slug"] == "devemos-adotar-a-semana-de-quatro-dias"
    assert data["type"] == "YES_NO"
    assert data["status"] == "ACTIVE"
    assert data["createdBy"]["id"] == test_user.id
    assert data["voteStats"] == {"SIM": 0, "NAO": 0, "DEPENDE": 0, "total": 0}
    assert data["options"] == []
    assert data["language"] == "pt"

    db_session.refresh(test_user)
    assert test_user.karma == 10


def test_duplicate_titles_get_suffixed_slugs(client, auth_token) -> None:
    first = client.post("/api/topics", json=_topic_payload(), headers=auth_token)
    second = client.post("/api/topics", json=_topic_payload(), headers=auth_token)
    assert second.json()["slug"] == f"{first.json()['slug']}-1"


def test_create_multi_choice_topic(client, auth_token, db_session) -> None:
    payload = _topic_payload(
        title="Qual é a melhor linguagem?",
        type="MULTI_CHOICE",
        allowMultipleVotes=True,
        maxChoices=2,
        options=[
            {"label": "Python", "order": 0},
            {"label": "Rust", "order": 1},
            {"label": "Go", "order": 2},
        ],
    )
    response = client.post("/api/topics", json=payload, headers=auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert [option["label"] for option in data["options"]] == ["Python", "Rust", "Go"]
    assert data["maxChoices"] == 2
    topic = db_session.query(Topic).filter(Topic.slug == data["slug"]).one()
    assert db_session.query(TopicOption).filter(TopicOption.topic_id == topic.id).count() == 3


def test_multi_choice_needs_two_options(client, auth_token) -> None:
    payload = _topic_payload(type="MULTI_CHOICE", options=[{"label": "Só uma"}])
    response = client.post("/api/topics", json=payload, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_max_choices_cannot_exceed_options(client, auth_token) -> None:
    payload = _topic_payload(
        type="MULTI_CHOICE",
        allowMultipleVotes=True,
        maxChoices=3,
        options=[{"label": "A"}, {"label": "B"}],
    )
    response = client.post("/api/topics", json=payload, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_topic_short_title(client, auth_token) -> None:
    response = client.post("/api/topics", json=_topic_payload(title="Oi"), headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Dados inválidos"}


def test_create_topic_requires_auth(client) -> None:
    response = client.post("/api/topics", json=_topic_payload())
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_topics_only_active(client, db_session, other_user) -> None:
    active = make_topic(db_session, other_user)
    make_topic(db_session, other_user, status=TopicStatus.HIDDEN)
    make_topic(db_session, other_user, status=TopicStatus.LOCKED)

    response = client.get("/api/topics")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["slug"] for item in data["data"]] == [active.slug]
    assert data["pagination"]["total"] == 1
    assert data["pagination"]["perPage"] == 20


def test_list_topics_by_tag(client, db_session, other_user) -> None:
    make_topic(db_session, other_user, tags=["sports"])
    tagged = make_topic(db_session, other_user, tags=["science", "space"])

    response = client.get("/api/topics?tag=space")
    assert [item["slug"] for item in response.json()["data"]] == [tagged.slug]


def test_list_topics_counts(client, db_session, yes_no_topic, other_user) -> None:
    make_comment(db_session, yes_no_topic, other_user)
    make_comment(db_session, yes_no_topic, other_user, minutes=1)

    item = client.get("/api/topics").json()["data"][0]
    assert item["commentCount"] == 2
    assert item["voteCount"] == 0


def test_get_topic(client, yes_no_topic) -> None:
    response = client.get(f"/api/topics/{yes_no_topic.slug}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == yes_no_topic.title
    assert response.json()["userVote"] is None


def test_get_missing_topic(client) -> None:
    response = client.get("/api/topics/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Tema não encontrado"}


def test_hidden_topic_visible_to_moderators_only(
    client, db_session, other_user, auth_token, mod_auth_token
) -> None:
    topic = make_topic(db_session, other_user, status=TopicStatus.HIDDEN)

    assert client.get(f"/api/topics/{topic.slug}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/topics/{topic.slug}", headers=auth_token).status_code == 404
    response = client.get(f"/api/topics/{topic.slug}", headers=mod_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "HIDDEN"


def test_get_multi_choice_topic_with_user_votes(client, auth_token, multi_topic) -> None:
    a = multi_topic.options[0]
    client.post(f"/api/topics/{multi_topic.slug}/vote", json={"optionIds": [a.id]}, headers=auth_token)

    data = client.get(f"/api/topics/{multi_topic.slug}", headers=auth_token).json()
    assert [option["id"] for option in data["options"]] == [o.id for o in multi_topic.options]
    assert data["userVoteOptions"] == [a.id]
    assert data["optionVoteStats"] == {str(a.id): 1}
    assert data["totalVotes"] == 1
    assert data["voteCount"] == 1


def test_moderator_locks_topic(client, mod_auth_token, yes_no_topic, auth_token) -> None:
    response = client.patch(
        f"/api/topics/{yes_no_topic.slug}",
        json={"status": "LOCKED"},
        headers=mod_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "LOCKED"

    vote = client.post(f"/api/topics/{yes_no_topic.slug}/vote", json={"vote": "SIM"}, headers=auth_token)
    assert vote.status_code == status.HTTP_403_FORBIDDEN


def test_user_cannot_moderate_topic(client, auth_token, yes_no_topic) -> None:
    response = client.patch(
        f"/api/topics/{yes_no_topic.slug}",
        json={"status": "HIDDEN"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_report_topic(client, auth_token, other_auth_token, yes_no_topic) -> None:
    client.post(f"/api/topics/{yes_no_topic.slug}/report", headers=auth_token)
    response = client.post(f"/api/topics/{yes_no_topic.slug}/report", headers=other_auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": yes_no_topic.id, "reportCount": 2}


def test_next_topic_prefers_shared_tag(client, db_session, other_user) -> None:
    current = make_topic(db_session, other_user, tags=["science"])
    related = make_topic(db_session, other_user, tags=["science", "space"])
    make_topic(db_session, other_user, tags=["sports"])
    make_topic(db_session, other_user, tags=["science"], language="en")

    response = client.get(f"/api/topics/{current.slug}/next")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"slug": related.slug, "title": related.title}


def test_next_topic_falls_back_to_language(client, db_session, other_user) -> None:
    current = make_topic(db_session, other_user, tags=["science"])
    make_topic(db_session, other_user, tags=["history"], language="en")
    same_language = make_topic(db_session, other_user, tags=["sports"])

    response = client.get(f"/api/topics/{current.slug}/next")
    assert response.json()["slug"] == same_language.slug


def test_next_topic_when_alone(client, db_session, other_user) -> None:
    current = make_topic(db_session, other_user, type_=TopicType.YES_NO)
    response = client.get(f"/api/topics/{current.slug}/next")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None


def test_list_topics_huge_page(client, yes_no_topic) -> None:
    response = client.get("/api/topics?page=100000000000000000000&perPage=1")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == []


def test_topic_language_defaults_from_settings(client, auth_token, monkeypatch) -> None:
    from tribuna.core.settings import settings

    monkeypatch.setattr(settings, "default_language", "es")
    response = client.post("/api/topics", json=_topic_payload(), headers=auth_token)
    assert response.json()["language"] == "es"

    explicit = client.post("/api/topics", json=_topic_payload(language="en"), headers=auth_token)
    assert explicit.json()["language"] == "en"
