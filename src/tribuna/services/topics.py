"""Service-level helpers for topics."""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from tribuna.db.time import as_utc
from tribuna.models import Comment, Topic, TopicOption, TopicStatus, TopicVote, User
from tribuna.schemas.common import AuthorSummary
from tribuna.schemas.topic import NextTopic, TopicCreate, TopicSummary
from tribuna.services.karma import KARMA_POINTS, record_activity
from tribuna.utils.pagination import PageRequest
from tribuna.utils.slug import generate_slug, generate_unique_slug

logger = logging.getLogger(__name__)

# Candidates scanned when looking for a topic that shares a tag.
RELATED_TOPIC_WINDOW = 200


def get_topic_by_slug(db: Session, slug: str) -> Topic | None:
    return (
        db.query(Topic)
        .options(selectinload(Topic.options), selectinload(Topic.created_by))
        .filter(Topic.slug == slug)
        .first()
    )


def create_topic(db: Session, author: User, data: TopicCreate) -> Topic:
    """Persist a topic and its options under a unique slug.

    Args:
        db: Database session.
        author: User creating the topic.
        data: Validated creation payload.

    Returns:
        The committed Topic.
    """
    slug = generate_unique_slug(
        generate_slug(data.title),
        lambda candidate: db.query(Topic.id).filter(Topic.slug == candidate).first() is not None,
    )
    topic = Topic(
        slug=slug,
        title=data.title,
        description=data.description,
        language=data.language,
        tags=data.tags,
        type=data.type,
        allow_multiple_votes=data.allow_multiple_votes,
        max_choices=data.max_choices,
        created_by_id=author.id,
    )
    for option in data.options or []:
        topic.options.append(
            TopicOption(label=option.label, description=option.description, order=option.order)
        )

    try:
        db.add(topic)
        record_activity(db, author, KARMA_POINTS["CREATE_TOPIC"])
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(topic)
    logger.info("User %s created topic %s", author.id, topic.slug)
    return topic


def topic_counts(db: Session, topic_ids: list[int]) -> tuple[dict[int, int], dict[int, int]]:
    """Return (comment counts, vote counts) keyed by topic id."""
    if not topic_ids:
        return {}, {}
    comments = dict(
        db.query(Comment.topic_id, func.count(Comment.id))
        .filter(Comment.topic_id.in_(topic_ids))
        .group_by(Comment.topic_id)
        .all()
    )
    votes = dict(
        db.query(TopicVote.topic_id, func.count(TopicVote.id))
        .filter(TopicVote.topic_id.in_(topic_ids))
        .group_by(TopicVote.topic_id)
        .all()
    )
    return comments, votes


def to_topic_summary(topic: Topic, *, comment_count: int = 0, vote_count: int = 0) -> TopicSummary:
    return TopicSummary(
        id=topic.id,
        slug=topic.slug,
        title=topic.title,
        description=topic.description,
        language=topic.language,
        tags=list(topic.tags or []),
        type=topic.type,
        status=topic.status,
        allow_multiple_votes=topic.allow_multiple_votes,
        max_choices=topic.max_choices,
        report_count=topic.report_count,
        created_at=as_utc(topic.created_at),
        created_by=AuthorSummary.model_validate(topic.created_by),
        comment_count=comment_count,
        vote_count=vote_count,
    )


def list_active_topics(
    db: Session,
    page: PageRequest,
    *,
    tag: str | None = None,
) -> tuple[list[TopicSummary], int]:
    """List ACTIVE topics, newest first, optionally restricted to a tag."""
    query = db.query(Topic).filter(Topic.status == TopicStatus.ACTIVE)
    if tag:
        # JSON containment is not portable across backends; filter the tag in Python.
        matching = [
            topic_id
            for topic_id, tags in db.query(Topic.id, Topic.tags).filter(
                Topic.status == TopicStatus.ACTIVE
            )
            if tag in (tags or [])
        ]
        query = query.filter(Topic.id.in_(matching))

    total = query.count()
    topics = (
        query.options(selectinload(Topic.created_by))
        .order_by(Topic.created_at.desc(), Topic.id.desc())
        .offset(page.offset)
        .limit(page.per_page)
        .all()
    )
    comments, votes = topic_counts(db, [topic.id for topic in topics])
    return [
        to_topic_summary(
            topic,
            comment_count=comments.get(topic.id, 0),
            vote_count=votes.get(topic.id, 0),
        )
        for topic in topics
    ], total


def find_next_topic(db: Session, current: Topic) -> NextTopic | None:
    """Pick the topic to show after ``current``.

    Preference: the newest ACTIVE topic in the same language sharing a tag,
    then the newest in the same language, then the newest overall.
    """
    base = (
        db.query(Topic)
        .filter(Topic.id != current.id, Topic.status == TopicStatus.ACTIVE)
        .order_by(Topic.created_at.desc(), Topic.id.desc())
    )
    same_language = base.filter(Topic.language == current.language)

    current_tags = set(current.tags or [])
    if current_tags:
        for candidate in same_language.limit(RELATED_TOPIC_WINDOW):
            if current_tags.intersection(candidate.tags or []):
                return NextTopic(slug=candidate.slug, title=candidate.title)

    candidate = same_language.first() or base.first()
    if candidate is None:
        return None
    return NextTopic(slug=candidate.slug, title=candidate.title)
