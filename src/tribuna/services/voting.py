"""Topic vote aggregation and reconciliation.

Aggregates are always computed from ``topic_vote`` rows at request time. Writes
follow the topic type: yes/no topics keep a single row per user (upsert), while
multi-choice topics replace the user's whole selection in one transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import func
from sqlalchemy.orm import Session

from tribuna.core import messages
from tribuna.models import (
    BinaryChoice,
    Topic,
    TopicOption,
    TopicStatus,
    TopicVote,
    User,
)
from tribuna.services.errors import (
    ChoiceLimitError,
    InvalidOptionsError,
    TopicLockedError,
    VoteShapeError,
)
from tribuna.services.karma import KARMA_POINTS, record_activity

logger = logging.getLogger(__name__)


@dataclass
class VoteSnapshot:
    """Current vote totals for a topic plus the caller's own selection."""

    vote_stats: dict[str, int]
    option_vote_stats: dict[int, int] = field(default_factory=dict)
    total_votes: int = 0
    user_vote: BinaryChoice | None = None
    user_vote_options: list[int] = field(default_factory=list)


def empty_binary_stats() -> dict[str, int]:
    return {choice.value: 0 for choice in BinaryChoice} | {"total": 0}


def binary_vote_stats(db: Session, topic_id: int) -> dict[str, int]:
    """Count yes/no/depends votes for a topic.

    Buckets without rows stay at zero, so an all-zero record is the empty state.
    """
    rows = (
        db.query(TopicVote.vote, func.count(TopicVote.id))
        .filter(
            TopicVote.topic_id == topic_id,
            TopicVote.option_id.is_(None),
            TopicVote.vote.is_not(None),
        )
        .group_by(TopicVote.vote)
        .all()
    )
    stats = empty_binary_stats()
    for choice, count in rows:
        stats[BinaryChoice(choice).value] = count
        stats["total"] += count
    return stats


def option_vote_stats(db: Session, topic_id: int) -> tuple[dict[int, int], int]:
    """Count votes per option for a multi-choice topic.

    Returns:
        A mapping containing only options with at least one vote, and the sum
        across all options. Callers default missing option ids to zero.
    """
    rows = (
        db.query(TopicVote.option_id, func.count(TopicVote.id))
        .filter(TopicVote.topic_id == topic_id, TopicVote.option_id.is_not(None))
        .group_by(TopicVote.option_id)
        .all()
    )
    counts = {option_id: count for option_id, count in rows}
    return counts, sum(counts.values())


def user_votes(db: Session, topic_id: int, user_id: int) -> list[TopicVote]:
    return (
        db.query(TopicVote)
        .filter(TopicVote.topic_id == topic_id, TopicVote.user_id == user_id)
        .all()
    )


def vote_snapshot(db: Session, topic: Topic, user: User | None = None) -> VoteSnapshot:
    """Build the type-specific vote snapshot returned by topic and vote endpoints."""
    mine = user_votes(db, topic.id, user.id) if user is not None else []

    if topic.is_multi_choice:
        counts, total = option_vote_stats(db, topic.id)
        stats = empty_binary_stats()
        stats["total"] = total
        return VoteSnapshot(
            vote_stats=stats,
            option_vote_stats=counts,
            total_votes=total,
            user_vote_options=sorted(v.option_id for v in mine if v.option_id is not None),
        )

    stats = binary_vote_stats(db, topic.id)
    user_vote = next((v.vote for v in mine if v.option_id is None and v.vote), None)
    return VoteSnapshot(vote_stats=stats, total_votes=stats["total"], user_vote=user_vote)


def _ensure_votable(topic: Topic) -> None:
    if topic.status == TopicStatus.LOCKED:
        logger.info("Rejected vote on locked topic %s", topic.slug)
        raise TopicLockedError()


def validate_option_selection(db: Session, topic: Topic, option_ids: Sequence[int]) -> list[int]:
    """Check a multi-choice selection against the topic rules.

    Returns:
        The de-duplicated selection, in submission order.

    Raises:
        InvalidOptionsError: If the selection is empty or references foreign options.
        ChoiceLimitError: If the selection breaks ``allow_multiple_votes`` or ``max_choices``.
    """
    selection = list(dict.fromkeys(option_ids))
    if not selection:
        raise InvalidOptionsError()

    owned = {
        option_id
        for (option_id,) in db.query(TopicOption.id).filter(
            TopicOption.topic_id == topic.id,
            TopicOption.id.in_(selection),
        )
    }
    if len(owned) != len(selection):
        raise InvalidOptionsError()

    if not topic.allow_multiple_votes and len(selection) > 1:
        raise ChoiceLimitError(messages.choice_limit(1, topic.language))
    if len(selection) > topic.max_choices:
        raise ChoiceLimitError(messages.choice_limit(topic.max_choices, topic.language))
    return selection


def _reward_first_vote(db: Session, topic: Topic, voter: User) -> None:
    """Karma for a user's first vote on a topic, plus the author's share."""
    record_activity(db, voter, KARMA_POINTS["VOTE_ON_TOPIC"])
    if topic.created_by_id != voter.id:
        author = db.get(User, topic.created_by_id)
        if author is not None:
            record_activity(db, author, KARMA_POINTS["RECEIVE_TOPIC_VOTE"])


def cast_binary_vote(db: Session, topic: Topic, user: User, choice: BinaryChoice) -> None:
    """Set the user's yes/no/depends vote, replacing any previous value."""
    _ensure_votable(topic)
    if topic.is_multi_choice:
        raise VoteShapeError()

    existing = (
        db.query(TopicVote)
        .filter(
            TopicVote.topic_id == topic.id,
            TopicVote.user_id == user.id,
            TopicVote.option_id.is_(None),
        )
        .first()
    )
    try:
        if existing is None:
            db.add(TopicVote(user_id=user.id, topic_id=topic.id, vote=choice))
            _reward_first_vote(db, topic, user)
        else:
            existing.vote = choice
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.debug("User %s voted %s on topic %s", user.id, choice.value, topic.slug)


def cast_option_votes(db: Session, topic: Topic, user: User, option_ids: Sequence[int]) -> None:
    """Replace the user's whole selection on a multi-choice topic.

    The delete and the inserts share one transaction, so a failure leaves the
    previous selection intact.
    """
    _ensure_votable(topic)
    if not topic.is_multi_choice:
        raise VoteShapeError()
    selection = validate_option_selection(db, topic, option_ids)

    try:
        removed = (
            db.query(TopicVote)
            .filter(TopicVote.topic_id == topic.id, TopicVote.user_id == user.id)
            .delete(synchronize_session=False)
        )
        db.add_all(
            TopicVote(user_id=user.id, topic_id=topic.id, option_id=option_id)
            for option_id in selection
        )
        if not removed:
            _reward_first_vote(db, topic, user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.debug("User %s selected options %s on topic %s", user.id, selection, topic.slug)


def clear_votes(db: Session, topic: Topic, user: User) -> int:
    """Delete every vote row the user holds on the topic.

    Clearing an absent vote is a no-op.

    Returns:
        Number of rows removed.
    """
    try:
        removed = (
            db.query(TopicVote)
            .filter(TopicVote.topic_id == topic.id, TopicVote.user_id == user.id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.debug("User %s cleared %d vote(s) on topic %s", user.id, removed, topic.slug)
    return removed
