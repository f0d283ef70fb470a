"""Karma awards and achievement unlocking."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from tribuna.models import (
    Achievement,
    Comment,
    Topic,
    TopicVote,
    User,
    UserAchievement,
)

logger = logging.getLogger(__name__)

KARMA_POINTS = {
    "CREATE_TOPIC": 10,
    "CREATE_COMMENT": 5,
    "VOTE_ON_TOPIC": 2,
    "RECEIVE_COMMENT_VOTE": 1,
    "RECEIVE_TOPIC_VOTE": 2,
}


class ActivityCounts:
    """Lazily computed per-user activity totals used by achievement rules."""

    def __init__(self, db: Session, user: User) -> None:
        self._db = db
        self._user = user
        self._cache: dict[str, int] = {}

    def _count(self, key: str, query: Callable[[], int]) -> int:
        if key not in self._cache:
            self._cache[key] = query()
        return self._cache[key]

    @property
    def topics_voted(self) -> int:
        # Distinct topics: a multi-choice selection of several options is one vote.
        return self._count(
            "votes",
            lambda: self._db.query(func.count(func.distinct(TopicVote.topic_id)))
            .filter(TopicVote.user_id == self._user.id)
            .scalar() or 0,
        )

    @property
    def topics(self) -> int:
        return self._count(
            "topics",
            lambda: self._db.query(func.count(Topic.id))
            .filter(Topic.created_by_id == self._user.id)
            .scalar() or 0,
        )

    @property
    def comments(self) -> int:
        return self._count(
            "comments",
            lambda: self._db.query(func.count(Comment.id))
            .filter(Comment.user_id == self._user.id)
            .scalar() or 0,
        )

    @property
    def karma(self) -> int:
        return self._user.karma


# achievement key -> (activity attribute, threshold)
ACHIEVEMENT_RULES: dict[str, tuple[str, int]] = {
    "first_vote": ("topics_voted", 1),
    "active_voter": ("topics_voted", 10),
    "voting_enthusiast": ("topics_voted", 50),
    "debate_starter": ("topics", 1),
    "topic_creator": ("topics", 5),
    "debate_master": ("topics", 20),
    "first_comment": ("comments", 1),
    "active_commenter": ("comments", 10),
    "discussion_expert": ("comments", 50),
    "discussion_master": ("comments", 100),
    "karma_100": ("karma", 100),
    "karma_500": ("karma", 500),
    "karma_1000": ("karma", 1000),
}


def award_karma(user: User, points: int) -> None:
    user.karma = (user.karma or 0) + points


def check_achievements(db: Session, user: User) -> list[str]:
    """Unlock every catalogued achievement whose threshold the user now meets.

    Returns:
        Keys of the achievements unlocked by this call.
    """
    unlocked = {
        key
        for (key,) in db.query(Achievement.key)
        .join(UserAchievement, UserAchievement.achievement_id == Achievement.id)
        .filter(UserAchievement.user_id == user.id)
    }
    pending = (
        db.query(Achievement)
        .filter(
            Achievement.key.in_(list(ACHIEVEMENT_RULES)),
            Achievement.key.not_in(list(unlocked)),
        )
        .all()
    )
    if not pending:
        return []

    counts = ActivityCounts(db, user)
    new_keys = []
    for achievement in pending:
        attribute, threshold = ACHIEVEMENT_RULES[achievement.key]
        if getattr(counts, attribute) >= threshold:
            db.add(UserAchievement(user_id=user.id, achievement_id=achievement.id))
            new_keys.append(achievement.key)

    if new_keys:
        logger.info("User %s unlocked achievements: %s", user.id, ", ".join(new_keys))
    return new_keys


def record_activity(db: Session, user: User, points: int) -> list[str]:
    """Award karma for an action and re-check achievements.

    Pending changes are flushed so the counts include the triggering row; the
    caller owns the commit.
    """
    award_karma(user, points)
    db.flush()
    return check_achievements(db, user)
