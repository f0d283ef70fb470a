"""Public profile assembly."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from tribuna.db.time import as_utc
from tribuna.models import (
    Achievement,
    Comment,
    CommentStatus,
    CommentVote,
    Topic,
    TopicStatus,
    User,
    UserAchievement,
)
from tribuna.schemas.user import (
    AchievementSummary,
    ProfileComment,
    ProfileStats,
    ProfileTopic,
    TopicRef,
    UserProfile,
)
from tribuna.services.topics import topic_counts

logger = logging.getLogger(__name__)

# Newest topics and comments shown on a profile.
PROFILE_ITEM_LIMIT = 50


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def unlocked_achievements(db: Session, user_id: int) -> list[AchievementSummary]:
    rows = (
        db.query(Achievement, UserAchievement.unlocked_at)
        .join(UserAchievement, UserAchievement.achievement_id == Achievement.id)
        .filter(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.unlocked_at.asc(), Achievement.id.asc())
        .all()
    )
    return [
        AchievementSummary(
            key=achievement.key,
            name=achievement.name,
            description=achievement.description,
            unlocked_at=as_utc(unlocked_at),
        )
        for achievement, unlocked_at in rows
    ]


def profile_topics(db: Session, user_id: int) -> list[ProfileTopic]:
    topics = (
        db.query(Topic)
        .filter(Topic.created_by_id == user_id, Topic.status == TopicStatus.ACTIVE)
        .order_by(Topic.created_at.desc(), Topic.id.desc())
        .limit(PROFILE_ITEM_LIMIT)
        .all()
    )
    comments, votes = topic_counts(db, [topic.id for topic in topics])
    return [
        ProfileTopic(
            id=topic.id,
            slug=topic.slug,
            title=topic.title,
            tags=list(topic.tags or []),
            created_at=as_utc(topic.created_at),
            comment_count=comments.get(topic.id, 0),
            vote_count=votes.get(topic.id, 0),
        )
        for topic in topics
    ]


def profile_comments(db: Session, user_id: int) -> list[ProfileComment]:
    """Return the user's newest ACTIVE comments with the sum of their vote values."""
    rows = (
        db.query(Comment, Topic.slug, Topic.title)
        .join(Topic, Topic.id == Comment.topic_id)
        .filter(Comment.user_id == user_id, Comment.status == CommentStatus.ACTIVE)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(PROFILE_ITEM_LIMIT)
        .all()
    )
    comment_ids = [comment.id for comment, _, _ in rows]
    scores: dict[int, int] = {}
    if comment_ids:
        scores = dict(
            db.query(CommentVote.comment_id, func.sum(CommentVote.value))
            .filter(CommentVote.comment_id.in_(comment_ids))
            .group_by(CommentVote.comment_id)
            .all()
        )
    return [
        ProfileComment(
            id=comment.id,
            content=comment.content,
            side=comment.side,
            created_at=as_utc(comment.created_at),
            topic=TopicRef(slug=slug, title=title),
            votes=int(scores.get(comment.id) or 0),
        )
        for comment, slug, title in rows
    ]


def build_user_profile(db: Session, user: User) -> UserProfile:
    """Assemble a user's public profile, karma and unlocked achievements."""
    topics = profile_topics(db, user.id)
    comments = profile_comments(db, user.id)
    return UserProfile(
        id=user.id,
        username=user.username,
        name=user.name,
        image=user.image,
        role=user.role,
        karma=user.karma,
        created_at=as_utc(user.created_at),
        achievements=unlocked_achievements(db, user.id),
        topics=topics,
        comments=comments,
        stats=ProfileStats(
            total_topics=len(topics),
            total_comments=len(comments),
            total_votes_received=sum(comment.votes for comment in comments),
        ),
    )
