"""Public user profile schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from tribuna.models import Side, UserRole

from .common import ApiModel


class AchievementSummary(ApiModel):
    key: str
    name: str
    description: str | None = None
    unlocked_at: datetime


class ProfileTopic(ApiModel):
    """One of the user's ACTIVE topics with its activity counts."""

    id: int
    slug: str
    title: str
    tags: list[str]
    created_at: datetime
    comment_count: int = 0
    vote_count: int = 0


class TopicRef(ApiModel):
    slug: str
    title: str


class ProfileComment(ApiModel):
    """One of the user's ACTIVE comments and the up-votes it received."""

    id: int
    content: str
    side: Side | None = None
    created_at: datetime
    topic: TopicRef
    votes: int = 0


class ProfileStats(ApiModel):
    total_topics: int
    total_comments: int
    total_votes_received: int


class UserProfile(ApiModel):
    """Public profile returned by ``GET /users/{username}``."""

    id: int
    username: str
    name: str | None = None
    image: str | None = None
    role: UserRole
    karma: int
    created_at: datetime
    achievements: list[AchievementSummary] = Field(default_factory=list)
    topics: list[ProfileTopic] = Field(default_factory=list)
    comments: list[ProfileComment] = Field(default_factory=list)
    stats: ProfileStats
