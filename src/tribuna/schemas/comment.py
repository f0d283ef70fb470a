"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from tribuna.models import CommentStatus, Side

from .common import ApiModel, AuthorSummary, Pagination


class CommentCreate(ApiModel):
    """Schema for creating a comment or a reply."""

    content: str = Field(..., min_length=1, max_length=3000)
    topic_id: int
    parent_id: int | None = None
    side: Side | None = None
    option_id: int | None = None


class CommentUpdate(ApiModel):
    """Owner edit of the comment body."""

    content: str = Field(..., min_length=1, max_length=3000)


class CommentModerate(ApiModel):
    """Moderator status change."""

    status: CommentStatus


class CommentVoteRequest(ApiModel):
    value: Literal[1]


class CommentScore(ApiModel):
    id: int
    score: int
    voted: bool


class ReplyResponse(ApiModel):
    """A reply nested under a top-level comment."""

    id: int
    topic_id: int
    parent_id: int | None
    content: str
    status: CommentStatus
    created_at: datetime
    updated_at: datetime
    user: AuthorSummary
    vote_count: int = 0


class CommentResponse(ReplyResponse):
    """A comment with its counts and active replies."""

    side: Side | None = None
    option_id: int | None = None
    reply_count: int = 0
    replies: list[ReplyResponse] = Field(default_factory=list)


class CommentPage(ApiModel):
    data: list[CommentResponse]
    pagination: Pagination


class MessageResponse(ApiModel):
    message: str
