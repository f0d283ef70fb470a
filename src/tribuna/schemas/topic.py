"""Topic-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from tribuna.core.settings import settings
from tribuna.models import TopicStatus, TopicType

from .common import ApiModel, AuthorSummary, Pagination
from .vote import VoteStats


class TopicOptionCreate(ApiModel):
    label: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    order: int = Field(0, ge=0)


class TopicCreate(ApiModel):
    """Schema for creating a new topic."""

    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20, max_length=5000)
    tags: list[str] = Field(..., min_length=1, max_length=5)
    language: str = Field(
        default_factory=lambda: settings.default_language, min_length=2, max_length=8
    )
    type: TopicType = TopicType.YES_NO
    allow_multiple_votes: bool = False
    max_choices: int = Field(1, ge=1)
    options: list[TopicOptionCreate] | None = Field(None, max_length=10)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, tags: list[str]) -> list[str]:
        cleaned = [tag.strip() for tag in tags]
        if any(not 2 <= len(tag) <= 30 for tag in cleaned):
            raise ValueError("tags must have between 2 and 30 characters")
        return cleaned

    @model_validator(mode="after")
    def _check_options(self) -> TopicCreate:
        if self.type == TopicType.MULTI_CHOICE:
            if not self.options or len(self.options) < 2:
                raise ValueError("multi-choice topics need at least two options")
            if self.max_choices > len(self.options):
                raise ValueError("max_choices cannot exceed the number of options")
            if not self.allow_multiple_votes and self.max_choices != 1:
                raise ValueError("single-choice topics must have max_choices = 1")
        else:
            self.allow_multiple_votes = False
            self.max_choices = 1
            self.options = None
        return self


class TopicStatusUpdate(ApiModel):
    """Moderator status change."""

    status: TopicStatus


class TopicOptionResponse(ApiModel):
    id: int
    label: str
    description: str | None = None
    order: int


class TopicSummary(ApiModel):
    """Topic information shown in listings."""

    id: int
    slug: str
    title: str
    description: str
    language: str
    tags: list[str]
    type: TopicType
    status: TopicStatus
    allow_multiple_votes: bool
    max_choices: int
    report_count: int
    created_at: datetime
    created_by: AuthorSummary
    comment_count: int = 0
    vote_count: int = 0


class TopicDetail(TopicSummary):
    """Topic with its options and the current vote snapshot."""

    options: list[TopicOptionResponse] = Field(default_factory=list)
    vote_stats: VoteStats
    option_vote_stats: dict[int, int] = Field(default_factory=dict)
    total_votes: int = 0
    user_vote: str | None = None
    user_vote_options: list[int] = Field(default_factory=list)


class TopicPage(ApiModel):
    data: list[TopicSummary]
    pagination: Pagination


class TopicReportResponse(ApiModel):
    id: int
    report_count: int


class NextTopic(ApiModel):
    slug: str
    title: str
