# src/tribuna/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import (
    CommentCreate,
    CommentModerate,
    CommentPage,
    CommentResponse,
    CommentScore,
    CommentUpdate,
    CommentVoteRequest,
    MessageResponse,
    ReplyResponse,
)
from .common import ERROR_RESPONSES, AuthorSummary, ErrorResponse, Pagination
from .topic import (
    NextTopic,
    TopicCreate,
    TopicDetail,
    TopicOptionCreate,
    TopicOptionResponse,
    TopicPage,
    TopicReportResponse,
    TopicStatusUpdate,
    TopicSummary,
)
from .user import (
    AchievementSummary,
    ProfileComment,
    ProfileStats,
    ProfileTopic,
    TopicRef,
    UserProfile,
)
from .vote import VoteRequest, VoteResponse, VoteStats

__all__ = [
    "CommentCreate", "CommentModerate", "CommentPage", "CommentResponse",
    "CommentScore", "CommentUpdate", "CommentVoteRequest", "MessageResponse",
    "ReplyResponse",
    "ERROR_RESPONSES", "AuthorSummary", "ErrorResponse", "Pagination",
    "NextTopic", "TopicCreate", "TopicDetail", "TopicOptionCreate",
    "TopicOptionResponse", "TopicPage", "TopicReportResponse",
    "TopicStatusUpdate", "TopicSummary",
    "AchievementSummary", "ProfileComment", "ProfileStats", "ProfileTopic",
    "TopicRef", "UserProfile",
    "VoteRequest", "VoteResponse", "VoteStats",
]
