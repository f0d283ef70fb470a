# src/tribuna/models/__init__.py
"""SQLAlchemy models for the Tribuna application."""

from .comment import Comment, CommentStatus, CommentVote, Side
from .topic import BinaryChoice, Topic, TopicOption, TopicStatus, TopicType, TopicVote
from .user import Achievement, User, UserAchievement, UserRole

__all__ = [
    "Achievement", "User", "UserAchievement", "UserRole",
    "BinaryChoice", "Topic", "TopicOption", "TopicStatus", "TopicType", "TopicVote",
    "Comment", "CommentStatus", "CommentVote", "Side",
]
