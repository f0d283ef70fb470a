# src/tribuna/models/comment.py
"""Models for topic comments and their quality votes."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tribuna.db.session import Base
from tribuna.db.time import utcnow


class CommentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    HIDDEN = "HIDDEN"
    DELETED = "DELETED"


class Side(str, enum.Enum):
    AFAVOR = "AFAVOR"
    CONTRA = "CONTRA"


class Comment(Base):
    """User-authored argument attached to a topic.

    Deletion is logical: the row stays and ``status`` becomes DELETED.
    Only top-level comments carry ``side`` or ``option_id``.
    """

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_topic_parent_status", "topic_id", "parent_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("topic.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comment.id"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    side: Mapped[Side | None] = mapped_column(
        SAEnum(Side, native_enum=False, length=8), nullable=True
    )
    option_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("topic_option.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[CommentStatus] = mapped_column(
        SAEnum(CommentStatus, native_enum=False, length=8),
        nullable=False,
        default=CommentStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user = relationship("User")
    replies: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.created_at",
    )
    parent: Mapped[Comment | None] = relationship(
        "Comment",
        back_populates="replies",
        remote_side="Comment.id",
    )


class CommentVote(Base):
    """Quality up-vote on a comment; one per user and comment."""

    __tablename__ = "comment_vote"
    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_vote_user_comment"),
        CheckConstraint("value IN (1, -1)", name="ck_comment_vote_value"),
        Index("ix_comment_vote_comment_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    comment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("comment.id", ondelete="CASCADE"), nullable=False
    )
    # Only +1 is issued today.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
