# src/tribuna/models/topic.py
"""Models for debate topics, their options and the votes cast on them."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tribuna.db.session import Base
from tribuna.db.time import utcnow


class TopicType(str, enum.Enum):
    YES_NO = "YES_NO"
    MULTI_CHOICE = "MULTI_CHOICE"


class TopicStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    HIDDEN = "HIDDEN"
    LOCKED = "LOCKED"


class BinaryChoice(str, enum.Enum):
    SIM = "SIM"
    NAO = "NAO"
    DEPENDE = "DEPENDE"


class Topic(Base):
    """A debatable question, either yes/no/depends or multiple choice.

    Topics are never hard-deleted; moderation only moves them between statuses.
    """

    __tablename__ = "topic"
    __table_args__ = (
        CheckConstraint("max_choices >= 1", name="ck_topic_max_choices"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(8), nullable=False, default="pt")
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    type: Mapped[TopicType] = mapped_column(
        SAEnum(TopicType, native_enum=False, length=16),
        nullable=False,
        default=TopicType.YES_NO,
    )
    status: Mapped[TopicStatus] = mapped_column(
        SAEnum(TopicStatus, native_enum=False, length=8),
        nullable=False,
        default=TopicStatus.ACTIVE,
    )
    allow_multiple_votes: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_choices: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    report_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    created_by = relationship("User")
    options: Mapped[list[TopicOption]] = relationship(
        "TopicOption",
        back_populates="topic",
        order_by="TopicOption.order",
        cascade="all, delete-orphan",
    )

    @property
    def is_multi_choice(self) -> bool:
        return self.type == TopicType.MULTI_CHOICE


class TopicOption(Base):
    """One selectable choice within a multi-choice topic."""

    __tablename__ = "topic_option"
    __table_args__ = (Index("ix_topic_option_topic_id", "topic_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("topic.id", ondelete="CASCADE"), nullable=False
    )
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    topic: Mapped[Topic] = relationship("Topic", back_populates="options")


class TopicVote(Base):
    """A user's recorded choice on a topic.

    Yes/no topics store the choice in ``vote`` with ``option_id`` NULL; multi-choice
    topics store one row per selected option and leave ``vote`` NULL.
    """

    __tablename__ = "topic_vote"
    __table_args__ = (
        UniqueConstraint("user_id", "topic_id", "option_id", name="uq_topic_vote_user_option"),
        # NULLs are distinct in unique constraints, so the yes/no singleton needs its own index.
        Index(
            "uq_topic_vote_user_binary",
            "user_id",
            "topic_id",
            unique=True,
            sqlite_where=text("option_id IS NULL"),
            postgresql_where=text("option_id IS NULL"),
        ),
        Index("ix_topic_vote_topic_id", "topic_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    topic_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("topic.id", ondelete="CASCADE"), nullable=False
    )
    option_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("topic_option.id", ondelete="CASCADE"), nullable=True
    )
    vote: Mapped[BinaryChoice | None] = mapped_column(
        SAEnum(BinaryChoice, native_enum=False, length=8),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
