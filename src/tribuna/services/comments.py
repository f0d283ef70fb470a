"""Comment listing and ranking.

``top`` ordering sorts by an up-vote count that is not stored on the comment,
so it runs in two phases: a grouped join selects one page of comment ids in
rank order, then a second query hydrates those ids with their authors. Replies
and counts are loaded with one grouped query each.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Literal

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from tribuna.db.time import as_utc
from tribuna.models import Comment, CommentStatus, CommentVote, Side
from tribuna.schemas.comment import CommentResponse, ReplyResponse
from tribuna.schemas.common import AuthorSummary
from tribuna.utils.pagination import PageRequest

logger = logging.getLogger(__name__)

SortOrder = Literal["top", "new"]


def parse_sort(raw: str | None) -> SortOrder:
    """Map the ``sort`` query parameter to an ordering; anything unknown ranks by votes."""
    return "new" if raw == "new" else "top"


def top_level_filter(
    topic_id: int,
    *,
    side: Side | None = None,
    option_id: int | None = None,
) -> list:
    """Predicate shared by the page query and the total count."""
    clauses = [
        Comment.topic_id == topic_id,
        Comment.parent_id.is_(None),
        Comment.status == CommentStatus.ACTIVE,
    ]
    if side is not None:
        clauses.append(Comment.side == side)
    if option_id is not None:
        clauses.append(Comment.option_id == option_id)
    return clauses


def count_top_level(db: Session, clauses: Sequence) -> int:
    return db.query(func.count(Comment.id)).filter(*clauses).scalar() or 0


def ranked_comment_ids(
    db: Session,
    clauses: Sequence,
    sort: SortOrder,
    page: PageRequest,
) -> list[int]:
    """Select one page of comment ids in display order.

    ``new`` orders by creation time; ``top`` by up-vote count with newer
    comments first on ties.
    """
    if sort == "new":
        query = db.query(Comment.id).filter(*clauses).order_by(
            Comment.created_at.desc(), Comment.id.desc()
        )
    else:
        vote_count = func.count(CommentVote.id)
        query = (
            db.query(Comment.id)
            .outerjoin(CommentVote, CommentVote.comment_id == Comment.id)
            .filter(*clauses)
            .group_by(Comment.id, Comment.created_at)
            .order_by(vote_count.desc(), Comment.created_at.desc(), Comment.id.desc())
        )
    return [comment_id for (comment_id,) in query.offset(page.offset).limit(page.per_page)]


def vote_counts(db: Session, comment_ids: Iterable[int]) -> dict[int, int]:
    ids = list(comment_ids)
    if not ids:
        return {}
    rows = (
        db.query(CommentVote.comment_id, func.count(CommentVote.id))
        .filter(CommentVote.comment_id.in_(ids))
        .group_by(CommentVote.comment_id)
        .all()
    )
    return dict(rows)


def active_reply_counts(db: Session, comment_ids: Iterable[int]) -> dict[int, int]:
    ids = list(comment_ids)
    if not ids:
        return {}
    rows = (
        db.query(Comment.parent_id, func.count(Comment.id))
        .filter(Comment.parent_id.in_(ids), Comment.status == CommentStatus.ACTIVE)
        .group_by(Comment.parent_id)
        .all()
    )
    return dict(rows)


def load_active_replies(db: Session, parent_ids: Sequence[int]) -> dict[int, list[Comment]]:
    """Return ACTIVE replies grouped by parent, oldest first."""
    if not parent_ids:
        return {}
    replies = (
        db.query(Comment)
        .options(selectinload(Comment.user))
        .filter(Comment.parent_id.in_(parent_ids), Comment.status == CommentStatus.ACTIVE)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    grouped: dict[int, list[Comment]] = defaultdict(list)
    for reply in replies:
        grouped[reply.parent_id].append(reply)
    return grouped


def to_reply_response(comment: Comment, votes: int) -> ReplyResponse:
    return ReplyResponse(
        id=comment.id,
        topic_id=comment.topic_id,
        parent_id=comment.parent_id,
        content=comment.content,
        status=comment.status,
        created_at=as_utc(comment.created_at),
        updated_at=as_utc(comment.updated_at),
        user=AuthorSummary.model_validate(comment.user),
        vote_count=votes,
    )


def to_comment_response(
    comment: Comment,
    *,
    votes: int = 0,
    reply_count: int = 0,
    replies: Sequence[ReplyResponse] = (),
) -> CommentResponse:
    """Convert a Comment ORM instance to an API schema."""
    return CommentResponse(
        **to_reply_response(comment, votes).model_dump(),
        side=comment.side,
        option_id=comment.option_id,
        reply_count=reply_count,
        replies=list(replies),
    )


def hydrate_comments(db: Session, comment_ids: Sequence[int]) -> list[CommentResponse]:
    """Load comments by id with authors, replies and counts, preserving id order."""
    if not comment_ids:
        return []

    comments = (
        db.query(Comment)
        .options(selectinload(Comment.user))
        .filter(Comment.id.in_(comment_ids))
        .all()
    )
    by_id = {comment.id: comment for comment in comments}
    replies = load_active_replies(db, comment_ids)
    reply_ids = [reply.id for group in replies.values() for reply in group]
    votes = vote_counts(db, [*comment_ids, *reply_ids])
    reply_totals = active_reply_counts(db, comment_ids)

    return [
        to_comment_response(
            by_id[comment_id],
            votes=votes.get(comment_id, 0),
            reply_count=reply_totals.get(comment_id, 0),
            replies=[
                to_reply_response(reply, votes.get(reply.id, 0))
                for reply in replies.get(comment_id, [])
            ],
        )
        for comment_id in comment_ids
        if comment_id in by_id
    ]


def list_top_level_comments(
    db: Session,
    topic_id: int,
    *,
    sort: SortOrder,
    page: PageRequest,
    side: Side | None = None,
    option_id: int | None = None,
) -> tuple[list[CommentResponse], int]:
    """Return one page of a topic's top-level comments and the unpaged total."""
    clauses = top_level_filter(topic_id, side=side, option_id=option_id)
    total = count_top_level(db, clauses)
    ids = ranked_comment_ids(db, clauses, sort, page)
    logger.debug("Ranked %d of %d comments for topic %s (%s)", len(ids), total, topic_id, sort)
    return hydrate_comments(db, ids), total


def describe_comment(db: Session, comment: Comment) -> CommentResponse:
    """Single-comment variant of :func:`hydrate_comments`."""
    hydrated = hydrate_comments(db, [comment.id])
    return hydrated[0] if hydrated else to_comment_response(comment)
