# src/tribuna/api/v1/endpoints/comments.py
"""Comment endpoints for the Tribuna API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from tribuna.api.v1.dependencies import CurrentUserDep, SessionDep, require_moderator
from tribuna.core import messages
from tribuna.models import (
    Comment,
    CommentStatus,
    CommentVote,
    Topic,
    TopicOption,
    TopicStatus,
    User,
)
from tribuna.schemas.comment import (
    CommentCreate,
    CommentModerate,
    CommentResponse,
    CommentScore,
    CommentUpdate,
    CommentVoteRequest,
    MessageResponse,
)
from tribuna.schemas.common import ERROR_RESPONSES
from tribuna.services.comments import describe_comment, vote_counts
from tribuna.services.karma import KARMA_POINTS, record_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"], responses=ERROR_RESPONSES)


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.COMMENT_NOT_FOUND)
    return comment


def _forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.FORBIDDEN)


def _bad_request(detail: str = messages.INVALID_DATA) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _resolve_tagging(db: Session, topic: Topic, payload: CommentCreate) -> tuple[Any, int | None]:
    """Return the (side, option_id) to store for a new comment.

    Replies never carry tagging. Sides belong to yes/no topics and options to
    multi-choice topics.
    """
    if payload.parent_id is not None:
        return None, None

    if payload.side is not None and topic.is_multi_choice:
        raise _bad_request(messages.SIDE_NOT_ALLOWED)

    if payload.option_id is not None:
        if not topic.is_multi_choice:
            raise _bad_request(messages.OPTION_NOT_ALLOWED)
        owned = (
            db.query(TopicOption.id)
            .filter(TopicOption.id == payload.option_id, TopicOption.topic_id == topic.id)
            .first()
        )
        if owned is None:
            raise _bad_request(messages.INVALID_OPTIONS)

    return payload.side, payload.option_id


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Create a top-level comment or a reply.

    Raises:
        HTTPException: 404 if the topic or parent is missing, 403 if the topic
            is locked, 400 if the side/option tagging does not fit the topic.
    """
    topic = db.get(Topic, payload.topic_id)
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)
    if topic.status == TopicStatus.LOCKED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=messages.TOPIC_LOCKED_FOR_COMMENTS,
        )

    if payload.parent_id is not None:
        parent = db.get(Comment, payload.parent_id)
        if parent is None or parent.topic_id != topic.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=messages.PARENT_NOT_FOUND,
            )

    side, option_id = _resolve_tagging(db, topic, payload)
    comment = Comment(
        content=payload.content,
        topic_id=topic.id,
        user_id=current_user.id,
        parent_id=payload.parent_id,
        side=side,
        option_id=option_id,
    )
    try:
        db.add(comment)
        record_activity(db, current_user, KARMA_POINTS["CREATE_COMMENT"])
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(comment)
    logger.debug("User %s commented on topic %s", current_user.id, topic.slug)
    return describe_comment(db, comment)


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    body: dict[str, Any] = Body(...),
) -> CommentResponse:
    """Edit a comment.

    A body carrying ``status`` is a moderation action and requires MOD/ADMIN;
    otherwise the owner may change ``content`` while the comment is ACTIVE.
    """
    if body.get("status"):
        require_moderator(current_user)
        try:
            moderation = CommentModerate.model_validate(body)
        except ValidationError as err:
            raise _bad_request() from err
        comment = _get_comment_or_404(db, comment_id)
        comment.status = moderation.status
        db.commit()
        logger.info(
            "Moderator %s set comment %s to %s",
            current_user.id,
            comment_id,
            moderation.status.value,
        )
        return describe_comment(db, comment)

    try:
        update = CommentUpdate.model_validate(body)
    except ValidationError as err:
        raise _bad_request() from err

    comment = _get_comment_or_404(db, comment_id)
    if comment.user_id != current_user.id:
        raise _forbidden()
    if comment.status != CommentStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=messages.COMMENT_NOT_EDITABLE,
        )

    comment.content = update.content
    db.commit()
    return describe_comment(db, comment)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Soft-delete a comment (owner or moderator)."""
    comment = _get_comment_or_404(db, comment_id)
    if comment.user_id != current_user.id and not current_user.is_moderator:
        raise _forbidden()

    comment.status = CommentStatus.DELETED
    db.commit()
    logger.info("User %s deleted comment %s", current_user.id, comment_id)
    return MessageResponse(message=messages.COMMENT_REMOVED)


@router.post("/{comment_id}/vote", response_model=CommentScore)
async def toggle_comment_vote(
    comment_id: int,
    payload: CommentVoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentScore:
    """Toggle the caller's quality up-vote on a comment."""
    comment = _get_comment_or_404(db, comment_id)
    if comment.user_id == current_user.id:
        raise _bad_request(messages.CANNOT_VOTE_OWN_COMMENT)

    existing = (
        db.query(CommentVote)
        .filter(CommentVote.comment_id == comment_id, CommentVote.user_id == current_user.id)
        .first()
    )
    try:
        if existing is not None:
            db.delete(existing)
        else:
            db.add(CommentVote(comment_id=comment_id, user_id=current_user.id, value=payload.value))
            author = db.get(User, comment.user_id)
            if author is not None:
                record_activity(db, author, KARMA_POINTS["RECEIVE_COMMENT_VOTE"])
        db.commit()
    except Exception:
        db.rollback()
        raise

    score = vote_counts(db, [comment_id]).get(comment_id, 0)
    return CommentScore(id=comment_id, score=score, voted=existing is None)
