# src/tribuna/api/v1/endpoints/votes.py
"""Topic vote endpoints for the Tribuna API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tribuna.api.v1.dependencies import CurrentUserDep, SessionDep
from tribuna.core import messages
from tribuna.models import Topic, TopicStatus, User
from tribuna.schemas.common import ERROR_RESPONSES
from tribuna.schemas.vote import VoteRequest, VoteResponse, VoteStats
from tribuna.services.errors import VotingError
from tribuna.services.topics import get_topic_by_slug
from tribuna.services.voting import (
    cast_binary_vote,
    cast_option_votes,
    clear_votes,
    vote_snapshot,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/topics", tags=["votes"], responses=ERROR_RESPONSES)


def _get_topic_or_404(db: Session, slug: str, user: User) -> Topic:
    topic = get_topic_by_slug(db, slug)
    if topic is None or (topic.status == TopicStatus.HIDDEN and not user.is_moderator):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)
    return topic


def _clear_or_500(db: Session, topic: Topic, user: User) -> None:
    try:
        clear_votes(db, topic, user)
    except SQLAlchemyError as err:
        logger.exception("Error clearing votes by user %s on %s", user.id, topic.slug)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.VOTE_REMOVE_ERROR,
        ) from err


def _vote_response(db: Session, topic: Topic, user: User) -> VoteResponse:
    snapshot = vote_snapshot(db, topic, user)
    return VoteResponse(
        user_vote=snapshot.user_vote,
        user_vote_options=snapshot.user_vote_options,
        vote_stats=VoteStats(**snapshot.vote_stats),
        option_vote_stats=snapshot.option_vote_stats,
        total_votes=snapshot.total_votes,
    )


@router.post("/{slug}/vote", response_model=VoteResponse)
async def cast_vote(
    slug: str,
    payload: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Set or clear the caller's vote on a topic.

    Yes/no topics take ``vote``; multi-choice topics take ``optionIds`` and
    replace the caller's previous selection. ``{"action": "clear"}`` behaves
    like DELETE.
    """
    topic = _get_topic_or_404(db, slug, current_user)
    if topic.status == TopicStatus.LOCKED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=messages.TOPIC_LOCKED_FOR_VOTING,
        )

    if payload.action == "clear":
        _clear_or_500(db, topic, current_user)
        return _vote_response(db, topic, current_user)

    try:
        if payload.option_ids is not None:
            cast_option_votes(db, topic, current_user, payload.option_ids)
        else:
            cast_binary_vote(db, topic, current_user, payload.vote)
    except VotingError as err:
        logger.info("Rejected vote by user %s on %s: %s", current_user.id, slug, err.message)
        raise HTTPException(status_code=err.status_code, detail=err.message) from err
    except SQLAlchemyError as err:
        logger.exception("Error saving vote by user %s on %s", current_user.id, slug)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.VOTE_ERROR,
        ) from err

    return _vote_response(db, topic, current_user)


@router.delete("/{slug}/vote", response_model=VoteResponse)
async def remove_vote(
    slug: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Clear every vote the caller holds on a topic. Safe to repeat."""
    topic = _get_topic_or_404(db, slug, current_user)
    _clear_or_500(db, topic, current_user)
    return _vote_response(db, topic, current_user)
