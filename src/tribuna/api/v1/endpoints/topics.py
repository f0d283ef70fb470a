# src/tribuna/api/v1/endpoints/topics.py
"""Topic endpoints for the Tribuna API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.orm import Session

from tribuna.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    SessionDep,
    require_moderator,
)
from tribuna.core import messages
from tribuna.core.settings import settings
from tribuna.models import Side, Topic, TopicStatus, User
from tribuna.schemas.comment import CommentPage
from tribuna.schemas.common import ERROR_RESPONSES, Pagination
from tribuna.schemas.topic import (
    NextTopic,
    TopicCreate,
    TopicDetail,
    TopicOptionResponse,
    TopicPage,
    TopicReportResponse,
    TopicStatusUpdate,
    TopicSummary,
)
from tribuna.schemas.vote import VoteStats
from tribuna.services.comments import list_top_level_comments, parse_sort
from tribuna.services.topics import (
    create_topic,
    find_next_topic,
    get_topic_by_slug,
    list_active_topics,
    to_topic_summary,
    topic_counts,
)
from tribuna.services.voting import vote_snapshot
from tribuna.utils.pagination import clamp_page_request, total_pages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/topics", tags=["topics"], responses=ERROR_RESPONSES)


def get_topic_or_404(db: Session, slug: str, viewer: User | None = None) -> Topic:
    """Fetch a topic by slug.

    Non-ACTIVE topics are only visible to moderators; everyone else gets a 404.
    """
    topic = get_topic_by_slug(db, slug)
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)
    if topic.status != TopicStatus.ACTIVE and (viewer is None or not viewer.is_moderator):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)
    return topic


def _topic_detail(db: Session, topic: Topic, viewer: User | None) -> TopicDetail:
    comments, votes = topic_counts(db, [topic.id])
    summary = to_topic_summary(
        topic,
        comment_count=comments.get(topic.id, 0),
        vote_count=votes.get(topic.id, 0),
    )
    snapshot = vote_snapshot(db, topic, viewer)
    return TopicDetail(
        **summary.model_dump(),
        options=[TopicOptionResponse.model_validate(option) for option in topic.options],
        vote_stats=VoteStats(**snapshot.vote_stats),
        option_vote_stats=snapshot.option_vote_stats,
        total_votes=snapshot.total_votes,
        user_vote=snapshot.user_vote.value if snapshot.user_vote else None,
        user_vote_options=snapshot.user_vote_options,
    )


@router.get("", response_model=TopicPage)
async def list_topics(
    db: SessionDep,
    page: str | None = Query(None),
    per_page: str | None = Query(None, alias="perPage"),
    tag: str | None = Query(None),
) -> TopicPage:
    """List ACTIVE topics, newest first."""
    page_request = clamp_page_request(
        page,
        per_page,
        default_per_page=settings.topics_per_page_default,
        max_per_page=settings.topics_per_page_max,
    )
    topics, total = list_active_topics(db, page_request, tag=tag)
    return TopicPage(
        data=topics,
        pagination=Pagination(
            page=page_request.page,
            per_page=page_request.per_page,
            total=total,
            total_pages=total_pages(total, page_request.per_page),
        ),
    )


@router.post("", response_model=TopicDetail, status_code=status.HTTP_201_CREATED)
async def create_new_topic(
    payload: TopicCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TopicDetail:
    """Create a yes/no or multi-choice topic."""
    topic = create_topic(db, current_user, payload)
    topic = get_topic_by_slug(db, topic.slug) or topic
    return _topic_detail(db, topic, current_user)


@router.get("/{slug}", response_model=TopicDetail)
async def get_topic(slug: str, db: SessionDep, viewer: OptionalUserDep) -> TopicDetail:
    """Return a topic with its options, counts and current vote totals."""
    topic = get_topic_or_404(db, slug, viewer)
    return _topic_detail(db, topic, viewer)


@router.patch("/{slug}", response_model=TopicSummary)
async def moderate_topic(
    slug: str,
    payload: TopicStatusUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TopicSummary:
    """Change a topic's status (moderators only)."""
    require_moderator(current_user)
    topic = get_topic_or_404(db, slug, current_user)
    topic.status = payload.status
    db.commit()
    db.refresh(topic)
    logger.info("Moderator %s set topic %s to %s", current_user.id, slug, payload.status.value)
    return to_topic_summary(topic)


@router.post("/{slug}/report", response_model=TopicReportResponse)
async def report_topic(
    slug: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TopicReportResponse:
    """Flag a topic for moderator attention."""
    topic = get_topic_or_404(db, slug, current_user)
    topic.report_count = Topic.report_count + 1
    db.commit()
    db.refresh(topic)
    logger.info("User %s reported topic %s", current_user.id, slug)
    return TopicReportResponse(id=topic.id, report_count=topic.report_count)


@router.get("/{slug}/next", response_model=NextTopic | None)
async def next_topic(slug: str, db: SessionDep) -> NextTopic | None:
    """Suggest the next topic to read after ``slug``."""
    topic = get_topic_by_slug(db, slug)
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)
    return find_next_topic(db, topic)


@router.get("/{slug}/comments", response_model=CommentPage)
async def list_topic_comments(
    slug: str,
    db: SessionDep,
    sort: str | None = Query(None, description="top (default) or new"),
    side: Side | None = Query(None),
    option_id: int | None = Query(None, alias="optionId"),
    page: str | None = Query(None),
    per_page: str | None = Query(None, alias="perPage"),
) -> CommentPage:
    """List a topic's top-level comments with their active replies."""
    topic = get_topic_by_slug(db, slug)
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.TOPIC_NOT_FOUND)

    page_request = clamp_page_request(
        page,
        per_page,
        default_per_page=settings.comments_per_page_default,
        max_per_page=settings.comments_per_page_max,
    )
    try:
        comments, total = list_top_level_comments(
            db,
            topic.id,
            sort=parse_sort(sort),
            page=page_request,
            side=side,
            option_id=option_id,
        )
    except Exception as err:
        logger.exception("Error fetching comments for topic %s", slug)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.COMMENTS_FETCH_ERROR,
        ) from err

    return CommentPage(
        data=comments,
        pagination=Pagination(
            page=page_request.page,
            per_page=page_request.per_page,
            total=total,
            total_pages=total_pages(total, page_request.per_page),
        ),
    )
