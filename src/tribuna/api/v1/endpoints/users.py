# src/tribuna/api/v1/endpoints/users.py
"""Public user profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from tribuna.api.v1.dependencies import SessionDep
from tribuna.core import messages
from tribuna.schemas.common import ERROR_RESPONSES
from tribuna.schemas.user import UserProfile
from tribuna.services.users import build_user_profile, get_user_by_username

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)


@router.get("/{username}", response_model=UserProfile)
async def get_user_profile(username: str, db: SessionDep) -> UserProfile:
    """Return a user's profile with karma, achievements and recent activity.

    Only ACTIVE topics and comments are listed.
    """
    user = get_user_by_username(db, username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.USER_NOT_FOUND)
    try:
        return build_user_profile(db, user)
    except SQLAlchemyError as err:
        logger.exception("Error loading profile for %s", username)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.PROFILE_FETCH_ERROR,
        ) from err
