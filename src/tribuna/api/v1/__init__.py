# src/tribuna/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    system_router,
    topics_router,
    users_router,
    votes_router,
)

__all__ = [
    "comments_router",
    "system_router",
    "topics_router",
    "users_router",
    "votes_router",
]
