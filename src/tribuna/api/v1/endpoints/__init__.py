# src/tribuna/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .system import router as system_router
from .topics import router as topics_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "comments_router",
    "system_router",
    "topics_router",
    "users_router",
    "votes_router",
]
