"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(ApiModel):
    """Pagination block returned by list endpoints."""

    page: int
    per_page: int
    total: int
    total_pages: int


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Human-readable, localized error message.")


class AuthorSummary(ApiModel):
    """Public fields of a user shown next to their content."""

    id: int
    username: str
    name: str | None = None
    image: str | None = None


# Documented on every router; the app-level handlers render these bodies.
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)
}
