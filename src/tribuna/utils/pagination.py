"""Helpers for page/perPage query parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Largest OFFSET the database drivers accept (signed 64-bit).
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def _as_int(raw: str | int | None, fallback: int) -> int:
    if raw is None or raw == "":
        return fallback
    try:
        return int(raw)
    except (TypeError, ValueError):
        return fallback


def clamp_page_request(
    page: str | int | None,
    per_page: str | int | None,
    *,
    default_per_page: int,
    max_per_page: int,
) -> PageRequest:
    """Parse and clamp pagination parameters.

    ``page`` is at least 1 and small enough that its offset fits in a 64-bit
    integer; ``per_page`` lies in ``[1, max_per_page]``. Unparseable values fall
    back to the defaults.
    """
    size = min(max(1, _as_int(per_page, default_per_page)), max_per_page)
    last_page = MAX_OFFSET // size + 1
    return PageRequest(
        page=min(max(1, _as_int(page, 1)), last_page),
        per_page=size,
    )


def total_pages(total: int, per_page: int) -> int:
    return math.ceil(total / per_page) if per_page else 0
