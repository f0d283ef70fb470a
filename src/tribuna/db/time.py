# src/tribuna/db/time.py
"""Timestamps for model defaults and API output.

Columns are declared ``timezone=True``, but SQLite hands values back without an
offset. Everything the API returns goes through :func:`as_utc` so clients always
see an explicit UTC offset.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
