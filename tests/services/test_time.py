# mypy: ignore-errors
# tests/services/test_time.py
"""Tests for timestamp normalization."""

from datetime import UTC, datetime, timedelta, timezone

from tribuna.db.time import as_utc, utcnow


def test_utcnow_is_aware() -> None:
    assert utcnow().tzinfo is UTC


def test_naive_values_are_read_as_utc() -> None:
    assert as_utc(datetime(2025, 1, 1, 12, 0)) == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def test_aware_values_are_converted() -> None:
    lisbon_summer = timezone(timedelta(hours=1))
    value = as_utc(datetime(2025, 7, 1, 13, 0, tzinfo=lisbon_summer))
    assert value == datetime(2025, 7, 1, 12, 0, tzinfo=UTC)
    assert value.tzinfo is UTC


def test_api_timestamps_carry_utc(client, db_session, yes_no_topic, other_user) -> None:
    from tests.conftest import make_comment

    make_comment(db_session, yes_no_topic, other_user, minutes=1)
    item = client.get(f"/api/topics/{yes_no_topic.slug}/comments").json()["data"][0]
    assert item["createdAt"] == "2025-01-01T00:01:00Z"
