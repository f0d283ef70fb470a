# mypy: ignore-errors
# tests/services/test_pagination.py
"""Tests for page/perPage clamping."""

import pytest

from tribuna.utils.pagination import MAX_OFFSET, clamp_page_request, total_pages


@pytest.mark.parametrize(
    ("page", "per_page", "expected"),
    [
        (None, None, (1, 50)),
        ("0", "500", (1, 100)),
        ("-3", "0", (1, 1)),
        ("2", "10", (2, 10)),
        ("abc", "", (1, 50)),
    ],
)
def test_clamp_page_request(page, per_page, expected) -> None:
    request = clamp_page_request(page, per_page, default_per_page=50, max_per_page=100)
    assert (request.page, request.per_page) == expected


def test_offset() -> None:
    assert clamp_page_request("3", "20", default_per_page=50, max_per_page=100).offset == 40


def test_total_pages() -> None:
    assert total_pages(0, 50) == 0
    assert total_pages(101, 50) == 3


def test_page_is_capped_to_a_64_bit_offset() -> None:
    request = clamp_page_request(str(10**20), "100", default_per_page=50, max_per_page=100)
    assert request.offset <= MAX_OFFSET
    assert request.offset + request.per_page > MAX_OFFSET
