# mypy: ignore-errors
# tests/services/test_slug.py
"""Tests for topic slug generation."""

from tribuna.utils.slug import generate_slug, generate_unique_slug


def test_slug_strips_diacritics_and_punctuation() -> None:
    assert generate_slug("Ação afirmativa: é justa?") == "acao-afirmativa-e-justa"


def test_slug_collapses_whitespace_and_hyphens() -> None:
    assert generate_slug("  Tax  reform -- now  ") == "tax-reform-now"


def test_non_latin_title_gets_fallback_slug() -> None:
    slug = generate_slug("税制", now=0)
    assert slug.startswith("topic-")
    assert slug.endswith("-0")


def test_fallback_depends_on_title() -> None:
    assert generate_slug("税制", now=1) != generate_slug("選挙", now=1)


def test_unique_slug_appends_counter() -> None:
    taken = {"reforma", "reforma-1"}
    assert generate_unique_slug("reforma", taken.__contains__) == "reforma-2"
    assert generate_unique_slug("livre", taken.__contains__) == "livre"
