# mypy: ignore-errors
# tests/services/test_messages.py
"""Tests for localized choice-limit messages."""

from tribuna.core.messages import choice_limit


def test_portuguese_plural() -> None:
    assert choice_limit(3, "pt") == "Você pode selecionar no máximo 3 opções"


def test_singular() -> None:
    assert choice_limit(1, "en") == "You can select at most 1 option"


def test_spanish() -> None:
    assert choice_limit(2, "es") == "Puedes seleccionar como máximo 2 opciones"


def test_unknown_language_falls_back_to_portuguese() -> None:
    assert choice_limit(2, "de") == choice_limit(2, "pt")
    assert choice_limit(2, None) == choice_limit(2, "pt")
