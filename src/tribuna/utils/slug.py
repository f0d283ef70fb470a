"""Slug generation for topic URLs."""

from __future__ import annotations

import re
import time
import unicodedata
from collections.abc import Callable

MIN_SLUG_LENGTH = 3
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _text_hash(text: str) -> int:
    """32-bit rolling hash (h * 31 + c), as an unsigned magnitude."""
    acc = 0
    for char in text:
        acc = ((acc << 5) - acc + ord(char)) & 0xFFFFFFFF
    if acc >= 2**31:
        acc -= 2**32
    return abs(acc)


def generate_slug(text: str, *, now: float | None = None) -> str:
    """Build a URL slug from a title.

    Diacritics are stripped and anything outside word characters, spaces and
    hyphens is dropped. Titles that leave fewer than three characters (for
    example non-latin scripts) get a hash-and-time based slug instead.
    """
    normalized = unicodedata.normalize("NFD", text.lower())
    slug = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")

    if len(slug) < MIN_SLUG_LENGTH:
        stamp = int((time.time() if now is None else now) * 1000)
        slug = f"topic-{_to_base36(_text_hash(text))}-{_to_base36(stamp)}"
    return slug


def generate_unique_slug(base_slug: str, exists: Callable[[str], bool]) -> str:
    """Append ``-1``, ``-2``, ... to ``base_slug`` until ``exists`` reports a free slug."""
    slug = base_slug
    counter = 1
    while exists(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug
