"""Shared text helpers used by the registry and every generator."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")

_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z])([A-Z][a-z])")
_WORD_SEPARATORS = re.compile(r"[-_\s]+")
_H1 = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def to_kebab_case(value: str) -> str:
    """Convert ``CamelCase``, ``snake_case`` or spaced words to ``kebab-case``.

    >>> to_kebab_case("FHECounter")
    'fhe-counter'
    >>> to_kebab_case("access_control")
    'access-control'
    >>> to_kebab_case("Access  Control")
    'access-control'
    """
    value = _LOWER_UPPER.sub(r"\1-\2", value.strip())
    value = _ACRONYM_WORD.sub(r"\1-\2", value)
    return _WORD_SEPARATORS.sub("-", value).lower()


def title_case(value: str) -> str:
    """Convert ``foo-bar`` to ``Foo Bar``; only the first letter of each word changes.

    >>> title_case("access-control")
    'Access Control'
    """
    if not value:
        return value
    return " ".join(word[:1].upper() + word[1:] for word in _WORD_SEPARATORS.split(value))


def lower_camel(value: str) -> str:
    """``IdentityRegistry`` -> ``identityRegistry``."""
    return value[:1].lower() + value[1:]


def extract_h1(content: str) -> str | None:
    """Return the first level-1 Markdown heading, if any."""
    match = _H1.search(content)
    return match.group(1).strip() if match else None


def unique(values: Iterable[T]) -> list[T]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))


def read_source(path: Path) -> str:
    """Read a UTF-8 source file; undecodable bytes become U+FFFD instead of failing."""
    return path.read_text(encoding="utf-8", errors="replace")
