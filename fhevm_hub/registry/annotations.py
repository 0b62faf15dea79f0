"""Line-oriented extraction of NatSpec-style annotations from Solidity source.

Sources are treated as plain text; there is no Solidity parser. A tag value
runs to the end of its line and stops before a block-comment closer. A value
whose last character is a backslash continues on the next comment line, so
long values (deploy plans mostly) can be wrapped explicitly instead of being
truncated at the newline.
"""

from __future__ import annotations

import re

from fhevm_hub.kernel.text import to_kebab_case, unique
from fhevm_hub.registry.models import Difficulty

CONTINUATION = "\\"

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_DECLARATION = re.compile(r"\b(contract|interface|library)\s+(\w+)")
_CONTRACT = re.compile(r"\bcontract\s+(\w+)")
_COMMENT_PREFIX = re.compile(r"^\s*(?:///?|/\*\*?|\*(?!/))?\s?")


def _tag_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"@{re.escape(tag)}[ \t]+((?:(?!\*/)[^\n])+)")


def extract_tag(content: str, tag: str) -> str | None:
    """Return the trimmed value of the first ``@<tag>`` annotation, or None.

    >>> extract_tag("/// @title Counter */", "title")
    'Counter'
    """
    match = _tag_pattern(tag).search(content)
    if not match:
        return None

    value = match.group(1).rstrip()
    if not value.endswith(CONTINUATION):
        return value.strip() or None

    parts = [value[:-1].strip()]
    rest = content[match.end() :].split("\n")[1:]
    for line in rest:
        piece = _COMMENT_PREFIX.sub("", line, count=1)
        piece = piece.split("*/", 1)[0].rstrip()
        if piece.endswith(CONTINUATION):
            parts.append(piece[:-1].strip())
            continue
        parts.append(piece.strip())
        break
    return " ".join(part for part in parts if part) or None


def extract_custom_tag(content: str, tag: str) -> str | None:
    """Shorthand for ``@custom:<tag>``."""
    return extract_tag(content, f"custom:{tag}")


def has_tag(content: str, tag: str) -> bool:
    """True if the literal tag text (e.g. ``@custom:chapter``) appears anywhere."""
    return tag in content


def parse_list(raw: str | None) -> list[str]:
    """Split a comma-separated annotation into trimmed, non-empty tokens."""
    if not raw:
        return []
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def parse_chapters(raw: str | None) -> list[str]:
    """Like :func:`parse_list`, with each token kebab-cased and duplicates dropped."""
    return unique(to_kebab_case(entry) for entry in parse_list(raw))


def normalize_difficulty(raw: str | None) -> Difficulty:
    """Map free text onto a tier; anything unrecognised is Intermediate."""
    if not raw:
        return Difficulty.INTERMEDIATE
    normalized = raw.strip().lower()
    if normalized.startswith("begin"):
        return Difficulty.BEGINNER
    if normalized.startswith("adv"):
        return Difficulty.ADVANCED
    return Difficulty.INTERMEDIATE


def strip_comments(content: str) -> str:
    return _LINE_COMMENT.sub("", _BLOCK_COMMENT.sub("", content))


def extract_declared_names(content: str) -> list[str]:
    """Names of every contract, interface and library declared in the file."""
    return [match.group(2) for match in _DECLARATION.finditer(strip_comments(content))]


def extract_primary_contract_name(content: str) -> str | None:
    """Name of the first ``contract`` declaration, ignoring comments."""
    match = _CONTRACT.search(strip_comments(content))
    return match.group(1) if match else None
