"""Text helpers shared by parsers and transforms."""

from __future__ import annotations

import re
import unicodedata

_LEADING_INT_RE = re.compile(r"^[-+]?\d+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace, including non-breaking spaces."""
    return " ".join(text.split())


def fold_text(text: str) -> str:
    """Return lowercase text without accents for tolerant matching.

    Args:
        text: Raw label or cell text.

    Returns:
        Accent-free, casefolded, whitespace-collapsed text.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return collapse_whitespace(stripped.casefold())


def parse_count(text: str | None) -> int:
    """Parse a leading integer count; malformed or negative values yield 0.

    Args:
        text: Cell text such as ``"24"`` or ``"24 élèves"``.

    Returns:
        Non-negative integer count.
    """
    if not text:
        return 0
    match = _LEADING_INT_RE.match(text.strip())
    if match is None:
        return 0
    return max(int(match.group(0)), 0)
