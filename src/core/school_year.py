"""School-year key helpers.

Snapshots are addressed by ``YYYY-YYYY`` keys covering two consecutive
calendar years, starting in September.
"""

from __future__ import annotations

import re
from datetime import date

from core.constants import SCHOOL_YEAR_START_MONTH
from core.errors import CircoArchiveError

_SCHOOL_YEAR_RE = re.compile(r"^(\d{4})-(\d{4})$")


def parse_school_year(key: str) -> tuple[int, int]:
    """Parse and validate a school-year key.

    Args:
        key: Key such as ``2024-2025``.

    Returns:
        Pair of start and end calendar years.

    Raises:
        CircoArchiveError: If the key is malformed.
    """
    match = _SCHOOL_YEAR_RE.match(key.strip())
    if match is None:
        raise CircoArchiveError(
            f"Invalid school year '{key}': expected YYYY-YYYY, e.g. 2024-2025."
        )
    start, end = int(match.group(1)), int(match.group(2))
    if end != start + 1:
        raise CircoArchiveError(
            f"Invalid school year '{key}': years must be consecutive, "
            f"e.g. {start}-{start + 1}."
        )
    return start, end


def current_school_year(today: date | None = None) -> str:
    """Return the school-year key containing ``today``."""
    today = today or date.today()
    if today.month >= SCHOOL_YEAR_START_MONTH:
        return f"{today.year}-{today.year + 1}"
    return f"{today.year - 1}-{today.year}"
