"""Identity-key deduplication transform.

This module collapses records sharing an identity key. It keeps no
state between calls: each run builds its own local key map.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Mapping, TypeVar

from core.types import DedupResult, DocumentOutcome

T = TypeVar("T")


def dedupe(
    records: Iterable[T],
    key: Callable[[T], Hashable],
    sequence: Callable[[T], Any] | None = None,
) -> DedupResult:
    """Keep one record per identity key.

    On collision the record with the lowest sequence value wins. Records
    without a sequence value (or when ``sequence`` is omitted) lose to
    any sequenced record and otherwise keep the first one seen.

    Args:
        records: Candidate records.
        key: Identity key extractor.
        sequence: Optional secondary tie-break extractor.

    Returns:
        Unique records in first-seen key order and the collision count.
    """
    best_by_key: dict[Hashable, T] = {}
    collisions = 0
    for record in records:
        record_key = key(record)
        current = best_by_key.get(record_key)
        if current is None:
            best_by_key[record_key] = record
            continue
        collisions += 1
        if sequence is not None and _sorts_before(sequence(record), sequence(current)):
            best_by_key[record_key] = record
    return DedupResult(records=list(best_by_key.values()), collisions=collisions)


def dedupe_outcomes(outcomes: Iterable[DocumentOutcome]) -> DedupResult:
    """Deduplicate parsed documents by school ``uai``.

    The container position is the tie-break, so the earliest entry of a
    container wins regardless of the order outcomes arrive in.

    Args:
        outcomes: Successful per-document outcomes.

    Returns:
        Unique outcomes and the collision count.
    """
    return dedupe(
        outcomes,
        key=lambda outcome: outcome.record.uai,
        sequence=lambda outcome: outcome.sequence,
    )


def teacher_identity_key(row: Mapping[str, Any]) -> str:
    """Build the composite identity key of a teacher row."""
    return "|".join(
        str(row.get(name, "")) for name in ("nom", "prenom", "annee_scolaire", "ecole_id")
    )


def dedupe_teacher_rows(rows: Iterable[Mapping[str, Any]]) -> DedupResult:
    """Deduplicate teacher rows, keeping the lowest ``id`` per identity."""
    return dedupe(rows, key=teacher_identity_key, sequence=lambda row: row.get("id"))


def _sorts_before(candidate: Any, current: Any) -> bool:
    """Return whether ``candidate`` beats ``current`` as tie-break value."""
    if candidate is None:
        return False
    if current is None:
        return True
    try:
        return candidate < current
    except TypeError:
        return str(candidate) < str(current)
