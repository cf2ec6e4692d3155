"""Dual-schema archive snapshot resolution.

Snapshots exist in two generations: a legacy ``{data: {...}}`` shape and
a current ``{donnees_brutes: {...}, donnees_calculees: {...}}`` shape.
Both are read through one typed representation and a small request
state machine, so adding a shape or a request form adds one case.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from core.constants import (
    ALL_SECTIONS,
    COMPUTED_KIND,
    CURRENT_COMPUTED_FIELD,
    CURRENT_RAW_FIELD,
    LEGACY_DATA_FIELD,
    LEGACY_TYPE_SYNONYMS,
    RAW_KIND,
)
from core.errors import CircoArchiveError
from core.types import ArchiveQuery


@dataclass(frozen=True)
class LegacySnapshot:
    """Snapshot stored in the legacy single-partition shape.

    Attributes:
        year: School-year key.
        data: Category name to payload, ``None`` when absent.
        payload: Entire snapshot document.
    """

    year: str
    data: Mapping[str, Any] | None
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class CurrentSnapshot:
    """Snapshot stored in the raw/computed two-partition shape.

    Attributes:
        year: School-year key.
        donnees_brutes: Raw category payloads, ``None`` when absent.
        donnees_calculees: Computed section payloads, ``None`` when absent.
        legacy_data: Legacy ``data`` partition kept by migrated snapshots.
        payload: Entire snapshot document.
    """

    year: str
    donnees_brutes: Mapping[str, Any] | None
    donnees_calculees: Mapping[str, Any] | None
    legacy_data: Mapping[str, Any] | None
    payload: Mapping[str, Any]


ArchiveSnapshot = Union[LegacySnapshot, CurrentSnapshot]


class RequestCase(str, Enum):
    """Request forms accepted by the resolver."""

    WHOLE = "whole"
    RAW = "raw"
    COMPUTED_ALL = "computed_all"
    COMPUTED_SECTION = "computed_section"
    LEGACY_TYPE = "legacy_type"


def snapshot_from_payload(year: str, payload: Any) -> ArchiveSnapshot:
    """Classify a decoded snapshot document by schema generation.

    Args:
        year: School-year key of the snapshot.
        payload: Decoded JSON document.

    Returns:
        Typed current or legacy snapshot.

    Raises:
        CircoArchiveError: If the document or one of its partitions is
            not a JSON object.
    """
    if not isinstance(payload, dict):
        raise CircoArchiveError(
            f"Invalid archive snapshot for {year}: expected a JSON object at top level."
        )
    legacy_data = _partition(payload, LEGACY_DATA_FIELD, year)
    if CURRENT_RAW_FIELD in payload or CURRENT_COMPUTED_FIELD in payload:
        return CurrentSnapshot(
            year=year,
            donnees_brutes=_partition(payload, CURRENT_RAW_FIELD, year),
            donnees_calculees=_partition(payload, CURRENT_COMPUTED_FIELD, year),
            legacy_data=legacy_data,
            payload=payload,
        )
    return LegacySnapshot(year=year, data=legacy_data, payload=payload)


def classify_request(query: ArchiveQuery) -> RequestCase:
    """Map a query onto its request case.

    Reserved kinds are recognized before the legacy type form, so a bare
    ``brutes`` or ``calculees`` is never looked up as a category name.
    A section without a kind, or a legacy type with a section, falls
    back to the whole snapshot.
    """
    kind, section = query.kind, query.section
    if kind == RAW_KIND:
        return RequestCase.RAW
    if kind == COMPUTED_KIND:
        if section is None or section == ALL_SECTIONS:
            return RequestCase.COMPUTED_ALL
        return RequestCase.COMPUTED_SECTION
    if kind and section is None:
        return RequestCase.LEGACY_TYPE
    return RequestCase.WHOLE


def resolve_archive(snapshot: ArchiveSnapshot, query: ArchiveQuery) -> Any:
    """Resolve one archive read request against a snapshot.

    Missing partitions, sections and categories resolve to empty results.

    Args:
        snapshot: Typed snapshot of the requested year.
        query: Archive read request.

    Returns:
        JSON-compatible payload for the request.
    """
    case = classify_request(query)
    if case is RequestCase.RAW:
        return _raw_partition(snapshot)
    if case is RequestCase.COMPUTED_ALL:
        return dict(_computed_partition(snapshot) or {})
    if case is RequestCase.COMPUTED_SECTION:
        computed = _computed_partition(snapshot) or {}
        return _present(computed, query.section or "", {})
    if case is RequestCase.LEGACY_TYPE:
        return _legacy_type_lookup(snapshot, query.kind or "")
    return snapshot.payload


def _raw_partition(snapshot: ArchiveSnapshot) -> Any:
    if isinstance(snapshot, CurrentSnapshot):
        if snapshot.donnees_brutes is not None:
            return snapshot.donnees_brutes
        return snapshot.legacy_data if snapshot.legacy_data is not None else {}
    return snapshot.data if snapshot.data is not None else {}


def _computed_partition(snapshot: ArchiveSnapshot) -> Mapping[str, Any] | None:
    if isinstance(snapshot, CurrentSnapshot):
        return snapshot.donnees_calculees
    return None


def _legacy_type_lookup(snapshot: ArchiveSnapshot, type_name: str) -> Any:
    """Look a legacy category up in the raw partition, then in ``data``."""
    current_key = LEGACY_TYPE_SYNONYMS.get(type_name, type_name)
    if isinstance(snapshot, CurrentSnapshot):
        candidates = (
            (snapshot.donnees_brutes, current_key),
            (snapshot.legacy_data, type_name),
        )
    else:
        candidates = ((snapshot.data, type_name),)
    for partition, key in candidates:
        if partition is not None and partition.get(key) is not None:
            return partition[key]
    return []


def _present(partition: Mapping[str, Any], key: str, default: Any) -> Any:
    value = partition.get(key)
    return default if value is None else value


def _partition(payload: Mapping[str, Any], field_name: str, year: str) -> Mapping[str, Any] | None:
    value = payload.get(field_name)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise CircoArchiveError(
            f"Invalid archive snapshot for {year}: '{field_name}' must be a JSON object."
        )
    return value
