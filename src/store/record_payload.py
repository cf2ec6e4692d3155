"""Canonical record JSON payloads.

This module centralizes record serialization so the persister and
callers inspecting results share one JSON shape per record family.
"""

from __future__ import annotations

from dataclasses import asdict

from core.types import (
    ClassRecord,
    DispositifRecord,
    SchoolIdentity,
    SchoolRecord,
    SchoolStatistics,
    SchoolStructure,
)


def record_to_payload(record: SchoolRecord) -> dict[str, object]:
    """Serialize a canonical record into a JSON-safe payload.

    Args:
        record: Identity, structure or statistics record.

    Returns:
        Dictionary payload keyed by ``uai``.
    """
    if isinstance(record, SchoolStructure):
        return structure_to_payload(record)
    if isinstance(record, SchoolStatistics):
        return statistics_to_payload(record)
    return identity_to_payload(record)


def identity_to_payload(record: SchoolIdentity) -> dict[str, object]:
    """Serialize an identity record."""
    return asdict(record)


def structure_to_payload(record: SchoolStructure) -> dict[str, object]:
    """Serialize a structure record with its class and dispositif lists."""
    return {
        "uai": record.uai,
        "classes": [_class_payload(item) for item in record.classes],
        "dispositifs": [_dispositif_payload(item) for item in record.dispositifs],
    }


def statistics_to_payload(record: SchoolStatistics) -> dict[str, object]:
    """Serialize a statistics record."""
    return {
        "uai": record.uai,
        "nom": record.nom,
        "type": record.type_ecole,
        "effectifs": dict(record.effectifs),
        "repartitions": dict(record.repartitions),
        "totaux": dict(record.totaux),
    }


def _class_payload(item: ClassRecord) -> dict[str, object]:
    return {
        "libelle": item.libelle,
        "enseignant": item.enseignant,
        "niveau": item.niveau,
        "nbEleves": item.nb_eleves,
        "dedoublee": item.dedoublee,
    }


def _dispositif_payload(item: DispositifRecord) -> dict[str, object]:
    return {"libelle": item.libelle, "type": item.type, "nbEleves": item.nb_eleves}
