"""Structure row classification.

Every structure row becomes exactly one ordinary class or one
special-needs dispositif, decided from its label alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from core.constants import (
    BROAD_DISPOSITIF_MARKERS,
    DEFAULT_DISPOSITIF_TYPE,
    DISPOSITIF_MARKERS,
    SPLIT_CLASS_TERMS,
)
from core.text_utils import fold_text
from core.types import ClassRecord, DispositifRecord, StructureRow

_TRAILING_SPLIT_DIGIT_RE = re.compile(r"(?:^|\s)[12]$")


@dataclass(frozen=True)
class ClassifiedRows:
    """Classification output in input order."""

    classes: tuple[ClassRecord, ...]
    dispositifs: tuple[DispositifRecord, ...]


def classify_rows(rows: Iterable[StructureRow]) -> ClassifiedRows:
    """Split structure rows into classes and dispositifs.

    Args:
        rows: Probed structure rows.

    Returns:
        Classes and dispositifs, each keeping input order.
    """
    classes: list[ClassRecord] = []
    dispositifs: list[DispositifRecord] = []
    for row in rows:
        dispositif_type = dispositif_type_for(row.libelle)
        if dispositif_type is None:
            classes.append(_build_class(row))
            continue
        dispositifs.append(
            DispositifRecord(libelle=row.libelle, type=dispositif_type, nb_eleves=row.nb_eleves)
        )
    return ClassifiedRows(classes=tuple(classes), dispositifs=tuple(dispositifs))


def dispositif_type_for(label: str) -> str | None:
    """Return the dispositif type of a label, ``None`` for an ordinary class.

    Args:
        label: Row label.

    Returns:
        First matching specific marker type, ``AUTRE`` for broader
        matches, or ``None``.
    """
    upper_label = label.upper()
    for marker, dispositif_type in DISPOSITIF_MARKERS:
        if marker in upper_label:
            return dispositif_type
    folded_label = fold_text(label).upper()
    if any(marker in folded_label for marker in BROAD_DISPOSITIF_MARKERS):
        return DEFAULT_DISPOSITIF_TYPE
    return None


def is_split_class(label: str) -> bool:
    """Return whether a class label denotes a split (dédoublée) class."""
    folded_label = fold_text(label)
    if any(term in folded_label for term in SPLIT_CLASS_TERMS):
        return True
    return _TRAILING_SPLIT_DIGIT_RE.search(label.strip()) is not None


def _build_class(row: StructureRow) -> ClassRecord:
    return ClassRecord(
        libelle=row.libelle,
        enseignant=row.enseignant,
        niveau=row.niveau,
        nb_eleves=row.nb_eleves,
        dedoublee=is_split_class(row.libelle),
    )
