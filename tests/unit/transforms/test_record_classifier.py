"""Unit tests for structure row classification."""

from __future__ import annotations

import pytest

from core.types import StructureRow
from transforms.record_classifier import classify_rows, dispositif_type_for, is_split_class


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("RASED", "RASED"),
        ("ulis école", "ULIS ECOLE"),
        ("UPE2A Cayenne", "UPE2A"),
        ("SEGPA", "SEGPA"),
        ("Dispositif d'accueil", "AUTRE"),
        ("Unité d'enseignement externalisée", "AUTRE"),
        ("CP A", None),
    ],
)
def test_dispositif_type_for_labels(label: str, expected: str | None) -> None:
    """Markers should be matched case-insensitively in fixed order."""
    assert dispositif_type_for(label) == expected


@pytest.mark.parametrize(
    ("label", "expected"),
    [("CP dédoublé", True), ("CE1 Dedoublee", True), ("CP 1", True), ("CM2", False)],
)
def test_is_split_class(label: str, expected: bool) -> None:
    """Split classes should be detected from their label."""
    assert is_split_class(label) is expected


def test_classify_rows_is_total_and_order_independent() -> None:
    """Every row should be classified once, regardless of input order."""
    rows = [
        StructureRow("CP A", "M. A", "CP", 20),
        StructureRow("ULIS ECOLE", "Mme X", "", 6),
        StructureRow("CE2", "M. B", "CE2", 25),
    ]

    forward = classify_rows(rows)
    backward = classify_rows(reversed(rows))

    assert len(forward.classes) + len(forward.dispositifs) == len(rows)
    assert set(forward.classes) == set(backward.classes)
    assert forward.dispositifs[0].type == "ULIS ECOLE"
