"""Unit tests for the statistics document parser."""

from __future__ import annotations

import pytest

from ingest.html_tables import parse_html
from ingest.statistics_parser import parse_statistics, school_type_for_levels
from tests.fixture_paths import fixture_path


def _fixture_record():
    page = parse_html(fixture_path("onde/statistiques_9730001A.htm").read_text(encoding="utf-8"))
    return parse_statistics(page)


def test_parse_statistics_reads_name_and_type() -> None:
    """School name and derived type should be filled from the document."""
    record = _fixture_record()

    assert record is not None
    assert (record.uai, record.nom, record.type_ecole) == (
        "9730001A",
        "ECOLE PRIMAIRE LES PALMIERS",
        "E.P.PU",
    )


def test_parse_statistics_normalizes_effectif_labels() -> None:
    """Both row layouts should be read and labels normalized."""
    record = _fixture_record()

    assert record is not None
    assert dict(record.effectifs) == {
        "Inscrits": 118,
        "Admis accepté": 5,
        "Radiés": 2,
        "en attente d'INE": 1,
    }


def test_parse_statistics_routes_levels_and_totals() -> None:
    """Level rows and cycle or total rows should land in separate mappings."""
    record = _fixture_record()

    assert record is not None
    assert dict(record.repartitions) == {"PS": 20, "MS": 22, "GS": 25, "CP": 24, "CE1": 12}
    assert dict(record.totaux) == {"CYCLE I": 67, "CYCLE II": 36, "Total": 103}


def test_parse_statistics_locates_tables_by_position_without_headings() -> None:
    """Without headings the second and fourth tables should be used."""
    page = parse_html(
        "<p>9730005E - ECOLE MATERNELLE</p>"
        "<table><tr><td>a</td></tr></table>"
        "<table><tr><td>Inscrits</td><td>40</td></tr></table>"
        "<table><tr><td>b</td></tr></table>"
        "<table><tr><td>MS</td><td>40</td></tr></table>"
    )

    record = parse_statistics(page)

    assert record is not None
    assert dict(record.effectifs) == {"Inscrits": 40} and record.type_ecole == "E.M.PU"


@pytest.mark.parametrize(
    ("levels", "expected"),
    [(["PS", "CP"], "E.P.PU"), (["GS"], "E.M.PU"), (["CM2"], "E.E.PU"), (["TPS"], "E.PU")],
)
def test_school_type_for_levels(levels: list[str], expected: str) -> None:
    """School type should follow the levels taught."""
    assert school_type_for_levels(levels) == expected
