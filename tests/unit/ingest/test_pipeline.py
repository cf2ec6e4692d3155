"""Unit tests for import orchestration."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import ContainerError, NoRecordsExtracted
from core.types import RecordFamily
from ingest.pipeline import deduplicate_table, import_container, import_document
from store.table_store import JsonTableStore
from tests.fixture_paths import build_container, onde_bytes


def test_import_container_persists_parsed_records(tmp_path: Path) -> None:
    """Keyed documents should be persisted while keyless ones are reported."""
    store = JsonTableStore(tmp_path)
    container = build_container(
        {
            "identite_9730001A.htm": onde_bytes("identite_9730001A.htm"),
            "sans_uai.htm": onde_bytes("sans_uai.htm"),
        }
    )

    report = import_container(container, RecordFamily.IDENTITY, store)

    assert report.to_payload()["count"] == 1 and report.success
    assert [row["uai"] for row in store.read_all("ecoles_identite")] == ["9730001A"]
    assert report.to_payload()["errors"] == [
        "sans_uai.htm: identifier_not_found: no UAI token in document"
    ]


def test_import_container_continues_past_rejected_markup(tmp_path: Path) -> None:
    """A document the HTML parser rejects should be skipped, not abort the import."""
    store = JsonTableStore(tmp_path)
    container = build_container(
        {
            "a.htm": b"<table><tr><td>UAI</td><td>9730001A</td></tr></table>",
            "b.htm": b"<p>9730002B</p><![bogus stuff",
        }
    )

    report = import_container(container, RecordFamily.IDENTITY, store)

    assert report.success and report.to_payload()["count"] == 1
    assert [row["uai"] for row in store.read_all("ecoles_identite")] == ["9730001A"]
    (error,) = report.to_payload()["errors"]
    assert error.startswith("b.htm: parse_failed:")


def test_import_container_keeps_earliest_duplicate(tmp_path: Path) -> None:
    """Two documents with one key should persist the earliest container entry."""
    store = JsonTableStore(tmp_path)
    key_row = b"<tr><td>UAI</td><td>9730001A</td></tr>"
    first = b"<table>" + key_row + b"<tr><td>Nom</td><td>PREMIER</td></tr></table>"
    second = b"<table>" + key_row + b"<tr><td>Nom</td><td>SECOND</td></tr></table>"
    container = build_container({"a.htm": first, "b.htm": second})

    report = import_container(container, RecordFamily.IDENTITY, store)

    assert report.collisions == 1
    assert store.read_all("ecoles_identite")[0]["nom"] == "PREMIER"


def test_import_container_raises_when_nothing_is_extracted(tmp_path: Path) -> None:
    """A container without any keyed document should fail with count 0."""
    store = JsonTableStore(tmp_path)
    store.upsert_batch("statistiques_ecoles", [{"uai": "9730009Z"}], "uai")
    container = build_container({"sans_uai.htm": onde_bytes("sans_uai.htm"), "notes.txt": b"x"})

    with pytest.raises(NoRecordsExtracted) as error_info:
        import_container(container, RecordFamily.STATISTICS, store)

    assert error_info.value.count == 0 and len(error_info.value.skipped) == 1
    assert store.read_all("statistiques_ecoles") == [{"uai": "9730009Z"}]


def test_import_container_replaces_table_by_default(tmp_path: Path) -> None:
    """Replace mode should drop rows absent from the new container."""
    store = JsonTableStore(tmp_path)
    store.upsert_batch("ecoles_structure", [{"uai": "9730009Z"}], "uai")
    container = build_container({"s.htm": onde_bytes("structure_9730001A.htm")})

    import_container(container, RecordFamily.STRUCTURE, store)

    assert [row["uai"] for row in store.read_all("ecoles_structure")] == ["9730001A"]


def test_import_container_keep_existing_upserts(tmp_path: Path) -> None:
    """Without replace, existing rows should survive."""
    store = JsonTableStore(tmp_path)
    store.upsert_batch("ecoles_structure", [{"uai": "9730009Z"}], "uai")
    container = build_container({"s.htm": onde_bytes("structure_9730001A.htm")})

    import_container(container, RecordFamily.STRUCTURE, store, replace=False)

    assert len(store.read_all("ecoles_structure")) == 2


def test_import_container_raises_for_corrupt_container(tmp_path: Path) -> None:
    """Unreadable containers should abort the import."""
    with pytest.raises(ContainerError):
        import_container(b"not a zip", RecordFamily.IDENTITY, JsonTableStore(tmp_path))


def test_import_document_upserts_single_record(tmp_path: Path) -> None:
    """A single document import should upsert without resetting the table."""
    store = JsonTableStore(tmp_path)
    store.upsert_batch("statistiques_ecoles", [{"uai": "9730009Z"}], "uai")

    report = import_document(
        "statistiques_9730001A.htm",
        onde_bytes("statistiques_9730001A.htm"),
        RecordFamily.STATISTICS,
        store,
    )

    assert report.to_payload() == {"success": True, "count": 1}
    assert [row["uai"] for row in store.read_all("statistiques_ecoles")] == [
        "9730009Z",
        "9730001A",
    ]


def test_import_document_raises_without_key(tmp_path: Path) -> None:
    """A single document without key should be a zero-yield failure."""
    with pytest.raises(NoRecordsExtracted):
        import_document(
            "x.htm",
            onde_bytes("sans_uai.htm"),
            RecordFamily.IDENTITY,
            JsonTableStore(tmp_path),
        )


def test_deduplicate_table_reports_counts(tmp_path: Path) -> None:
    """Teacher dedup should rewrite the table and report before and after counts."""
    store = JsonTableStore(tmp_path)
    rows = [
        {"id": 3, "nom": "DUPONT", "prenom": "Jean", "annee_scolaire": "2024-2025", "ecole_id": 1},
        {"id": 1, "nom": "DUPONT", "prenom": "Jean", "annee_scolaire": "2024-2025", "ecole_id": 1},
        {"id": 2, "nom": "MARTIN", "prenom": "Ana", "annee_scolaire": "2024-2025", "ecole_id": 1},
    ]
    store.upsert_batch("enseignants", rows, "id")

    report = deduplicate_table(store)

    assert report.to_payload() == {
        "success": True,
        "count": 2,
        "details": {"avant": 3, "apres": 2, "supprimes": 1},
    }
    assert sorted(row["id"] for row in store.read_all("enseignants")) == [1, 2]
