"""Unit tests for the archive snapshot store."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from core.config import CircoConfig
from core.errors import CircoArchiveError, SnapshotNotFound
from core.types import ArchiveQuery
from store.archive_store import ArchiveStore


def _store(tmp_path: Path) -> ArchiveStore:
    config = replace(CircoConfig.from_env(), data_root=tmp_path)
    config.archives_dir.mkdir(parents=True)
    return ArchiveStore(config)


def _write_snapshot(tmp_path: Path, year: str, payload: object) -> None:
    snapshot_path = tmp_path / "archives" / f"{year}.json"
    snapshot_path.write_text(json.dumps(payload), encoding="utf-8")


def test_resolve_reads_snapshot_file(tmp_path: Path) -> None:
    """Requests should be resolved against the stored year file."""
    store = _store(tmp_path)
    _write_snapshot(tmp_path, "2023-2024", {"data": {"ecoles": [{"uai": "9730001A"}]}})

    result = store.resolve(ArchiveQuery(year="2023-2024", kind="ecoles"))

    assert result == [{"uai": "9730001A"}]


def test_load_raises_for_missing_year(tmp_path: Path) -> None:
    """A year without snapshot should be reported as not found."""
    store = _store(tmp_path)

    with pytest.raises(SnapshotNotFound):
        store.load("2019-2020")


def test_load_rejects_malformed_year_key(tmp_path: Path) -> None:
    """Malformed keys should fail before touching the file system."""
    store = _store(tmp_path)

    with pytest.raises(CircoArchiveError) as error_info:
        store.load("../tables/enseignants")

    assert not isinstance(error_info.value, SnapshotNotFound)


def test_load_raises_for_invalid_json(tmp_path: Path) -> None:
    """Unreadable snapshot documents should be reported."""
    store = _store(tmp_path)
    (tmp_path / "archives" / "2022-2023.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(CircoArchiveError):
        store.load("2022-2023")


def test_list_years_returns_most_recent_first(tmp_path: Path) -> None:
    """Archived years should be listed newest first, ignoring other files."""
    store = _store(tmp_path)
    for year in ("2021-2022", "2023-2024", "2022-2023"):
        _write_snapshot(tmp_path, year, {"data": {}})
    (tmp_path / "archives" / "notes.json").write_text("{}", encoding="utf-8")

    assert store.list_years() == ["2023-2024", "2022-2023", "2021-2022"]
