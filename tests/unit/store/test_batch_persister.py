"""Unit tests for batched persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import pytest

from core.errors import BatchWriteError, TableResetError
from store.batch_persister import persist_records
from store.table_store import JsonTableStore, WriteOutcome


class RecordingStore:
    """In-memory table store recording calls and failing on demand."""

    def __init__(
        self,
        failing_batches: set[int] | None = None,
        raising_batches: set[int] | None = None,
        disconnected_batches: set[int] | None = None,
        delete_error: str | None = None,
    ) -> None:
        self.batches: list[list[Mapping[str, Any]]] = []
        self.calls: list[str] = []
        self.rows: dict[Any, Mapping[str, Any]] = {}
        self._failing_batches = failing_batches or set()
        self._raising_batches = raising_batches or set()
        self._disconnected_batches = disconnected_batches or set()
        self._delete_error = delete_error

    def upsert_batch(
        self,
        table: str,
        records: Sequence[Mapping[str, Any]],
        conflict_key: str,
    ) -> WriteOutcome:
        batch_index = len(self.batches)
        self.batches.append(list(records))
        self.calls.append("upsert")
        if batch_index in self._raising_batches:
            raise BatchWriteError("connection reset")
        if batch_index in self._disconnected_batches:
            raise ConnectionError("network down")
        if batch_index in self._failing_batches:
            return WriteOutcome(written=0, error="constraint violation")
        for record in records:
            self.rows[record[conflict_key]] = record
        return WriteOutcome(written=len(records))

    def delete_all(self, table: str) -> WriteOutcome:
        self.calls.append("delete")
        if self._delete_error:
            return WriteOutcome(written=0, error=self._delete_error)
        self.rows.clear()
        return WriteOutcome(written=0)

    def read_all(self, table: str) -> list[dict[str, Any]]:
        return [dict(row) for row in self.rows.values()]


def _payloads(count: int) -> list[dict[str, Any]]:
    return [{"uai": f"{index:07d}A"} for index in range(count)]


def test_persist_records_issues_ordered_batches() -> None:
    """230 records with batch size 100 should yield batches of 100, 100 and 30."""
    store = RecordingStore()

    result = persist_records(store, "ecoles", _payloads(230), "uai", 100)

    assert [len(batch) for batch in store.batches] == [100, 100, 30]
    assert result.batch_sizes == (100, 100, 30) and result.succeeded == 230
    assert store.batches[2][-1] == {"uai": "0000229A"}


def test_persist_records_continues_after_failed_batch() -> None:
    """A failing batch should be recorded without stopping later batches."""
    store = RecordingStore(failing_batches={1}, raising_batches={2})

    result = persist_records(store, "ecoles", _payloads(250), "uai", 100)

    assert (result.attempted, result.succeeded, result.failed) == (250, 100, 150)
    assert len(result.per_batch_errors) == 2
    assert result.per_batch_errors[0] == "batch 1: constraint violation"
    assert "connection reset" in result.per_batch_errors[1]


def test_persist_records_records_foreign_store_exceptions() -> None:
    """Non-Circo exceptions from the store should fail only their own batch."""
    store = RecordingStore(disconnected_batches={0})

    result = persist_records(store, "ecoles", _payloads(3), "uai", 1)

    assert len(store.batches) == 3
    assert (result.succeeded, result.failed) == (2, 1)
    assert result.per_batch_errors == ("batch 0: ConnectionError: network down",)
    assert sorted(store.rows) == ["0000001A", "0000002A"]


def test_persist_records_resets_table_first_in_replace_mode() -> None:
    """Replace mode should delete existing rows before the first batch."""
    store = RecordingStore()
    store.rows["old"] = {"uai": "old"}

    persist_records(store, "ecoles", _payloads(3), "uai", 2, replace=True)

    assert store.calls == ["delete", "upsert", "upsert"] and "old" not in store.rows


def test_persist_records_aborts_when_reset_fails() -> None:
    """A failing reset should abort before any batch is written."""
    store = RecordingStore(delete_error="permission denied")

    with pytest.raises(TableResetError):
        persist_records(store, "ecoles", _payloads(3), "uai", 2, replace=True)

    assert store.batches == []


def test_persist_records_without_payloads_issues_no_batch() -> None:
    """An empty payload list should not call the store."""
    store = RecordingStore()

    result = persist_records(store, "ecoles", [], "uai", 50)

    assert store.calls == [] and result.batch_sizes == ()


def test_persist_records_reports_unusable_keys_of_json_store(tmp_path: Path) -> None:
    """A batch with an unhashable key should fail alone against the JSON store."""
    store = JsonTableStore(tmp_path)

    result = persist_records(store, "ecoles", [{"uai": ["x"]}, {"uai": "y"}], "uai", 1)

    assert (result.succeeded, result.failed) == (1, 1)
    assert result.per_batch_errors[0].startswith("batch 0: ")
    assert store.read_all("ecoles") == [{"uai": "y"}]
