"""Table store collaborator contract and JSON file implementation.

Persistence only needs keyed upserts, a delete-all and a full read.
``JsonTableStore`` keeps one JSON array file per table.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from core.errors import CircoStoreError

_TABLE_NAME_RE = re.compile(r"^[a-z0-9_]+$")


@dataclass(frozen=True)
class WriteOutcome:
    """Result of one store write call.

    Attributes:
        written: Number of records written.
        error: Failure message when the write was rejected.
    """

    written: int
    error: str | None = None


class TableStore(Protocol):
    """Storage collaborator used by the batch persister."""

    def upsert_batch(
        self,
        table: str,
        records: Sequence[Mapping[str, Any]],
        conflict_key: str,
    ) -> WriteOutcome:
        """Insert or overwrite records by conflict key.

        Rejections are reported through the outcome error; stores may
        also raise ``BatchWriteError``.
        """

    def delete_all(self, table: str) -> WriteOutcome:
        """Remove every row of a table."""

    def read_all(self, table: str) -> list[dict[str, Any]]:
        """Return every row of a table in stored order."""


class JsonTableStore:
    """Table store writing one JSON array file per table."""

    def __init__(self, tables_dir: Path) -> None:
        """Initialize the store.

        Args:
            tables_dir: Directory holding table files.
        """
        self._tables_dir = tables_dir
        self._tables_dir.mkdir(parents=True, exist_ok=True)

    def upsert_batch(
        self,
        table: str,
        records: Sequence[Mapping[str, Any]],
        conflict_key: str,
    ) -> WriteOutcome:
        """Insert or overwrite records sharing ``conflict_key`` values.

        Existing rows keep their position; new rows are appended.

        Args:
            table: Table name.
            records: Records to write.
            conflict_key: Field identifying a row.

        Returns:
            Write outcome with the written count or the error.
        """
        missing = [index for index, record in enumerate(records) if conflict_key not in record]
        if missing:
            return WriteOutcome(
                written=0,
                error=f"{len(missing)} record(s) lack conflict key '{conflict_key}'",
            )
        unusable = [record[conflict_key] for record in records if not _is_key(record[conflict_key])]
        if unusable:
            return WriteOutcome(
                written=0,
                error=f"{len(unusable)} record(s) have an unusable '{conflict_key}' value",
            )
        try:
            rows = self.read_all(table)
        except CircoStoreError as error:
            return WriteOutcome(written=0, error=str(error))
        position_by_key = {
            row.get(conflict_key): index
            for index, row in enumerate(rows)
            if _is_key(row.get(conflict_key))
        }
        for record in records:
            row = dict(record)
            position = position_by_key.get(row[conflict_key])
            if position is None:
                position_by_key[row[conflict_key]] = len(rows)
                rows.append(row)
            else:
                rows[position] = row
        error = self._write_rows(table, rows)
        return WriteOutcome(written=0 if error else len(records), error=error)

    def delete_all(self, table: str) -> WriteOutcome:
        """Remove every row of ``table``."""
        error = self._write_rows(table, [])
        return WriteOutcome(written=0, error=error)

    def read_all(self, table: str) -> list[dict[str, Any]]:
        """Read every row of ``table``.

        Raises:
            CircoStoreError: If the table file is not a JSON array.
        """
        table_path = self._table_path(table)
        if not table_path.exists():
            return []
        try:
            payload = json.loads(table_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise CircoStoreError(
                f"Failed to read table {table} at {table_path}: {error}. "
                "Reset the table and re-run the import."
            ) from error
        if not isinstance(payload, list):
            raise CircoStoreError(
                f"Failed to read table {table} at {table_path}: "
                "expected a JSON array at top level. Reset the table."
            )
        return [dict(row) for row in payload if isinstance(row, dict)]

    def _write_rows(self, table: str, rows: list[dict[str, Any]]) -> str | None:
        table_path = self._table_path(table)
        try:
            table_path.write_text(
                json.dumps(rows, ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as error:
            return f"Failed to write table {table} at {table_path}: {error}"
        return None

    def _table_path(self, table: str) -> Path:
        if not _TABLE_NAME_RE.match(table):
            raise CircoStoreError(
                f"Invalid table name '{table}': use lowercase letters, digits and underscores."
            )
        return self._tables_dir / f"{table}.json"


def _is_key(value: Any) -> bool:
    """Return whether ``value`` can identify a row."""
    try:
        hash(value)
    except TypeError:
        return False
    return True
