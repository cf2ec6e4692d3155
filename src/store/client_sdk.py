"""Python SDK for school export imports and archive reads.

This module exposes high-level APIs for container and single-document
imports, teacher-table deduplication and archive resolution.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import CircoConfig
from core.types import ArchiveQuery, ImportOptions, ImportReport, RecordFamily, TableDedupReport
from ingest.pipeline import deduplicate_table, import_document, run_import
from store.archive_store import ArchiveStore
from store.table_store import JsonTableStore, TableStore


class CircoClient:
    """Primary SDK entry point for import and archive workflows."""

    def __init__(
        self,
        config: CircoConfig | None = None,
        store: TableStore | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional table store; JSON files under the data root by default.
        """
        self._config = config or CircoConfig.from_env()
        self._store = store or JsonTableStore(self._config.tables_dir)
        self._archives = ArchiveStore(self._config)

    @property
    def store(self) -> TableStore:
        """Table store used by imports."""
        return self._store

    def import_container(self, options: ImportOptions) -> ImportReport:
        """Import every document of an export container.

        Args:
            options: Import options.

        Returns:
            Structured import report.

        Raises:
            ContainerError: If the container cannot be read.
            NoRecordsExtracted: If no document yields a record.
            TableResetError: If the replace-mode reset fails.
        """
        return run_import(options, self._config, self._store)

    def import_document(self, family: RecordFamily, document_path: str) -> ImportReport:
        """Import one document file as a single upsert.

        Args:
            family: Declared record family.
            document_path: Local document path.

        Returns:
            Structured import report.
        """
        path = Path(document_path).expanduser()
        return import_document(path.name, path.read_bytes(), family, self._store)

    def deduplicate_teachers(self) -> TableDedupReport:
        """Collapse duplicate rows of the teacher table."""
        return deduplicate_table(self._store)

    def resolve_archive(self, query: ArchiveQuery) -> object:
        """Resolve an archive read request.

        Raises:
            SnapshotNotFound: If no snapshot exists for ``query.year``.
        """
        return self._archives.resolve(query)

    def list_archives(self) -> list[str]:
        """List archived school years, most recent first."""
        return self._archives.list_years()

    def with_data_root(self, data_root: str) -> "CircoClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance backed by JSON tables under that root.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return CircoClient(replace(self._config, data_root=resolved_root))
