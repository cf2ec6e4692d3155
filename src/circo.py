"""Public SDK surface for Circo.

This module provides a stable import path for SDK users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import CircoConfig
from core.types import (
    ArchiveQuery,
    ImportOptions,
    ImportReport,
    RecordFamily,
    TableDedupReport,
)
from ingest.pipeline import deduplicate_table, import_container, import_document
from store.archive_resolver import resolve_archive, snapshot_from_payload
from store.client_sdk import CircoClient
from store.table_store import JsonTableStore, TableStore, WriteOutcome
from transforms.deduplication import dedupe

__all__ = [
    "ArchiveQuery",
    "CircoClient",
    "CircoConfig",
    "ImportOptions",
    "ImportReport",
    "JsonTableStore",
    "RecordFamily",
    "TableDedupReport",
    "TableStore",
    "WriteOutcome",
    "dedupe",
    "deduplicate_table",
    "import_container",
    "import_document",
    "resolve_archive",
    "snapshot_from_payload",
]
