"""Import orchestration for school export containers.

This module coordinates container extraction, decoding, parsing,
deduplication and batched persistence, and aggregates every
per-document and per-batch outcome into one import report.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import CircoConfig
from core.constants import (
    IDENTITY_BATCH_SIZE,
    IDENTITY_TABLE,
    SCHOOL_CONFLICT_KEY,
    STATISTICS_BATCH_SIZE,
    STATISTICS_TABLE,
    STRUCTURE_BATCH_SIZE,
    STRUCTURE_TABLE,
    TEACHER_BATCH_SIZE,
    TEACHER_CONFLICT_KEY,
    TEACHERS_TABLE,
)
from core.errors import NoRecordsExtracted
from core.logging_config import get_logger
from core.types import (
    DocumentOutcome,
    ExtractedEntry,
    ImportOptions,
    ImportReport,
    RawDocument,
    RecordFamily,
    TableDedupReport,
)
from ingest.container_reader import iter_documents, read_container_bytes
from ingest.document_decoder import decode_document
from ingest.document_parser import parse_document, skipped_entry
from store.batch_persister import persist_records
from store.record_payload import record_to_payload
from store.table_store import TableStore
from transforms.deduplication import dedupe_outcomes, dedupe_teacher_rows

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class FamilyTarget:
    """Destination table settings of one record family."""

    table: str
    conflict_key: str
    batch_size: int


FAMILY_TARGETS: dict[RecordFamily, FamilyTarget] = {
    RecordFamily.IDENTITY: FamilyTarget(IDENTITY_TABLE, SCHOOL_CONFLICT_KEY, IDENTITY_BATCH_SIZE),
    RecordFamily.STRUCTURE: FamilyTarget(
        STRUCTURE_TABLE, SCHOOL_CONFLICT_KEY, STRUCTURE_BATCH_SIZE
    ),
    RecordFamily.STATISTICS: FamilyTarget(
        STATISTICS_TABLE, SCHOOL_CONFLICT_KEY, STATISTICS_BATCH_SIZE
    ),
}


class ImportPipelineRunner:
    """Runner for one container import request."""

    def __init__(self, options: ImportOptions, config: CircoConfig, store: TableStore) -> None:
        self._options = options
        self._config = config
        self._store = store

    def run(self) -> ImportReport:
        """Read the container and import its documents."""
        container_bytes = read_container_bytes(self._options.source_uri, self._config)
        return import_container(
            container_bytes,
            self._options.family,
            self._store,
            replace=self._options.replace,
            batch_size=self._options.batch_size or self._config.batch_size,
        )


def run_import(options: ImportOptions, config: CircoConfig, store: TableStore) -> ImportReport:
    """Run a container import request.

    Args:
        options: Import request options.
        config: Runtime configuration.
        store: Destination table store.

    Returns:
        Structured import report.

    Raises:
        ContainerError: If the container cannot be read or opened.
        NoRecordsExtracted: If no document yields a record.
        TableResetError: If the replace-mode table reset fails.
    """
    runner = ImportPipelineRunner(options, config, store)
    return runner.run()


def import_container(
    container_bytes: bytes,
    family: RecordFamily,
    store: TableStore,
    replace: bool = True,
    batch_size: int | None = None,
) -> ImportReport:
    """Import every markup document of a zip container.

    Args:
        container_bytes: Raw zip bytes.
        family: Declared record family of the documents.
        store: Destination table store.
        replace: Delete all rows of the family table before inserting.
        batch_size: Optional batch size; family default when omitted.

    Returns:
        Structured import report.

    Raises:
        ContainerError: If the container cannot be opened.
        NoRecordsExtracted: If no document yields a record. The table is
            left untouched in that case.
        TableResetError: If the replace-mode table reset fails.
    """
    outcomes = [
        _entry_outcome(entry, family, sequence)
        for sequence, entry in enumerate(iter_documents(container_bytes))
    ]
    return _persist_outcomes(outcomes, family, store, replace, batch_size)


def import_document(
    name: str,
    raw_bytes: bytes,
    family: RecordFamily,
    store: TableStore,
) -> ImportReport:
    """Import one uploaded document as a single upsert.

    Args:
        name: Document name used in reports.
        raw_bytes: Undecoded document bytes.
        family: Declared record family of the document.
        store: Destination table store.

    Returns:
        Structured import report for one document.

    Raises:
        NoRecordsExtracted: If the document yields no record.
    """
    outcome = _entry_outcome(
        ExtractedEntry(name=name, document=RawDocument(name=name, data=raw_bytes)),
        family,
        0,
    )
    return _persist_outcomes([outcome], family, store, replace=False, batch_size=None)


def deduplicate_table(
    store: TableStore,
    table: str = TEACHERS_TABLE,
    batch_size: int = TEACHER_BATCH_SIZE,
) -> TableDedupReport:
    """Collapse duplicate teacher rows of a stored table in place.

    Rows sharing name, first name, school year and school keep the one
    with the lowest ``id``; the table is then rewritten.

    Args:
        store: Table store holding the rows.
        table: Teacher table name.
        batch_size: Rewrite batch size.

    Returns:
        Dedup report with before, after and removed counts.

    Raises:
        TableResetError: If the table cannot be reset before rewriting.
    """
    rows = store.read_all(table)
    dedup = dedupe_teacher_rows(rows)
    batch_result = persist_records(
        store,
        table,
        dedup.records,
        TEACHER_CONFLICT_KEY,
        batch_size,
        replace=True,
    )
    report = TableDedupReport(
        before=len(rows),
        after=len(dedup.records),
        removed=dedup.collisions,
        batch_result=batch_result,
    )
    _LOGGER.info(
        "table_deduplicated",
        table=table,
        before=report.before,
        after=report.after,
        removed=report.removed,
        failed=batch_result.failed,
    )
    return report


def _entry_outcome(entry: ExtractedEntry, family: RecordFamily, sequence: int) -> DocumentOutcome:
    """Decode and parse one extracted entry into a typed outcome."""
    if entry.document is None:
        outcome = skipped_entry(entry.name, sequence, entry.error or "unreadable entry")
    else:
        outcome = parse_document(decode_document(entry.document), family, sequence)
    if outcome.skipped:
        _LOGGER.warning(
            "document_skipped",
            document_name=outcome.document_name,
            sequence=sequence,
            reason=outcome.skip_reason.value if outcome.skip_reason else None,
            detail=outcome.detail,
        )
    return outcome


def _persist_outcomes(
    outcomes: list[DocumentOutcome],
    family: RecordFamily,
    store: TableStore,
    replace: bool,
    batch_size: int | None,
) -> ImportReport:
    """Deduplicate parsed outcomes and persist their payloads."""
    parsed = [outcome for outcome in outcomes if not outcome.skipped]
    skipped = tuple(outcome for outcome in outcomes if outcome.skipped)
    if not parsed:
        raise NoRecordsExtracted(
            f"No {family.value} records extracted from {len(outcomes)} document(s). "
            "Check that the export holds school documents with a UAI.",
            skipped=[outcome.describe() for outcome in skipped],
        )
    target = FAMILY_TARGETS[family]
    dedup = dedupe_outcomes(parsed)
    payloads = [record_to_payload(outcome.record) for outcome in dedup.records]
    batch_result = persist_records(
        store,
        target.table,
        payloads,
        target.conflict_key,
        batch_size or target.batch_size,
        replace=replace,
    )
    report = ImportReport(
        family=family,
        documents_seen=len(outcomes),
        extracted=len(parsed),
        collisions=dedup.collisions,
        batch_result=batch_result,
        skipped=skipped,
    )
    _LOGGER.info(
        "import_completed",
        family=family.value,
        table=target.table,
        documents_seen=report.documents_seen,
        extracted=report.extracted,
        collisions=report.collisions,
        succeeded=batch_result.succeeded,
        failed=batch_result.failed,
        skipped=len(skipped),
        replace=replace,
    )
    return report
