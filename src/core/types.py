"""Shared typed models.

This module defines immutable data models used by ingest, transform,
store and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union


class RecordFamily(str, Enum):
    """Record family declared by the caller of an import."""

    IDENTITY = "identite"
    STRUCTURE = "structure"
    STATISTICS = "statistiques"


class SkipReason(str, Enum):
    """Why a document produced no record."""

    IDENTIFIER_NOT_FOUND = "identifier_not_found"
    EXTRACTION_FAILED = "extraction_failed"
    PARSE_FAILED = "parse_failed"
    NO_ROWS = "no_rows"


@dataclass(frozen=True)
class RawDocument:
    """One markup document extracted from a container.

    Attributes:
        name: Entry name inside the container.
        data: Raw undecoded bytes.
    """

    name: str
    data: bytes


@dataclass(frozen=True)
class ExtractedEntry:
    """Container entry yielded by the extractor.

    Exactly one of ``document`` and ``error`` is set.

    Attributes:
        name: Entry name inside the container.
        document: Extracted document when reading succeeded.
        error: Extraction failure message for this entry.
    """

    name: str
    document: RawDocument | None = None
    error: str | None = None


@dataclass(frozen=True)
class DecodedDocument:
    """Decoded document text.

    Attributes:
        name: Source document name.
        text: Decoded markup text.
        substituted: Whether any byte was replaced by a placeholder.
    """

    name: str
    text: str
    substituted: bool = False


@dataclass(frozen=True)
class SchoolIdentity:
    """Canonical school identity record keyed by ``uai``."""

    uai: str
    nom: str = ""
    secteur: str = ""
    type: str = ""
    siret: str = ""
    etat: str = ""
    date_ouverture: str = ""
    commune: str = ""
    civilite: str = ""
    directeur: str = ""
    adresse: str = ""
    ville: str = ""
    telephone: str = ""
    email: str = ""
    college: str = ""


@dataclass(frozen=True)
class StructureRow:
    """Structure table row after column probing, before classification.

    Attributes:
        libelle: Class or dispositif label.
        enseignant: Teacher cell text.
        niveau: Level cell text, empty when unresolved.
        nb_eleves: Non-negative pupil count.
    """

    libelle: str
    enseignant: str
    niveau: str
    nb_eleves: int


@dataclass(frozen=True)
class ClassRecord:
    """Ordinary class of a school."""

    libelle: str
    enseignant: str
    niveau: str
    nb_eleves: int
    dedoublee: bool


@dataclass(frozen=True)
class DispositifRecord:
    """Special-needs provision of a school."""

    libelle: str
    type: str
    nb_eleves: int


@dataclass(frozen=True)
class SchoolStructure:
    """Canonical class and dispositif layout of one school."""

    uai: str
    classes: tuple[ClassRecord, ...] = ()
    dispositifs: tuple[DispositifRecord, ...] = ()


@dataclass(frozen=True)
class SchoolStatistics:
    """Canonical enrollment statistics of one school.

    Attributes:
        uai: School identifier.
        nom: School name found next to the identifier.
        effectifs: Normalized enrollment label to count.
        repartitions: Level code to count.
        totaux: Cycle or total label to count.
        type_ecole: School type derived from levels present.
    """

    uai: str
    nom: str = ""
    effectifs: Mapping[str, int] = field(default_factory=dict)
    repartitions: Mapping[str, int] = field(default_factory=dict)
    totaux: Mapping[str, int] = field(default_factory=dict)
    type_ecole: str = ""


SchoolRecord = Union[SchoolIdentity, SchoolStructure, SchoolStatistics]


@dataclass(frozen=True)
class DocumentOutcome:
    """Typed per-document parse result.

    Attributes:
        document_name: Source document name.
        sequence: Zero-based position of the entry in its container.
        record: Parsed record, ``None`` when skipped.
        skip_reason: Why the document was skipped.
        detail: Human-readable skip detail.
    """

    document_name: str
    sequence: int
    record: SchoolRecord | None = None
    skip_reason: SkipReason | None = None
    detail: str = ""

    @property
    def skipped(self) -> bool:
        """Return whether this document produced no record."""
        return self.record is None

    def describe(self) -> str:
        """Render a one-line skip description."""
        reason = self.skip_reason.value if self.skip_reason else "unknown"
        suffix = f": {self.detail}" if self.detail else ""
        return f"{self.document_name}: {reason}{suffix}"


@dataclass(frozen=True)
class ImportOptions:
    """Import command options.

    Attributes:
        family: Declared record family of the container documents.
        source_uri: Local container path or ``s3://bucket/key`` URI.
        replace: Delete all rows of the target table before inserting.
        batch_size: Optional batch size; family default when omitted.
    """

    family: RecordFamily
    source_uri: str
    replace: bool = True
    batch_size: int | None = None


@dataclass(frozen=True)
class ImportBatchResult:
    """Outcome of a batched persistence run.

    Attributes:
        attempted: Number of records handed to the persister.
        succeeded: Number of records in batches that were written.
        failed: Number of records in batches that failed.
        per_batch_errors: Ordered error messages of failed batches.
        batch_sizes: Ordered sizes of issued batches.
    """

    attempted: int
    succeeded: int
    failed: int
    per_batch_errors: tuple[str, ...] = ()
    batch_sizes: tuple[int, ...] = ()


@dataclass(frozen=True)
class ImportReport:
    """Structured import outcome returned to callers.

    Attributes:
        family: Imported record family.
        documents_seen: Number of markup entries read from the container.
        extracted: Number of records parsed before deduplication.
        collisions: Number of duplicate records removed.
        batch_result: Persistence outcome.
        skipped: Per-document skip outcomes.
    """

    family: RecordFamily
    documents_seen: int
    extracted: int
    collisions: int
    batch_result: ImportBatchResult
    skipped: tuple[DocumentOutcome, ...] = ()

    @property
    def success(self) -> bool:
        """Return whether at least one record was persisted."""
        return self.batch_result.succeeded > 0

    @property
    def count(self) -> int:
        """Return the number of persisted records."""
        return self.batch_result.succeeded

    def to_payload(self) -> dict[str, object]:
        """Render the import result payload."""
        payload: dict[str, object] = {"success": self.success, "count": self.count}
        errors = list(self.batch_result.per_batch_errors)
        errors.extend(outcome.describe() for outcome in self.skipped)
        if errors:
            payload["errors"] = errors
        return payload


@dataclass(frozen=True)
class DedupResult:
    """Deduplication output.

    Attributes:
        records: Unique records in first-seen key order.
        collisions: Number of records removed.
    """

    records: list
    collisions: int


@dataclass(frozen=True)
class TableDedupReport:
    """Outcome of a dedup-only table operation."""

    before: int
    after: int
    removed: int
    batch_result: ImportBatchResult

    @property
    def success(self) -> bool:
        """Return whether the rewritten table holds every unique row."""
        return self.batch_result.failed == 0

    def to_payload(self) -> dict[str, object]:
        """Render the dedup result payload."""
        return {
            "success": self.success,
            "count": self.after,
            "details": {"avant": self.before, "apres": self.after, "supprimes": self.removed},
        }


@dataclass(frozen=True)
class ArchiveQuery:
    """Archive read request.

    Attributes:
        year: School-year key ``YYYY-YYYY``.
        section: Optional computed section name or ``all``.
        kind: Optional ``brutes``/``calculees`` or a legacy category type.
    """

    year: str
    section: str | None = None
    kind: str | None = None
