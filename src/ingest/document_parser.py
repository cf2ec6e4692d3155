"""Record-family dispatch for document parsing.

This module turns one decoded document into a typed per-document
outcome: either a canonical record or an inspectable skip reason.
"""

from __future__ import annotations

from typing import Callable

from bs4 import ParserRejectedMarkup

from core.types import (
    DecodedDocument,
    DocumentOutcome,
    RecordFamily,
    SchoolRecord,
    SchoolStructure,
    SkipReason,
)
from ingest.html_tables import HtmlPage, parse_html
from ingest.identity_parser import parse_identity
from ingest.statistics_parser import parse_statistics
from ingest.structure_parser import parse_structure

Parser = Callable[[HtmlPage, str], SchoolRecord | None]

_PARSERS: dict[RecordFamily, Parser] = {
    RecordFamily.IDENTITY: parse_identity,
    RecordFamily.STRUCTURE: parse_structure,
    RecordFamily.STATISTICS: parse_statistics,
}


def parse_document(
    document: DecodedDocument,
    family: RecordFamily,
    sequence: int = 0,
) -> DocumentOutcome:
    """Parse one decoded document with the variant of its family.

    Args:
        document: Decoded document.
        family: Declared record family.
        sequence: Position of the document in its container.

    Returns:
        Outcome holding the record or the skip reason.
    """
    try:
        page = parse_html(document.text)
        record = _PARSERS[family](page, document.name)
    except (ParserRejectedMarkup, ValueError, LookupError) as error:
        return DocumentOutcome(
            document_name=document.name,
            sequence=sequence,
            skip_reason=SkipReason.PARSE_FAILED,
            detail=f"{type(error).__name__}: {error}",
        )
    if record is None:
        return DocumentOutcome(
            document_name=document.name,
            sequence=sequence,
            skip_reason=SkipReason.IDENTIFIER_NOT_FOUND,
            detail="no UAI token in document",
        )
    if isinstance(record, SchoolStructure) and not (record.classes or record.dispositifs):
        return DocumentOutcome(
            document_name=document.name,
            sequence=sequence,
            skip_reason=SkipReason.NO_ROWS,
            detail=f"no class rows for {record.uai}",
        )
    return DocumentOutcome(document_name=document.name, sequence=sequence, record=record)


def skipped_entry(name: str, sequence: int, error: str) -> DocumentOutcome:
    """Build the outcome of a container entry that could not be read."""
    return DocumentOutcome(
        document_name=name,
        sequence=sequence,
        skip_reason=SkipReason.EXTRACTION_FAILED,
        detail=error,
    )
