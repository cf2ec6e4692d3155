"""Unit tests for legacy charset decoding."""

from __future__ import annotations

from core.types import RawDocument
from ingest.document_decoder import decode_document


def test_decode_document_reads_legacy_charset() -> None:
    """Accented bytes of the export charset should decode to text."""
    document = RawDocument(name="a.htm", data="Libellé de l'école".encode("cp1252"))

    decoded = decode_document(document)

    assert decoded.text == "Libellé de l'école" and decoded.substituted is False


def test_decode_document_substitutes_unmapped_bytes() -> None:
    """Unmapped bytes should become placeholders instead of failing."""
    document = RawDocument(name="a.htm", data=b"CP\x81A")

    decoded = decode_document(document)

    assert decoded.text == "CP\ufffdA" and decoded.substituted is True
