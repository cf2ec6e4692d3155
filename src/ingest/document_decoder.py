"""Legacy charset decoding for exported documents."""

from __future__ import annotations

from core.constants import DECODE_PLACEHOLDER, SOURCE_ENCODING
from core.logging_config import get_logger
from core.types import DecodedDocument, RawDocument

_LOGGER = get_logger(__name__)


def decode_document(document: RawDocument) -> DecodedDocument:
    """Decode document bytes with the fixed export charset.

    Unmapped bytes are replaced with a placeholder character instead
    of failing; the substitution is logged.

    Args:
        document: Extracted raw document.

    Returns:
        Decoded document text.
    """
    text = document.data.decode(SOURCE_ENCODING, errors="replace")
    substituted = DECODE_PLACEHOLDER in text
    if substituted:
        _LOGGER.warning(
            "decode_substitution",
            document_name=document.name,
            encoding=SOURCE_ENCODING,
            placeholder_count=text.count(DECODE_PLACEHOLDER),
        )
    return DecodedDocument(name=document.name, text=text, substituted=substituted)
