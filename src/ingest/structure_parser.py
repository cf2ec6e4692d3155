"""School structure document parser.

Structure exports list classes and dispositifs in their second table,
one row per class with at least four cells.
"""

from __future__ import annotations

from core.constants import STRUCTURE_TABLE_INDEX
from core.logging_config import get_logger
from core.text_utils import fold_text
from core.types import SchoolStructure, StructureRow
from ingest.column_probing import probe_row
from ingest.html_tables import HtmlPage, Row, find_uai
from transforms.record_classifier import classify_rows

_LOGGER = get_logger(__name__)
_MIN_ROW_CELLS = 4


def parse_structure(page: HtmlPage, document_name: str = "") -> SchoolStructure | None:
    """Parse a structure document into classes and dispositifs.

    Args:
        page: Parsed document view.
        document_name: Source name used in log events.

    Returns:
        Structure record, or ``None`` when no identity key is found.
    """
    uai = find_uai(page.text)
    if uai is None:
        return None
    rows = _read_structure_rows(page, document_name)
    classified = classify_rows(rows)
    return SchoolStructure(
        uai=uai,
        classes=classified.classes,
        dispositifs=classified.dispositifs,
    )


def _read_structure_rows(page: HtmlPage, document_name: str) -> list[StructureRow]:
    """Probe every class row of the structure table."""
    table = page.table(STRUCTURE_TABLE_INDEX)
    if table is None:
        return []
    rows: list[StructureRow] = []
    fallback_count = 0
    for cells in table.rows:
        if len(cells) < _MIN_ROW_CELLS or _is_header_row(cells):
            continue
        result = probe_row(cells)
        if not result.row.libelle:
            continue
        fallback_count += int(result.used_fallback)
        rows.append(result.row)
    if fallback_count:
        _LOGGER.debug(
            "level_column_fallback",
            document_name=document_name,
            row_count=fallback_count,
        )
    return rows


def _is_header_row(cells: Row) -> bool:
    return fold_text(cells[0]).startswith("libelle")
