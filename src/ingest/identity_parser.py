"""School identity document parser.

Identity exports are a short sequence of label/value tables: general
information, location, direction contacts and the sector college.
"""

from __future__ import annotations

import re

from core.constants import COLLEGE_TABLE_START, MAX_IDENTITY_TABLES, UAI_PATTERN
from core.types import SchoolIdentity
from ingest.html_tables import HtmlPage, HtmlTable, Row, find_uai, is_uai
from transforms.field_normalizer import IDENTITY_NORMALIZER

_POSTAL_LINE_RE = re.compile(r"^\d{5}\b")
_COLLEGE_CELL_RE = re.compile(rf"^{UAI_PATTERN}")
_CIVILITE_RE = re.compile(r"^(M\.|Mme)\s*")


def parse_identity(page: HtmlPage, document_name: str = "") -> SchoolIdentity | None:
    """Parse an identity document into a canonical record.

    Args:
        page: Parsed document view.
        document_name: Source name, unused by this variant.

    Returns:
        Identity record, or ``None`` when no identity key is found.
    """
    pairs: list[tuple[str, str]] = []
    contact: dict[str, str] = {}
    for index, table in enumerate(page.tables[:MAX_IDENTITY_TABLES]):
        college = _college_from_table(table) if index >= COLLEGE_TABLE_START else None
        if college is not None:
            contact.setdefault("college", college)
            continue
        for row in table.rows:
            _collect_row(row, pairs, contact)
    fields = IDENTITY_NORMALIZER.normalize(pairs)
    for attribute, value in contact.items():
        if value:
            fields[attribute] = value
    uai = _resolve_uai(fields.pop("uai", ""), page.text)
    if uai is None:
        return None
    return SchoolIdentity(uai=uai, **fields)


def _collect_row(row: Row, pairs: list[tuple[str, str]], contact: dict[str, str]) -> None:
    """Route one table row into label pairs or contact fields.

    Rows of more than two cells are read as consecutive label/value
    pairs. A lone cell, or an unlabeled value, starting with a postal
    code continues the address.
    """
    if not row:
        return
    if len(row) == 1:
        _collect_pair("", row[0], pairs, contact)
        return
    for index in range(0, len(row) - 1, 2):
        _collect_pair(row[index], row[index + 1], pairs, contact)


def _collect_pair(
    label: str,
    value: str,
    pairs: list[tuple[str, str]],
    contact: dict[str, str],
) -> None:
    if not label:
        if _POSTAL_LINE_RE.match(value):
            contact.setdefault("ville", value)
        return
    if IDENTITY_NORMALIZER.resolve(label) == "directeur":
        _collect_director(label, value, contact)
        return
    pairs.append((label, value))


def _collect_director(label: str, value: str, contact: dict[str, str]) -> None:
    """Split civility and name of the director row."""
    if not value or contact.get("directeur"):
        return
    match = _CIVILITE_RE.match(value)
    if match is not None:
        contact["civilite"] = match.group(1)
        contact["directeur"] = value[match.end():].strip()
        return
    contact["directeur"] = value
    contact["civilite"] = "Mme" if "Directrice" in label else "M."


def _college_from_table(table: HtmlTable) -> str | None:
    """Return the sector college when the table starts with a college key.

    Cells read like ``9730247F - COLLEGE JUSTIN CATAYEE``; the text after
    the first dash is the college name. Only tables from
    ``COLLEGE_TABLE_START`` on are probed; earlier tables describe the
    school itself.
    """
    if not table.rows or not table.rows[0]:
        return None
    first_cell = table.rows[0][0]
    if not _COLLEGE_CELL_RE.match(first_cell):
        return None
    _, dash, name = first_cell.partition("-")
    return name.strip() if dash else first_cell


def _resolve_uai(labeled_value: str, page_text: str) -> str | None:
    """Prefer a well-formed labeled key, else scan the page text."""
    if labeled_value and is_uai(labeled_value):
        return labeled_value.strip()
    return find_uai(page_text)
