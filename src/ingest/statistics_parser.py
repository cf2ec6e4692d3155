"""School enrollment statistics document parser.

Statistics exports hold an enrollment table (count and label per row)
and a per-level distribution table that also carries cycle totals.
"""

from __future__ import annotations

import re

from core.constants import (
    EFFECTIFS_HEADING,
    EFFECTIFS_TABLE_INDEX,
    ELEMENTAIRE_LEVELS,
    LEVEL_CODES,
    MATERNELLE_LEVELS,
    REPARTITIONS_HEADING,
    REPARTITIONS_TABLE_INDEX,
    TOTAL_LABEL,
)
from core.text_utils import fold_text, parse_count
from core.types import SchoolStatistics
from ingest.html_tables import HtmlPage, HtmlTable, find_uai
from transforms.field_normalizer import EFFECTIF_NORMALIZER

_CYCLE_RE = re.compile(r"\bCYCLE\s+(III|II|I|[1-3])\b")
_ARABIC_TO_ROMAN = {"1": "I", "2": "II", "3": "III"}
_LEADING_DIGIT_RE = re.compile(r"^\s*\d")


def parse_statistics(page: HtmlPage, document_name: str = "") -> SchoolStatistics | None:
    """Parse a statistics document into canonical mappings.

    Args:
        page: Parsed document view.
        document_name: Source name, unused by this variant.

    Returns:
        Statistics record, or ``None`` when no identity key is found.
    """
    uai = find_uai(page.text)
    if uai is None:
        return None
    effectifs = _read_effectifs(_locate_table(page, EFFECTIFS_HEADING, EFFECTIFS_TABLE_INDEX))
    repartitions, totaux = _read_repartitions(
        _locate_table(page, REPARTITIONS_HEADING, REPARTITIONS_TABLE_INDEX)
    )
    return SchoolStatistics(
        uai=uai,
        nom=_school_name(page.text, uai),
        effectifs=effectifs,
        repartitions=repartitions,
        totaux=totaux,
        type_ecole=school_type_for_levels(repartitions),
    )


def school_type_for_levels(levels: dict[str, int] | list[str]) -> str:
    """Derive the school type code from the levels it teaches.

    Args:
        levels: Level codes, or a level-to-count mapping.

    Returns:
        ``E.P.PU``, ``E.M.PU``, ``E.E.PU`` or ``E.PU``.
    """
    present = set(levels)
    has_maternelle = bool(present.intersection(MATERNELLE_LEVELS))
    has_elementaire = bool(present.intersection(ELEMENTAIRE_LEVELS))
    if has_maternelle and has_elementaire:
        return "E.P.PU"
    if has_maternelle:
        return "E.M.PU"
    if has_elementaire:
        return "E.E.PU"
    return "E.PU"


def _locate_table(page: HtmlPage, heading: str, fallback_index: int) -> HtmlTable | None:
    """Find a table by its heading, else by its usual position."""
    for table in page.tables:
        if heading in fold_text(table.heading):
            return table
    return page.table(fallback_index)


def _read_effectifs(table: HtmlTable | None) -> dict[str, int]:
    """Read enrollment rows in either count-first or label-first layout."""
    effectifs: dict[str, int] = {}
    if table is None:
        return effectifs
    for row in table.rows:
        if len(row) < 2:
            continue
        if _LEADING_DIGIT_RE.match(row[0]):
            raw_label, count = row[1], parse_count(row[0])
        elif _LEADING_DIGIT_RE.match(row[1]) or EFFECTIF_NORMALIZER.resolve(row[0]):
            raw_label, count = row[0], parse_count(row[1])
        else:
            continue
        if raw_label:
            effectifs[EFFECTIF_NORMALIZER.resolve(raw_label) or raw_label] = count
    return effectifs


def _read_repartitions(table: HtmlTable | None) -> tuple[dict[str, int], dict[str, int]]:
    """Route distribution rows to level counts or cycle totals."""
    repartitions: dict[str, int] = {}
    totaux: dict[str, int] = {}
    if table is None:
        return repartitions, totaux
    for row in table.rows:
        if len(row) < 2 or not row[0]:
            continue
        label = row[0].strip()
        count = parse_count(row[1])
        if label in LEVEL_CODES:
            repartitions[label] = count
            continue
        total_label = _total_label(label)
        if total_label is not None:
            totaux[total_label] = count
    return repartitions, totaux


def _total_label(label: str) -> str | None:
    """Return the canonical cycle or total label, ``None`` otherwise."""
    cycle = _CYCLE_RE.search(label.upper())
    if cycle is not None:
        numeral = cycle.group(1)
        return f"CYCLE {_ARABIC_TO_ROMAN.get(numeral, numeral)}"
    if fold_text(label).startswith(TOTAL_LABEL.lower()):
        return TOTAL_LABEL
    return None


def _school_name(text: str, uai: str) -> str:
    """Return the uppercase name written after ``<uai> -`` in the page text."""
    match = re.search(rf"{uai}\s*-\s*((?:[A-ZÀ-Ý'-]+\b\s?)+)", text)
    return match.group(1).strip() if match else ""
