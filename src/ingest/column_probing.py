"""Level and pupil-count column probing for structure rows.

Exports place the level code in different columns. Candidate layouts
are tried in order and the first whose level cell holds a known level
code is adopted; otherwise the fallback layout is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.constants import LEVEL_CODES
from core.text_utils import parse_count
from core.types import StructureRow

_LEVEL_CODE_RE = re.compile(rf"^({'|'.join(LEVEL_CODES)})")


@dataclass(frozen=True)
class ColumnLayout:
    """Column positions of the level code and the pupil count."""

    level_index: int
    count_index: int


CANDIDATE_LAYOUTS = (
    ColumnLayout(level_index=2, count_index=3),
    ColumnLayout(level_index=3, count_index=4),
)
FALLBACK_LAYOUT = ColumnLayout(level_index=2, count_index=3)
LABEL_INDEX = 0
TEACHER_INDEX = 1


@dataclass(frozen=True)
class ProbeResult:
    """Probed row and whether the fallback layout was used."""

    row: StructureRow
    used_fallback: bool


def is_level_code(text: str) -> bool:
    """Return whether a cell starts with a known level code."""
    return _LEVEL_CODE_RE.match(text.strip()) is not None


def select_layout(cells: tuple[str, ...]) -> tuple[ColumnLayout, bool]:
    """Pick the column layout for one row.

    Args:
        cells: Row cell texts.

    Returns:
        Adopted layout and whether it is the fallback.
    """
    for layout in CANDIDATE_LAYOUTS:
        if is_level_code(_cell(cells, layout.level_index)):
            return layout, False
    return FALLBACK_LAYOUT, True


def probe_row(cells: tuple[str, ...]) -> ProbeResult:
    """Build a structure row from cells using the adopted layout.

    Args:
        cells: Row cell texts, at least four.

    Returns:
        Probe result holding the typed row.
    """
    layout, used_fallback = select_layout(cells)
    row = StructureRow(
        libelle=_cell(cells, LABEL_INDEX),
        enseignant=_cell(cells, TEACHER_INDEX),
        niveau=_cell(cells, layout.level_index),
        nb_eleves=parse_count(_cell(cells, layout.count_index)),
    )
    return ProbeResult(row=row, used_fallback=used_fallback)


def _cell(cells: tuple[str, ...], index: int) -> str:
    return cells[index].strip() if index < len(cells) else ""
