"""HTML table access for exported school documents.

This module turns decoded markup into plain cell grids and page text
so parsers never touch the DOM directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from core.constants import UAI_PATTERN
from core.text_utils import collapse_whitespace

_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_NOISE_TAGS = ["script", "style", "noscript"]
_UAI_RE = re.compile(rf"\b{UAI_PATTERN}\b")
_UAI_VALUE_RE = re.compile(rf"^{UAI_PATTERN}$")

Row = tuple[str, ...]


@dataclass(frozen=True)
class HtmlTable:
    """One table as rows of cell texts.

    Attributes:
        rows: Direct rows of the table, nested tables excluded.
        heading: Text of the closest heading before the table.
    """

    rows: tuple[Row, ...]
    heading: str = ""


@dataclass(frozen=True)
class HtmlPage:
    """Parsed document view.

    Attributes:
        text: Whitespace-collapsed visible text of the page.
        tables: Tables in document order.
    """

    text: str
    tables: tuple[HtmlTable, ...]

    def table(self, index: int) -> HtmlTable | None:
        """Return the table at ``index`` or ``None`` when absent."""
        if 0 <= index < len(self.tables):
            return self.tables[index]
        return None


def parse_html(markup: str) -> HtmlPage:
    """Parse decoded markup into page text and table grids.

    Args:
        markup: Decoded HTML text.

    Returns:
        Page view with text and tables.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()
    tables = tuple(_read_table(table) for table in soup.find_all("table"))
    return HtmlPage(text=collapse_whitespace(soup.get_text(" ")), tables=tables)


def find_uai(text: str) -> str | None:
    """Return the first identity key token found in text."""
    match = _UAI_RE.search(text)
    return match.group(0) if match else None


def is_uai(value: str) -> bool:
    """Return whether a value is exactly one identity key."""
    return _UAI_VALUE_RE.match(value.strip()) is not None


def _read_table(table: Tag) -> HtmlTable:
    """Collect direct rows and heading of one table element."""
    rows: list[Row] = []
    for row in table.find_all("tr"):
        if row.find_parent("table") is not table:
            continue
        cells = row.find_all("td", recursive=False)
        rows.append(tuple(collapse_whitespace(cell.get_text(" ")) for cell in cells))
    heading_tag = table.find_previous(_HEADING_TAGS)
    heading = collapse_whitespace(heading_tag.get_text(" ")) if heading_tag else ""
    return HtmlTable(rows=tuple(rows), heading=heading)
