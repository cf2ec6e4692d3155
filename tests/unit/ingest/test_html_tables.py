"""Unit tests for HTML table access."""

from __future__ import annotations

from ingest.html_tables import find_uai, is_uai, parse_html


def test_parse_html_excludes_nested_table_rows() -> None:
    """Rows of nested tables should only belong to the nested table."""
    page = parse_html(
        "<table><tr><td>A</td><td><table><tr><td>inner</td></tr></table></td></tr></table>"
    )

    assert page.tables[0].rows == (("A", "inner"),)
    assert page.tables[1].rows == (("inner",),)


def test_parse_html_records_preceding_heading() -> None:
    """Each table should carry the closest heading before it."""
    page = parse_html(
        "<h3>Les effectifs</h3><table><tr><td>1</td></tr></table>"
        "<h3>Les répartitions</h3><p>x</p><table><tr><td>2</td></tr></table>"
    )

    assert [table.heading for table in page.tables] == ["Les effectifs", "Les répartitions"]


def test_parse_html_drops_script_text() -> None:
    """Script content should not leak into page text."""
    page = parse_html("<script>var uai = '9999999Z';</script><p>Ecole  9730001A</p>")

    assert page.text == "Ecole 9730001A"


def test_table_returns_none_when_index_is_absent() -> None:
    """Out-of-range table lookups should return None."""
    page = parse_html("<table><tr><td>a</td></tr></table>")

    assert page.table(1) is None and page.table(0) is not None


def test_find_uai_requires_whole_token() -> None:
    """Identity keys embedded in longer tokens should be ignored."""
    assert find_uai("Code 9730001A - ECOLE") == "9730001A"
    assert find_uai("ref X9730001AB") is None


def test_is_uai_checks_exact_shape() -> None:
    """Only a lone seven-digit, one-letter value is an identity key."""
    assert is_uai(" 9730001A ") is True
    assert is_uai("9730001a") is False
