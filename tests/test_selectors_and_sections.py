import pathlib
import sys

import pytest
from lxml import etree

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from html_table.errors import InvalidOffsetError, InvalidSelectorError  # noqa: E402
from html_table.sections import (  # noqa: E402
    CONTENT_SECTIONS,
    Section,
    is_included,
    row_expression,
    section_for_tag,
)
from html_table.selectors import table_expression, validate_expression, xpath_literal  # noqa: E402


DOCUMENT = etree.fromstring(
    "<html><body>"
    '<table id="a"><tr><td>0</td></tr></table>'
    '<div><table id="b"><tr><td>1</td></tr></table></div>'
    '<table id="c"><tr><td>2</td></tr></table>'
    "</body></html>"
)


@pytest.mark.parametrize("position, expected_id", [(0, "a"), (1, "b"), (2, "c")])
def test_position_selects_nth_table_in_document_order(position, expected_id):
    assert DOCUMENT.xpath(table_expression(position))[0].get("id") == expected_id


def test_position_past_last_table_matches_nothing():
    assert DOCUMENT.xpath(table_expression(3)) == []


def test_id_selects_table_by_attribute():
    assert table_expression("b") == '//table[@id="b"]'
    assert DOCUMENT.xpath(table_expression("b"))[0].get("id") == "b"


@pytest.mark.parametrize("selector", [-1, "foo bar", "tab\tle", "line\n", True, 1.5, None])
def test_invalid_selectors_are_rejected(selector):
    with pytest.raises(InvalidSelectorError):
        table_expression(selector)


def test_quotes_in_id_are_escaped():
    assert xpath_literal('say"hi') == "'say\"hi'"
    assert xpath_literal("it's") == '"it\'s"'

    literal = xpath_literal("a'b\"c")
    assert literal.startswith("concat(")
    assert etree.Element("x").xpath(literal) == "a'b\"c"


def test_valid_expression_is_returned_verbatim():
    assert validate_expression("//div[@class='x']/table") == "//div[@class='x']/table"


@pytest.mark.parametrize("expression", ["//table[", "", "///", "//table[@id=$missing]", 42])
def test_invalid_expression_is_rejected(expression):
    with pytest.raises(InvalidSelectorError):
        validate_expression(expression)


def test_row_expressions():
    assert row_expression(Section.HEADER) == "(thead/tr)[1]"
    assert row_expression(Section.BODY, 2) == "(tbody/tr)[3]"
    assert row_expression(Section.FOOTER, 0) == "(tfoot/tr)[1]"
    assert row_expression(Section.ROW, 1) == "(tr)[2]"
    assert Section.ROW.row_expression() == "(tr)[1]"
    assert Section.FOOTER.row_expression(2) == row_expression(Section.FOOTER, 2)


def test_row_expression_spans_multiple_bodies():
    table = etree.fromstring(
        "<table><tbody><tr><td>a</td></tr></tbody><tbody><tr><td>b</td></tr></tbody></table>"
    )
    assert table.xpath(row_expression(Section.BODY, 1))[0][0].text == "b"


def test_negative_row_offset_is_rejected():
    with pytest.raises(InvalidOffsetError):
        row_expression(Section.HEADER, -1)


def test_section_for_tag():
    assert section_for_tag("TBODY") is Section.BODY
    assert section_for_tag("tr") is Section.ROW
    assert section_for_tag("caption") is None
    assert section_for_tag(None) is None


def test_inclusion_policy():
    assert is_included("tbody", CONTENT_SECTIONS)
    assert is_included("tr", CONTENT_SECTIONS)
    assert not is_included("tfoot", {Section.BODY})
    assert not is_included("thead", set(Section))
    assert not is_included("colgroup", CONTENT_SECTIONS)
