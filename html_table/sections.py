# html_table/sections.py
from enum import Enum
from typing import AbstractSet, Optional

from html_table.errors import InvalidOffsetError


class Section(Enum):
    """表格分区；ROW 表示直接挂在 table 下的 tr"""

    HEADER = "thead"
    BODY = "tbody"
    FOOTER = "tfoot"
    ROW = "tr"

    def row_expression(self, offset: int = 0) -> str:
        return row_expression(self, offset)


CONTENT_SECTIONS = frozenset({Section.BODY, Section.FOOTER, Section.ROW})


def row_expression(section: Section, offset: int = 0) -> str:
    """返回相对于 table 元素、选中分区内第 offset+1 行的 XPath 表达式"""
    if offset < 0:
        raise InvalidOffsetError("The table header row offset must be a positive integer or 0.")

    if section is Section.ROW:
        return f"(tr)[{offset + 1}]"

    return f"({section.value}/tr)[{offset + 1}]"


def section_for_tag(tag: Optional[str]) -> Optional[Section]:
    if tag is None:
        return None

    try:
        return Section(tag.lower())
    except ValueError:
        return None


def is_included(tag: Optional[str], sections: AbstractSet[Section]) -> bool:
    section = section_for_tag(tag)
    if section is None or section is Section.HEADER:
        return False

    return section in sections
