# html_table/selectors.py
import re
from typing import Union

from lxml import etree

from html_table.errors import InvalidSelectorError


TABLE_EXPRESSION = "(//table)[{position}]"
TABLE_ID_EXPRESSION = "//table[@id={literal}]"

_WHITESPACE = re.compile(r"\s")
_PROBE_DOCUMENT = etree.Element("html")


def table_expression(position_or_id: Union[int, str]) -> str:
    """将表格位置（从 0 开始）或 id 属性值转换为 XPath 表达式"""
    if isinstance(position_or_id, bool) or not isinstance(position_or_id, (int, str)):
        raise InvalidSelectorError(
            "the table offset must be a positive integer or the table id attribute value."
        )

    if isinstance(position_or_id, int):
        if position_or_id < 0:
            raise InvalidSelectorError(
                "the table offset must be a positive integer or the table id attribute value."
            )
        return TABLE_EXPRESSION.format(position=position_or_id + 1)

    if _WHITESPACE.search(position_or_id):
        raise InvalidSelectorError("The id attribute's value must not contain whitespace (spaces, tabs etc.)")

    return TABLE_ID_EXPRESSION.format(literal=xpath_literal(position_or_id))


def validate_expression(expression: str) -> str:
    """在空文档上试运行表达式，语法错误时抛出 InvalidSelectorError"""
    if not isinstance(expression, str):
        raise InvalidSelectorError("The XPath expression must be a string.")

    try:
        etree.XPath(expression)(_PROBE_DOCUMENT)
    except etree.XPathError as exc:
        raise InvalidSelectorError(f"The XPath expression `{expression}` is invalid: {exc}") from exc

    return expression


def xpath_literal(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"

    # 同时含单双引号时只能拼接
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"
