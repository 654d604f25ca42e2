# html_table/rowspan.py
"""按 colspan/rowspan 还原表格行的逻辑网格。

合并单元格的文本会被复制到它覆盖的每一个逻辑位置：colspan=3 产生 3 个
相同的值；rowspan=2 的单元格在下一行的同一列位置再次出现。跨行的待插入
值保存在 RowSpanState 中，由调用方在同一个行容器（tbody/tfoot，或直接
挂在 table 下的全部 tr）内的连续行之间传递，换容器时重新创建。
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from lxml import etree

from html_table.documents import tag_name, text_content


logger = logging.getLogger(__name__)

CELL_TAGS = ("th", "td")
MAX_SPAN = 1000

_LEADING_INTEGER = re.compile(r"^\s*[+-]?\d+")


@dataclass
class PendingSpan:
    values: Tuple[str, ...]
    remaining: int


@dataclass
class RowSpanState:
    """逻辑列号 -> 尚需向后续行补入的单元格值"""

    pending: Dict[int, PendingSpan] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.pending)

    def register(self, column: int, values: List[str], repeat: int) -> None:
        self.pending[column] = PendingSpan(values=tuple(values), remaining=repeat)

    def consume(self, column: int, row: List[str]) -> int:
        """把 column 处的跨行值补入 row，返回补入的宽度"""
        span = self.pending[column]
        row.extend(span.values)
        span.remaining -= 1
        if span.remaining <= 0:
            del self.pending[column]

        return len(span.values)

    def drain(self, column: int, row: List[str], owed: Set[int]) -> int:
        """在 column 处补入所有连续的、本行应得的跨行值，返回新的列号"""
        while column in owed:
            owed.discard(column)
            column += self.consume(column, row)

        return column


def span_size(cell: etree._Element, attribute: str) -> int:
    """读取 colspan/rowspan，缺失、小于 2 或大于 1000 时视为 1"""
    raw = cell.get(attribute)
    if raw is None:
        return 1

    if not (match := _LEADING_INTEGER.match(raw)):
        logger.debug("忽略无法识别的 %s 值: %r", attribute, raw)
        return 1

    span = int(match.group(0))
    if span > MAX_SPAN:
        logger.debug("%s 值 %d 超出上限 %d，按 1 处理", attribute, span, MAX_SPAN)
        return 1
    if span < 2:
        return 1

    return span


def extract_row(row: etree._Element, state: RowSpanState) -> List[str]:
    """提取一行的扁平单元格值，并更新跨行状态"""
    values: List[str] = []
    column = 0
    owed = set(state.pending)

    for node in row:
        if tag_name(node) not in CELL_TAGS:
            continue

        column = state.drain(column, values, owed)

        text = text_content(node)
        colspan = span_size(node, "colspan")
        rowspan = span_size(node, "rowspan")

        group = [text] * colspan
        values.extend(group)
        if rowspan > 1:
            state.register(column, group, rowspan - 1)

        column += colspan

    # 从行尾开始的跨行单元格
    state.drain(column, values, owed)

    # 行过短或被 colspan 越过的跨行值，按列顺序补在行尾
    for key in sorted(owed):
        state.consume(key, values)

    return values
