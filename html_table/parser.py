# html_table/parser.py
"""从 HTML 文档中提取单个表格。

Parser 是一个不可变的配置对象：每个配置方法都返回新的实例（值未变化时
返回自身），因此可以安全地在线程之间共享。每次 parse_html 调用都使用
自己的跨行状态，且不会修改传入的文档。

跨行（rowspan）状态的作用范围：每个 tbody/tfoot 容器各自独立；直接挂在
table 下的 tr 共享一份整表状态；表头行总是使用独立的新状态。
"""
import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union

from lxml import etree

from html_table.documents import Source, load_document, read_source, tag_name, text_content
from html_table.errors import InvalidSectionError, TableNotFoundError, UnexpectedElementError
from html_table.records import Formatter, format_record, validate_header
from html_table.rowspan import RowSpanState, extract_row
from html_table.sections import CONTENT_SECTIONS, Section, is_included, row_expression, section_for_tag
from html_table.selectors import TABLE_EXPRESSION, table_expression, validate_expression
from html_table.table import Table


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parser:
    expression: str = TABLE_EXPRESSION.format(position=1)
    header: Tuple[str, ...] = ()
    ignore_header: bool = False
    header_section: Section = Section.HEADER
    header_offset: int = 0
    sections: FrozenSet[Section] = CONTENT_SECTIONS
    formatter: Optional[Formatter] = field(default=None, compare=False)
    caption: Optional[str] = None
    strict: bool = False

    # ============================
    # 配置
    # ============================

    def table_position(self, position_or_id: Union[int, str]) -> "Parser":
        """按位置（从 0 开始）或 id 属性选择表格"""
        return self._with_expression(table_expression(position_or_id))

    def table_xpath_expression(self, expression: str) -> "Parser":
        return self._with_expression(validate_expression(expression))

    def _with_expression(self, expression: str) -> "Parser":
        if expression == self.expression:
            return self
        return replace(self, expression=expression)

    def table_header(self, header: Sequence[str]) -> "Parser":
        """显式指定表头；传入空序列表示不使用显式表头"""
        names = validate_header(header)
        if names == self.header:
            return self
        return replace(self, header=names)

    def ignore_table_header(self) -> "Parser":
        if self.ignore_header:
            return self
        return replace(self, ignore_header=True)

    def resolve_table_header(self) -> "Parser":
        if not self.ignore_header:
            return self
        return replace(self, ignore_header=False)

    def table_header_position(self, section: Section, offset: int = 0) -> "Parser":
        """指定用于推导表头的分区和行偏移"""
        if not isinstance(section, Section):
            raise InvalidSectionError(f"`{section!r}` is not a table section.")
        row_expression(section, offset)  # 校验 offset
        if section is self.header_section and offset == self.header_offset:
            return self
        return replace(self, header_section=section, header_offset=offset)

    def include_sections(self, *sections: Section) -> "Parser":
        return self._with_sections(self.sections | _content_sections(sections))

    def exclude_sections(self, *sections: Section) -> "Parser":
        return self._with_sections(self.sections - _content_sections(sections))

    def _with_sections(self, sections: FrozenSet[Section]) -> "Parser":
        if sections == self.sections:
            return self
        return replace(self, sections=sections)

    def with_formatter(self, formatter: Formatter) -> "Parser":
        if formatter is self.formatter:
            return self
        return replace(self, formatter=formatter)

    def without_formatter(self) -> "Parser":
        return self.with_formatter(None)

    def table_caption(self, caption: Optional[str]) -> "Parser":
        """表格中没有 caption 元素时使用的默认标题"""
        if caption == self.caption:
            return self
        return replace(self, caption=caption)

    def fail_on_markup_errors(self) -> "Parser":
        if self.strict:
            return self
        return replace(self, strict=True)

    def ignore_markup_errors(self) -> "Parser":
        if not self.strict:
            return self
        return replace(self, strict=False)

    # ============================
    # 解析
    # ============================

    def parse_file(self, filename_or_stream) -> Table:
        return self.parse_html(read_source(filename_or_stream))

    def parse_html(self, source: Source) -> Table:
        document = load_document(source, strict=self.strict)
        table = self.locate_table(document)

        header, header_rows = self.resolve_header(table)
        records = self.extract_records(table, header, header_rows)
        caption = self.resolve_caption(table)

        logger.debug("表格解析完成: %s，表头 %d 列，%d 条记录", self.expression, len(header), len(records))

        return Table(records, header=header, caption=caption)

    def locate_table(self, document: etree._Element) -> etree._Element:
        matches = document.xpath(self.expression)
        if isinstance(matches, list):
            if not matches:
                raise TableNotFoundError()
            node = matches[0]
        else:
            node = matches

        if tag_name(node) != "table":
            raise UnexpectedElementError(
                f"The expression `{self.expression}` selected `{tag_name(node) or type(node).__name__}`, not a table."
            )

        return node

    def resolve_header(self, table: etree._Element) -> Tuple[Tuple[str, ...], Set[etree._Element]]:
        """返回表头以及需要在正文扫描中跳过的表头行"""
        if self.header:
            return self.header, set()

        if self.ignore_header:
            return (), set()

        rows = table.xpath(self.header_section.row_expression(self.header_offset))
        if not rows:
            logger.debug("未找到表头行: %s[%d]", self.header_section.value, self.header_offset)
            return (), set()

        row = rows[0]
        header = extract_row(row, RowSpanState())
        if not header:
            return (), set()

        return validate_header(header), {row}

    def extract_records(
        self,
        table: etree._Element,
        header: Sequence[str],
        header_rows: Set[etree._Element],
    ) -> List:
        records = []
        table_state = RowSpanState()

        for child in table:
            if not is_included(tag_name(child), self.sections):
                continue

            section = section_for_tag(tag_name(child))

            if section is Section.ROW:
                rows: Iterable[etree._Element] = (child,)
                state = table_state
            else:
                rows = (node for node in child if tag_name(node) == "tr")
                state = RowSpanState()

            for row in rows:
                if row in header_rows:
                    continue
                records.append(format_record(extract_row(row, state), header, self.formatter))

        return records

    def resolve_caption(self, table: etree._Element) -> Optional[str]:
        """第一个 caption 的文本，去掉首尾空白（单元格文本则保持原样）；
        没有 caption 时返回配置的默认标题
        """
        captions = table.xpath(".//caption")
        if captions:
            return text_content(captions[0]).strip()

        return self.caption


def _content_sections(sections: Iterable[Section]) -> FrozenSet[Section]:
    result = frozenset(sections)
    for section in result:
        if not isinstance(section, Section):
            raise InvalidSectionError(f"`{section!r}` is not a table section.")
        if section not in CONTENT_SECTIONS:
            raise InvalidSectionError("The table header section can not be scanned for records.")

    return result
