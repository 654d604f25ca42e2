# html_table/extractor.py
import logging
from typing import Any, Dict, List, Optional

from html_table.documents import Source, load_document, read_source
from html_table.errors import DuplicateHeaderNamesError
from html_table.parser import Parser


logger = logging.getLogger(__name__)


def extract_tables_from_html(filepath: str, parser: Optional[Parser] = None) -> List[Dict[str, Any]]:
    """从HTML文件中提取全部表格"""
    parser = parser or Parser()
    tables = extract_tables(read_source(filepath), parser)

    if tables:
        logger.info("成功提取 %d 个表格: %s", len(tables), filepath)
    else:
        logger.warning("未从 HTML 中提取到表格: %s", filepath)

    return tables


def extract_tables(source: Source, parser: Optional[Parser] = None) -> List[Dict[str, Any]]:
    """文档只解析一次，按文档顺序对每个表格应用同一套配置"""
    parser = parser or Parser()
    document = load_document(source, strict=parser.strict)
    count = int(document.xpath("count(//table)"))

    tables = []
    for position in range(count):
        try:
            table = parser.table_position(position).parse_html(document)
        except DuplicateHeaderNamesError as exc:
            logger.warning("跳过第 %d 个表格: %s", position, exc)
            continue

        tables.append(table.as_dict())

    return tables
