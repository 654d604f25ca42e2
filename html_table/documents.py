# html_table/documents.py
"""HTML 源文档的读取、解析与 DOM 辅助函数。

所有输入（字符串、字节、lxml 元素、BeautifulSoup 对象）最终都被规范化为
一个 lxml 根元素，后续的 XPath 查询只依赖这个根元素。
"""
import copy
import logging
from typing import IO, List, Optional, Union

from bs4 import Tag, UnicodeDammit
from lxml import etree

from html_table.errors import Diagnostic, MalformedMarkupError, SourceUnreadableError


logger = logging.getLogger(__name__)

Source = Union[str, bytes, etree._Element, etree._ElementTree, Tag]


def read_source(filename_or_stream: Union[str, IO]) -> Union[str, bytes]:
    """从文件路径或已打开的流中读取全部内容"""
    if hasattr(filename_or_stream, "read"):
        try:
            return filename_or_stream.read()
        except (OSError, ValueError) as exc:
            raise SourceUnreadableError("The resource could not be read.") from exc

    try:
        with open(filename_or_stream, "rb") as f:
            return f.read()
    except OSError as exc:
        raise SourceUnreadableError(
            f"`{filename_or_stream}`: failed to open stream: No such file or directory."
        ) from exc


def load_document(source: Source, strict: bool = False) -> etree._Element:
    """将任意输入规范化为 lxml 根元素"""
    if isinstance(source, etree._ElementTree):
        return source.getroot()

    if isinstance(source, etree._Element):
        if source.getparent() is None:
            return source
        # 子元素单独成树，使 //table 只在该元素内部查找
        return copy.deepcopy(source)

    if isinstance(source, Tag):
        markup = str(source)
    elif isinstance(source, (bytes, bytearray)):
        markup = decode_markup(bytes(source))
    else:
        markup = str(source)

    return parse_markup(markup, strict=strict)


def decode_markup(data: bytes) -> str:
    dammit = UnicodeDammit(data, is_html=True)
    if dammit.unicode_markup is None:
        logger.warning("无法识别文档编码，按 UTF-8 替换非法字符")
        return data.decode("utf-8", errors="replace")

    logger.debug("文档编码识别为: %s", dammit.original_encoding)
    return dammit.unicode_markup


def parse_markup(markup: str, strict: bool = False) -> etree._Element:
    """使用 libxml2 解析 HTML，strict 模式下有诊断信息即报错"""
    parser = etree.HTMLParser(recover=True, encoding="utf-8")

    try:
        root = etree.fromstring(markup.encode("utf-8"), parser)
    except etree.XMLSyntaxError as exc:
        diagnostics = _collect_diagnostics(exc.error_log) or [
            Diagnostic(message=str(exc), location=None, line=getattr(exc, "lineno", 0) or 0)
        ]
        if strict:
            raise MalformedMarkupError(diagnostics) from exc
        logger.warning("HTML 无法解析，按空文档处理: %s", exc)
        return etree.Element("html")

    diagnostics = _collect_diagnostics(parser.error_log)
    if diagnostics:
        if strict:
            raise MalformedMarkupError(diagnostics)
        logger.debug("HTML 解析产生 %d 条诊断信息（已忽略）", len(diagnostics))

    if root is None:
        return etree.Element("html")

    return root


def _collect_diagnostics(error_log) -> List[Diagnostic]:
    return [
        Diagnostic(message=entry.message.strip(), location=entry.filename, line=entry.line)
        for entry in error_log
    ]


def tag_name(node) -> Optional[str]:
    """返回小写、去命名空间的标签名；注释等非元素节点返回 None"""
    tag = getattr(node, "tag", None)
    if not isinstance(tag, str):
        return None

    return etree.QName(tag).localname.lower()


def text_content(node: etree._Element) -> str:
    return etree.tostring(node, method="text", encoding="unicode", with_tail=False) or ""
