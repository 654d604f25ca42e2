import argparse
import json
import logging
import signal
import sys

from html_table.documents import read_source
from html_table.errors import ParserError
from html_table.extractor import extract_tables
from html_table.parser import Parser
from html_table.sections import Section
from html_table.table import Table

logger = logging.getLogger(__name__)


def signal_handler(sig, frame):
    """处理中断信号"""
    print("\n程序被用户中断，正在退出...", file=sys.stderr)
    sys.exit(0)


def build_parser(args) -> Parser:
    """将命令行参数映射为 Parser 配置"""
    parser = Parser()

    if args.xpath:
        parser = parser.table_xpath_expression(args.xpath)
    elif args.table is not None:
        position_or_id = int(args.table) if args.table.lstrip("-").isdigit() else args.table
        parser = parser.table_position(position_or_id)

    if args.header:
        parser = parser.table_header([name.strip() for name in args.header.split(",")])
    if args.no_header:
        parser = parser.ignore_table_header()

    parser = parser.table_header_position(Section(args.header_section), args.header_offset)

    if args.exclude_section:
        parser = parser.exclude_sections(*(Section(tag) for tag in args.exclude_section))
    if args.caption is not None:
        parser = parser.table_caption(args.caption)
    if args.strict:
        parser = parser.fail_on_markup_errors()

    return parser


def write_output(payload, args):
    if args.format == "csv":
        tables = payload if isinstance(payload, list) else [payload]
        stream = open(args.output, "w", encoding="utf-8", newline="") if args.output else sys.stdout
        try:
            for item in tables:
                frame = Table(item["data"], header=item["header"]).to_dataframe()
                frame.to_csv(stream, index=False, header=bool(item["header"]))
        finally:
            if args.output:
                stream.close()
        return

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        print(text)


def main(argv=None):
    cli = argparse.ArgumentParser(description='从 HTML 文档中提取表格数据')
    cli.add_argument('source', help='HTML 文件路径，"-" 表示标准输入')
    cli.add_argument('--table', help='表格位置（从 0 开始）或 id 属性值')
    cli.add_argument('--xpath', help='直接使用 XPath 表达式定位表格')
    cli.add_argument('--header', help='显式表头，逗号分隔')
    cli.add_argument('--no-header', action='store_true', help='不使用表头')
    cli.add_argument('--header-section', default='thead', choices=[s.value for s in Section],
                     help='推导表头的分区')
    cli.add_argument('--header-offset', type=int, default=0, help='表头行在分区内的偏移')
    cli.add_argument('--exclude-section', action='append', choices=['tbody', 'tfoot', 'tr'],
                     help='扫描记录时跳过的分区（可重复）')
    cli.add_argument('--caption', help='表格无 caption 时使用的默认标题')
    cli.add_argument('--strict', action='store_true', help='HTML 存在解析错误时失败')
    cli.add_argument('--all', action='store_true', help='提取文档中的全部表格')
    cli.add_argument('--format', default='json', choices=['json', 'csv'], help='输出格式')
    cli.add_argument('--output', help='输出文件，默认标准输出')
    cli.add_argument('--verbose', action='store_true', help='输出调试日志')
    args = cli.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        parser = build_parser(args)
        source = read_source(sys.stdin.buffer if args.source == '-' else args.source)
        if args.all:
            payload = extract_tables(source, parser)
        else:
            payload = parser.parse_html(source).as_dict()
    except ParserError as e:
        logger.error("表格提取失败: %s", e)
        return 1

    write_output(payload, args)
    return 0


if __name__ == "__main__":
    signal.signal(signal.SIGINT, signal_handler)
    sys.exit(main())
