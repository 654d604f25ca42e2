# html_table/errors.py
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class Diagnostic:
    """libxml2 解析诊断信息"""

    message: str
    location: Optional[str]
    line: int

    def __str__(self) -> str:
        return f"libxml error: {self.message} in {self.location} at line {self.line}"


class ParserError(Exception):
    """所有表格解析错误的基类"""


class InvalidSelectorError(ParserError, ValueError):
    pass


class InvalidOffsetError(ParserError, ValueError):
    pass


class InvalidSectionError(ParserError, ValueError):
    pass


class InvalidHeaderTypeError(ParserError, TypeError):
    pass


class DuplicateHeaderNamesError(ParserError):
    def __init__(self, duplicate_column_names: Sequence[str]):
        self.duplicate_column_names: List[str] = list(duplicate_column_names)
        names = "`, `".join(self.duplicate_column_names)
        super().__init__(f"The header record contains duplicate column names: `{names}`.")

    @classmethod
    def from_header(cls, header: Iterable[str]) -> "DuplicateHeaderNamesError":
        seen = {}
        for name in header:
            seen[name] = seen.get(name, 0) + 1

        return cls([name for name, count in seen.items() if count > 1])


class TableNotFoundError(ParserError):
    def __init__(self, message: str = "The HTML table could not be found in the submitted html."):
        super().__init__(message)


class UnexpectedElementError(ParserError):
    pass


class MalformedMarkupError(ParserError):
    def __init__(self, diagnostics: Sequence[Diagnostic]):
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        super().__init__("\n".join(str(diagnostic) for diagnostic in self.diagnostics))


class SourceUnreadableError(ParserError, OSError):
    pass
