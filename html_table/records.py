# html_table/records.py
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from html_table.errors import DuplicateHeaderNamesError, InvalidHeaderTypeError


Record = Union[List[str], Dict[str, str]]
Formatter = Callable[[Record], Any]


def validate_header(header: Sequence[str]) -> Tuple[str, ...]:
    """表头只能包含字符串且不能重名"""
    names = tuple(header)
    if any(not isinstance(name, str) for name in names):
        raise InvalidHeaderTypeError("The header record contains non string colum names.")

    if len(set(names)) != len(names):
        raise DuplicateHeaderNamesError.from_header(names)

    return names


def format_record(values: Sequence[str], header: Sequence[str], formatter: Optional[Formatter] = None) -> Any:
    """按表头把一行值组合成列表或字典，再交给可选的 formatter"""
    record: Record
    if not header:
        record = list(values)
    else:
        width = len(header)
        cells = list(values[:width])
        cells.extend([""] * (width - len(cells)))
        record = dict(zip(header, cells))

    if formatter is None:
        return record

    return formatter(record)
