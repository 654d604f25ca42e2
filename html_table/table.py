# html_table/table.py
from functools import reduce as _reduce
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd

from html_table.records import format_record, validate_header


class Table:
    """解析结果：表头、记录序列和可选标题，构造后不可修改"""

    __slots__ = ("_records", "_header", "_caption")

    def __init__(self, records: Iterable[Any] = (), header: Sequence[str] = (), caption: Optional[str] = None):
        self._records = tuple(records)
        self._header = tuple(header)
        self._caption = caption

    @property
    def header(self) -> List[str]:
        return list(self._header)

    @property
    def caption(self) -> Optional[str]:
        return self._caption

    @property
    def records(self) -> List[Any]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._records)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._derive(self._records[index])
        return self._records[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return (self._records, self._header, self._caption) == (other._records, other._header, other._caption)

    def __repr__(self) -> str:
        return f"Table(records={len(self._records)}, header={list(self._header)!r}, caption={self._caption!r})"

    def _derive(self, records: Iterable[Any]) -> "Table":
        return Table(records, header=self._header, caption=self._caption)

    def nth(self, offset: int) -> Any:
        """返回第 offset 条记录；越界时返回空记录"""
        if 0 <= offset < len(self._records):
            return self._records[offset]

        return {} if self._header else []

    def first(self) -> Any:
        return self.nth(0)

    def filter(self, predicate: Callable[[Any], bool]) -> "Table":
        return self._derive(record for record in self._records if predicate(record))

    def slice(self, offset: int, length: Optional[int] = None) -> "Table":
        end = None if length is None else offset + length
        return self._derive(self._records[offset:end])

    def sorted(self, key: Callable[[Any], Any], reverse: bool = False) -> "Table":
        return self._derive(sorted(self._records, key=key, reverse=reverse))

    def reduce(self, function: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        return _reduce(function, self._records, initial)

    def each(self, function: Callable[[Any], Any]) -> bool:
        """依次回调每条记录，回调返回 False 时提前停止"""
        for record in self._records:
            if function(record) is False:
                return False

        return True

    def exists(self, predicate: Callable[[Any], bool]) -> bool:
        return any(predicate(record) for record in self._records)

    def _column_key(self, name_or_offset: Union[str, int]) -> Union[str, int]:
        if isinstance(name_or_offset, int) and self._header:
            return self._header[name_or_offset]
        if isinstance(name_or_offset, str) and name_or_offset not in self._header:
            raise KeyError(f"`{name_or_offset}` is not a header column name.")

        return name_or_offset

    def fetch_column(self, name_or_offset: Union[str, int] = 0) -> Iterator[Any]:
        key = self._column_key(name_or_offset)
        for record in self._records:
            try:
                yield record[key]
            except (KeyError, IndexError, TypeError):
                continue

    def fetch_pairs(self, key: Union[str, int] = 0, value: Union[str, int] = 1) -> Iterator[Tuple[Any, Any]]:
        """逐条返回 (key 列, value 列)；缺少 key 列的记录被跳过，缺少 value 列时值为 None"""
        key_column = self._column_key(key)
        value_column = self._column_key(value)
        for record in self._records:
            try:
                pair_key = record[key_column]
            except (KeyError, IndexError, TypeError):
                continue
            try:
                pair_value = record[value_column]
            except (KeyError, IndexError, TypeError):
                pair_value = None
            yield pair_key, pair_value

    def get_records(self, header: Sequence[str] = ()) -> Iterator[Any]:
        """按新的表头重新组合每条记录；不传表头时原样返回"""
        names = validate_header(header)
        if not names:
            yield from self._records
            return

        for record in self._records:
            values = list(record.values()) if isinstance(record, dict) else list(record)
            yield format_record(values, names)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "caption": self._caption,
            "header": list(self._header),
            "data": [dict(r) if isinstance(r, dict) else r for r in self._records],
        }

    def to_dataframe(self) -> pd.DataFrame:
        """转换为 pandas DataFrame；有表头时按表头顺序排列列"""
        if self._header:
            return pd.DataFrame(list(self._records), columns=list(self._header))

        return pd.DataFrame(list(self._records))
