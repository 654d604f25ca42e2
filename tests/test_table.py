import pathlib
import sys

import pandas as pd
import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from html_table.errors import DuplicateHeaderNamesError  # noqa: E402
from html_table.table import Table  # noqa: E402


HEADER = ["prenoms", "nombre"]
RECORDS = [
    {"prenoms": "Abdoulaye", "nombre": "15"},
    {"prenoms": "Abel", "nombre": "14"},
    {"prenoms": "Abiga", "nombre": "6"},
]


@pytest.fixture()
def table():
    return Table(RECORDS, header=HEADER, caption="Prénoms")


def test_basic_accessors(table):
    assert table.header == HEADER
    assert table.caption == "Prénoms"
    assert len(table) == 3
    assert list(table) == RECORDS
    assert table[1] == RECORDS[1]


def test_nth_out_of_range_returns_empty_record(table):
    assert table.nth(5) == {}
    assert table.nth(-1) == {}
    assert Table([["a"]]).nth(3) == []
    assert Table().first() == []


def test_slices_keep_header_and_caption(table):
    sliced = table[1:]
    assert isinstance(sliced, Table)
    assert sliced.header == HEADER
    assert sliced.caption == "Prénoms"
    assert list(sliced) == RECORDS[1:]

    assert list(table.slice(1, 1)) == [RECORDS[1]]
    assert list(table.slice(0)) == RECORDS


def test_filter_and_sorted(table):
    filtered = table.filter(lambda record: int(record["nombre"]) > 10)
    assert [record["prenoms"] for record in filtered] == ["Abdoulaye", "Abel"]
    assert filtered.caption == "Prénoms"

    ordered = table.sorted(key=lambda record: int(record["nombre"]))
    assert [record["prenoms"] for record in ordered] == ["Abiga", "Abel", "Abdoulaye"]


def test_reduce_each_exists(table):
    assert table.reduce(lambda carry, record: carry + int(record["nombre"]), 0) == 35

    seen = []
    assert table.each(seen.append) is True
    assert len(seen) == 3

    seen = []
    assert table.each(lambda record: seen.append(record) or False) is False
    assert len(seen) == 1

    assert table.exists(lambda record: record["prenoms"] == "Abel")
    assert not table.exists(lambda record: record["prenoms"] == "Zoe")


def test_fetch_column(table):
    assert list(table.fetch_column("prenoms")) == ["Abdoulaye", "Abel", "Abiga"]
    assert list(table.fetch_column(1)) == ["15", "14", "6"]
    assert list(Table([["a", "b"], ["c"]]).fetch_column(1)) == ["b"]

    with pytest.raises(KeyError):
        list(table.fetch_column("missing"))


def test_fetch_pairs(table):
    assert list(table.fetch_pairs()) == [("Abdoulaye", "15"), ("Abel", "14"), ("Abiga", "6")]
    assert dict(table.fetch_pairs("nombre", "prenoms")) == {"15": "Abdoulaye", "14": "Abel", "6": "Abiga"}

    ragged = Table([["a", "1"], ["b"], []])
    assert list(ragged.fetch_pairs()) == [("a", "1"), ("b", None)]

    with pytest.raises(KeyError):
        list(table.fetch_pairs("prenoms", "missing"))


def test_get_records_rekeys_by_new_header(table):
    assert list(table.get_records()) == RECORDS
    assert list(table.get_records(["name", "count", "extra"]))[0] == {"name": "Abdoulaye", "count": "15", "extra": ""}
    assert list(Table([["a", "b", "c"]]).get_records(["x", "y"])) == [{"x": "a", "y": "b"}]

    with pytest.raises(DuplicateHeaderNamesError):
        list(table.get_records(["x", "x"]))


def test_table_is_independent_of_source_list():
    records = [["a"]]
    table = Table(records)
    records.append(["b"])

    assert len(table) == 1


def test_as_dict(table):
    assert table.as_dict() == {"caption": "Prénoms", "header": HEADER, "data": RECORDS}


def test_to_dataframe_uses_header_order(table):
    frame = table.to_dataframe()

    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == HEADER
    assert frame["nombre"].tolist() == ["15", "14", "6"]


def test_to_dataframe_without_header():
    frame = Table([["a", "b"], ["c", "d"]]).to_dataframe()
    assert frame.shape == (2, 2)
    assert frame.iloc[1, 0] == "c"


def test_empty_table_with_header_keeps_columns():
    frame = Table([], header=HEADER).to_dataframe()
    assert frame.empty
    assert list(frame.columns) == HEADER
