# backend/test_csv_parser.py
# Unit tests for CSV text -> headers/rows splitting

import csv
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.csv_export import serialize_records
from backend.csv_parser import CsvFormatError, ParsedCsv, parse_csv_text, rows_to_records


def test_empty_text():
    parsed = parse_csv_text("")
    assert parsed.headers == []
    assert parsed.rows == []
    assert parsed.is_empty()
    assert parse_csv_text("   \n  \n").is_empty()


def test_basic_split():
    parsed = parse_csv_text("name,tag\nLaptop,IT-1\nPhone,IT-2")
    assert parsed.headers == ["name", "tag"]
    assert parsed.rows == [["Laptop", "IT-1"], ["Phone", "IT-2"]]
    assert parsed.row_count == 2


def test_crlf_line_endings():
    parsed = parse_csv_text("name,tag\r\nLaptop,IT-1\r\n")
    assert parsed.headers == ["name", "tag"]
    assert parsed.rows == [["Laptop", "IT-1"]]


def test_bom_stripped_from_first_header():
    parsed = parse_csv_text("\ufeffname,tag\nLaptop,IT-1")
    assert parsed.headers[0] == "name"


def test_blank_lines_skipped():
    parsed = parse_csv_text("name,tag\n\nLaptop,IT-1\n   \n")
    assert parsed.rows == [["Laptop", "IT-1"]]


def test_ragged_rows_not_padded():
    parsed = parse_csv_text("a,b,c\n1,2\n1,2,3,4")
    assert parsed.rows == [["1", "2"], ["1", "2", "3", "4"]]


def test_quoted_fields_with_commas_quotes_and_newlines():
    text = 'name,notes\n"Dell ""XPS"", 13","line one\nline two"'
    parsed = parse_csv_text(text)
    assert parsed.rows == [['Dell "XPS", 13', "line one\nline two"]]


def test_inverse_of_serializer():
    records = [
        {"name": "Müller, Jan", "email": "jan@example.com", "role": 'The "fixer"'},
        {"name": "Ana", "email": "", "role": "multi\nline"},
    ]
    parsed = parse_csv_text(serialize_records(records))
    assert parsed.headers == ["name", "email", "role"]
    assert parsed.rows == [list(r.values()) for r in records]


def test_rows_to_records_normalizes_keys_and_fills_missing():
    parsed = ParsedCsv(headers=[" Name", "TAG"], rows=[["Laptop"], ["Phone", "IT-2"]])
    assert rows_to_records(parsed) == [
        {"name": "Laptop", "tag": ""},
        {"name": "Phone", "tag": "IT-2"},
    ]


def test_cell_larger_than_reader_default_limit():
    notes = "x" * 200_000
    parsed = parse_csv_text(f'name,tag,category,status,notes\nLaptop,IT-1,Computers,ready,"{notes}"')
    assert parsed.rows == [["Laptop", "IT-1", "Computers", "ready", notes]]


def test_reader_error_raised_as_format_error():
    previous = csv.field_size_limit(10)
    try:
        with pytest.raises(CsvFormatError):
            parse_csv_text('name,notes\nLaptop,"' + "x" * 50 + '"')
    finally:
        csv.field_size_limit(previous)
