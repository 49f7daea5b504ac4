# frontend/test_csv_files.py
# Unit tests for upload decoding, download naming and the preview table

import sys
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest
from requests.structures import CaseInsensitiveDict

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.csv_files import (
    CSV_MIME,
    decode_upload,
    dated_filename,
    filename_from_disposition,
    preview_frame,
    record_count,
    trigger_download,
)


def test_decode_upload_strips_utf8_bom():
    assert decode_upload("\ufefftag,name\n".encode("utf-8")) == "tag,name\n"


def test_decode_upload_keeps_non_ascii_utf8():
    assert decode_upload("name\nCafé\n".encode("utf-8")) == "name\nCafé\n"


def test_decode_upload_falls_back_to_latin1():
    """Spreadsheet exports in latin-1 still decode instead of failing."""
    assert decode_upload("name\nCafé\n".encode("latin-1")) == "name\nCafé\n"


def test_dated_filename():
    assert dated_filename("assets-export", date(2024, 3, 9)) == "assets-export-2024-03-09.csv"


@pytest.mark.parametrize(
    "header,expected",
    [
        ('attachment; filename="asset-import-template.csv"', "asset-import-template.csv"),
        ("attachment; filename=employees-export-2024-01-02.csv", "employees-export-2024-01-02.csv"),
        ("attachment", "fallback.csv"),
        (None, "fallback.csv"),
        ('attachment; filename=""', "fallback.csv"),
    ],
)
def test_filename_from_disposition(header, expected):
    assert filename_from_disposition(header, "fallback.csv") == expected


def test_preview_frame_pads_short_rows_and_truncates_long_rows():
    df = preview_frame(["tag", "name"], [["A1"], ["A2", "Laptop", "extra"]])
    assert list(df.columns) == ["tag", "name"]
    assert df.values.tolist() == [["A1", ""], ["A2", "Laptop"]]


def test_preview_frame_deduplicates_columns():
    df = preview_frame(["name", "", "name"], [["a", "b", "c"]])
    assert list(df.columns) == ["name", "column_2", "name_3"]


def test_preview_frame_no_rows():
    df = preview_frame(["tag"], [])
    assert list(df.columns) == ["tag"]
    assert df.empty


def test_trigger_download_uses_dated_name_and_csv_mime():
    with patch("frontend.csv_files.st.download_button", return_value=False) as button, \
         patch("frontend.csv_files.date") as fake_date:
        fake_date.today.return_value = date(2024, 1, 31)
        clicked = trigger_download("tag,name\nA1,Laptop", "assets-export", key="dl")

    assert clicked is False
    args, kwargs = button.call_args
    assert args == ("Download CSV",)
    assert kwargs["data"] == b"tag,name\nA1,Laptop"
    assert kwargs["file_name"] == "assets-export-2024-01-31.csv"
    assert kwargs["mime"] == CSV_MIME
    assert kwargs["key"] == "dl"


def test_trigger_download_encodes_utf8():
    with patch("frontend.csv_files.st.download_button") as button:
        trigger_download('"Café"', "employees-export")
    assert button.call_args.kwargs["data"] == '"Café"'.encode("utf-8")


def test_record_count_read_from_response_headers():
    assert record_count(CaseInsensitiveDict({"x-record-count": "3"})) == 3
    assert record_count(CaseInsensitiveDict({"X-Record-Count": "0"})) == 0


@pytest.mark.parametrize("headers", [{}, {"X-Record-Count": ""}, {"X-Record-Count": "many"}])
def test_record_count_missing_or_malformed(headers):
    assert record_count(CaseInsensitiveDict(headers)) is None
