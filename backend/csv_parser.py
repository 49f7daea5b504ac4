"""
backend/csv_parser.py

Splits uploaded CSV text into a header row and data rows.

Grammar is RFC 4180 as implemented by the stdlib csv reader: fields may be
wrapped in double quotes, a doubled quote inside a quoted field is a literal
quote, and quoted fields may span lines. This is exactly the inverse of
csv_export.format_csv_value.

Rows are returned unpadded so the validator can flag column-count mismatches.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List

try:
    from backend.config import MAX_UPLOAD_BYTES
except ModuleNotFoundError:
    from config import MAX_UPLOAD_BYTES

BOM = "\ufeff"

# csv.reader caps fields at 128k characters by default; allow one as large as an upload
if csv.field_size_limit() < MAX_UPLOAD_BYTES:
    csv.field_size_limit(MAX_UPLOAD_BYTES)


class CsvFormatError(ValueError):
    """Raised when uploaded text cannot be read as CSV at all."""


@dataclass
class ParsedCsv:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.headers or not self.rows


def _is_blank(row: List[str]) -> bool:
    return not row or (len(row) == 1 and not row[0].strip())


def parse_csv_text(text: str) -> ParsedCsv:
    """
    Parse CSV text into headers and rows.

    - empty or whitespace-only text -> ParsedCsv([], [])
    - a leading BOM is dropped
    - blank lines are skipped
    - CRLF and LF line endings are both accepted

    Raises:
        CsvFormatError: the reader rejected the text (e.g. a field over the size limit)
    """
    if not text or not text.strip():
        return ParsedCsv()

    if text.startswith(BOM):
        text = text[len(BOM):]

    reader = csv.reader(io.StringIO(text, newline=""), strict=False)
    try:
        lines = [row for row in reader if not _is_blank(row)]
    except csv.Error as e:
        raise CsvFormatError(f"Line {reader.line_num}: {e}") from e
    if not lines:
        return ParsedCsv()

    return ParsedCsv(headers=lines[0], rows=lines[1:])


def rows_to_records(parsed: ParsedCsv) -> List[Dict[str, str]]:
    """Key each row by its (trimmed, lower-cased) header; missing cells become ""."""
    keys = [h.strip().lower() for h in parsed.headers]
    records = []
    for row in parsed.rows:
        records.append({key: (row[i] if i < len(row) else "") for i, key in enumerate(keys)})
    return records
