"""
backend/csv_export.py

CSV serialization for asset and employee exports.

Quoting rule (must stay in lockstep with csv_parser.parse_csv_text):
a value is wrapped in double quotes, with internal quotes doubled, when it
contains a comma, a double quote, a newline or any non-ASCII character.
A carriage return is quoted as well: unquoted it would split the row
when read back, so this goes one step past the comma/quote/newline rule.
Everything else is written as-is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

try:
    from backend.models import EntityKind, get_schema, parse_entity_kind
except ModuleNotFoundError:
    from models import EntityKind, get_schema, parse_entity_kind


CSV_MIME = "text/csv;charset=utf-8"

_NON_ASCII = re.compile(r"[^\x00-\x7F]")


def format_csv_value(value: Any) -> str:
    """Render one cell: None -> "", everything else via str(), quoted when needed."""
    if value is None:
        return ""
    text = str(value)
    if (
        "," in text
        or '"' in text
        or "\n" in text
        or "\r" in text
        or _NON_ASCII.search(text)
    ):
        return '"' + text.replace('"', '""') + '"'
    return text


def serialize_records(records: Sequence[Mapping[str, Any]]) -> str:
    """
    Serialize records to CSV text.

    The header is taken from the first record's keys. Later records missing
    one of those keys get an empty cell; keys the first record lacks are
    dropped. Empty input yields "".
    """
    if not records:
        return ""

    headers = list(records[0].keys())
    lines = [",".join(headers)]
    for record in records:
        lines.append(",".join(format_csv_value(record.get(h)) for h in headers))
    return "\n".join(lines)


def prepare_export(entity_kind, records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Project backend rows onto the export column order for an entity kind.

    Asset exports use the import template order so an exported file can be
    re-imported unchanged. Employee exports carry name, email and role, with
    missing email/role written as empty strings.
    """
    kind = parse_entity_kind(entity_kind)
    schema = get_schema(kind)

    prepared: List[Dict[str, Any]] = []
    for record in records:
        row = {name: record.get(name) for name in schema.fields}
        if kind is EntityKind.employee:
            row["email"] = row["email"] or ""
            row["role"] = row["role"] or ""
        prepared.append(row)
    return prepared


def export_filename(base: str, today: Optional[date] = None) -> str:
    """<base>-<YYYY-MM-DD>.csv"""
    today = today or date.today()
    return f"{base}-{today.isoformat()}.csv"


@dataclass(frozen=True)
class CsvDownload:
    """A ready-to-save CSV file: what a download button or HTTP response needs."""
    filename: str
    data: bytes
    mime: str = CSV_MIME

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def build_download(csv_text: str, base: str, today: Optional[date] = None) -> CsvDownload:
    """Wrap CSV text as a dated UTF-8 file payload."""
    return CsvDownload(
        filename=export_filename(base, today),
        data=csv_text.encode("utf-8"),
    )
