"""
backend/csv_validation.py

Validates a parsed CSV (headers + rows) before bulk import.

Validation is exhaustive, not fail-fast: a missing required header does not
stop row checks, and every row is checked even after earlier rows fail, so
the user gets one consolidated report. Row numbers are 1-based data-row
positions (the header line is not counted).

Pure Python logic - no FastAPI imports, no network access.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

try:
    from backend.config import IS_DEV
    from backend.models import EntitySchema, ASSET_SCHEMA, EMPLOYEE_SCHEMA, get_schema
    from backend.schemas_csv import ValidationResult
except ModuleNotFoundError:
    from config import IS_DEV
    from models import EntitySchema, ASSET_SCHEMA, EMPLOYEE_SCHEMA, get_schema
    from schemas_csv import ValidationResult


# ASCII digits only; str.isdigit() and \d would also accept other scripts' digits
INTEGER_PATTERN = re.compile(r"[0-9]+")
DECIMAL_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?")

FIELD_LABELS = {
    "qty": "Quantity",
    "purchase_cost": "Purchase cost",
}


def normalize_headers(headers: Sequence[str]) -> List[str]:
    return [(h or "").strip().lower() for h in headers]


def _cell(row: Sequence[str], index: int) -> Optional[str]:
    if index < 0 or index >= len(row):
        return None
    return row[index]


def _label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, field_name.replace("_", " "))


def validate_rows(schema: EntitySchema, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> ValidationResult:
    """
    Validate rows against an entity schema.

    Checks, in order:
    1. required headers present (one error naming every missing field)
    2. per row: column count, required values, enum membership, numeric format
    """
    errors: List[str] = []
    normalized = normalize_headers(headers)

    missing = [name for name in schema.required if name not in normalized]
    if missing:
        errors.append(f"Missing required fields: {', '.join(missing)}")

    def index_of(name: str) -> int:
        return normalized.index(name) if name in normalized else -1

    required_idx = [(name, index_of(name)) for name in schema.required if name not in schema.skip_blank]
    enum_idx = [(name, index_of(name), allowed) for name, allowed in schema.enum_fields.items()]
    integer_idx = [(name, index_of(name)) for name in schema.fields if name in schema.integer_fields]
    decimal_idx = [(name, index_of(name)) for name in schema.fields if name in schema.decimal_fields]

    for position, row in enumerate(rows):
        row_number = position + 1

        if len(row) != len(headers):
            errors.append(
                f"Row {row_number}: Column count mismatch (expected {len(headers)}, got {len(row)})"
            )

        for name, idx in required_idx:
            if idx == -1:
                continue
            value = _cell(row, idx)
            if value is None or not value.strip():
                errors.append(f'Row {row_number}: Missing required value for "{name}"')

        for name, idx, allowed in enum_idx:
            value = _cell(row, idx)
            # compared untrimmed: " ready " is not a valid status
            if value is None or value == "":
                continue
            if value.lower() not in allowed:
                errors.append(
                    f'Row {row_number}: Invalid {_label(name)} "{value}". Valid options: {", ".join(allowed)}'
                )

        for name, idx in integer_idx:
            value = _cell(row, idx)
            if value and not INTEGER_PATTERN.fullmatch(value):
                errors.append(f"Row {row_number}: {_label(name)} must be a number")

        for name, idx in decimal_idx:
            value = _cell(row, idx)
            if value and not DECIMAL_PATTERN.fullmatch(value):
                errors.append(f"Row {row_number}: {_label(name)} must be a number")

    result = ValidationResult.from_errors(errors)
    if IS_DEV:
        print(f"[CSV] Validated {schema.kind.value} csv: rows={len(rows)}, errors={len(errors)}")
    return result


def validate_asset_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> ValidationResult:
    return validate_rows(ASSET_SCHEMA, headers, rows)


def validate_employee_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> ValidationResult:
    """Reduced asset rules: only the name column is required, no status or numeric checks."""
    return validate_rows(EMPLOYEE_SCHEMA, headers, rows)


def validate_csv(entity_kind, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> ValidationResult:
    """
    Dispatch on entity kind.

    Raises:
        UnknownEntityKindError: for an unknown entity kind (never for row content)
    """
    return validate_rows(get_schema(entity_kind), headers, rows)
