"""
backend/csv_import.py

Turns validated CSV rows into typed records and submits them to the data API.

Flow: parse -> validate (csv_validation) -> map rows -> RecordStore.
Nothing is submitted unless validation passes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

try:
    from backend.config import IS_DEV
    from backend.csv_parser import ParsedCsv, rows_to_records
    from backend.csv_validation import validate_csv
    from backend.models import EntityKind, VALID_ASSET_STATUSES, AssetStatus, parse_entity_kind
    from backend.record_store import RecordStore, RecordStoreError
    from backend.schemas_csv import AssetImportRow, EmployeeImportRow, ImportSummary, ValidationResult
except ModuleNotFoundError:
    from config import IS_DEV
    from csv_parser import ParsedCsv, rows_to_records
    from csv_validation import validate_csv
    from models import EntityKind, VALID_ASSET_STATUSES, AssetStatus, parse_entity_kind
    from record_store import RecordStore, RecordStoreError
    from schemas_csv import AssetImportRow, EmployeeImportRow, ImportSummary, ValidationResult


class CsvValidationError(Exception):
    """Raised when an import is attempted on CSV data that failed validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(f"CSV validation failed with {len(result.errors)} error(s)")


class ImportFailedError(Exception):
    """Raised when the data API rejected some or all rows of a valid import."""

    def __init__(self, message: str, failed: Optional[List[str]] = None):
        super().__init__(message)
        self.failed = failed or []


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def map_asset_row(record: Dict[str, str], user_id: str, now: str, row_number: int = 1) -> AssetImportRow:
    """
    Map one header-keyed asset record to a typed row.

    Defaults: name "Unnamed Asset", tag "ASSET-<row>", category "General",
    status "ready" when blank or unknown, qty 1.
    """
    status = (record.get("status") or "").strip().lower() or AssetStatus.ready.value
    if status not in VALID_ASSET_STATUSES:
        status = AssetStatus.ready.value

    cost = _optional(record.get("purchase_cost"))
    qty = _optional(record.get("qty"))

    return AssetImportRow(
        name=_optional(record.get("name")) or "Unnamed Asset",
        tag=_optional(record.get("tag")) or f"ASSET-{row_number:03d}",
        category=_optional(record.get("category")) or "General",
        status=status,
        status_color=_optional(record.get("status_color")),
        assigned_to=_optional(record.get("assigned_to")),
        model=_optional(record.get("model")),
        serial=_optional(record.get("serial")),
        purchase_date=_optional(record.get("purchase_date")),
        purchase_cost=float(cost) if cost else None,
        location=_optional(record.get("location")),
        notes=_optional(record.get("notes")),
        wear=_optional(record.get("wear")),
        qty=int(qty) if qty else 1,
        created_at=now,
        updated_at=now,
        user_id=user_id,
    )


def map_employee_row(record: Dict[str, str]) -> Optional[EmployeeImportRow]:
    """Map one employee record; rows without a name are skipped (None). A blank email is kept as ""."""
    name = _optional(record.get("name"))
    if not name:
        return None
    return EmployeeImportRow(
        full_name=name,
        email=(record.get("email") or "").strip(),
        role=_optional(record.get("role")),
        department=_optional(record.get("department")),
        hire_date=_optional(record.get("hire_date")),
    )


def run_import(entity_kind, parsed: ParsedCsv, store: RecordStore, user_id: str) -> ImportSummary:
    """
    Validate and import a parsed CSV.

    Raises:
        UnknownEntityKindError: unknown entity kind
        CsvValidationError: validation failed (nothing submitted)
        ImportFailedError: the data API rejected rows
    """
    kind = parse_entity_kind(entity_kind)
    result = validate_csv(kind, parsed.headers, parsed.rows)
    if not result.valid:
        raise CsvValidationError(result)

    records = rows_to_records(parsed)

    if kind is EntityKind.asset:
        now = utcnow_iso()
        rows = [map_asset_row(r, user_id, now, i + 1) for i, r in enumerate(records)]
        try:
            imported = store.insert_assets(rows)
        except RecordStoreError as e:
            raise ImportFailedError(f"Failed to import assets: {e}")
        if IS_DEV:
            print(f"[CSV] Imported assets: {imported}/{len(rows)}")
        return ImportSummary(entity_kind=kind.value, imported=imported)

    imported = 0
    skipped = 0
    failed: List[str] = []
    for record in records:
        row = map_employee_row(record)
        if row is None:
            skipped += 1
            continue
        try:
            store.upsert_employee(row)
            imported += 1
        except RecordStoreError as e:
            if IS_DEV:
                print(f"[CSV] Employee upsert failed: {type(e).__name__}")
            failed.append(row.full_name)

    if failed:
        raise ImportFailedError(f"Failed to import {len(failed)} employees.", failed)

    if IS_DEV:
        print(f"[CSV] Imported employees: {imported}, skipped: {skipped}")
    return ImportSummary(entity_kind=kind.value, imported=imported, skipped=skipped)
