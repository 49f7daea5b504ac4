"""
backend/routes_csv.py

CSV template, validation, import and export endpoints.

Security guarantees:
- All endpoints require authentication (require_auth_context via require_capability)
- Import requires capability "csv:import" (admin access)
- Templates, validation and export require read capabilities
- Data API calls are made with the caller's own token (row-level security)
- Error responses never echo tokens; validation errors echo only cell values
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import Response

try:
    from backend.auth_context import AuthContext
    from backend.config import IS_DEV, MAX_UPLOAD_BYTES, PREVIEW_ROWS
    from backend.csv_export import build_download, prepare_export, serialize_records
    from backend.csv_import import CsvValidationError, ImportFailedError, run_import
    from backend.csv_parser import CsvFormatError, ParsedCsv, parse_csv_text
    from backend.csv_templates import generate_template, template_filename
    from backend.csv_validation import validate_csv
    from backend.dependencies import get_record_store, require_capability
    from backend.models import EntityKind, UnknownEntityKindError, parse_entity_kind
    from backend.rbac import Capability
    from backend.record_store import RecordStore, RecordStoreError
    from backend.schemas_csv import CsvTextRequest, ImportSummary, ValidationPreview
except ModuleNotFoundError:
    from auth_context import AuthContext
    from config import IS_DEV, MAX_UPLOAD_BYTES, PREVIEW_ROWS
    from csv_export import build_download, prepare_export, serialize_records
    from csv_import import CsvValidationError, ImportFailedError, run_import
    from csv_parser import CsvFormatError, ParsedCsv, parse_csv_text
    from csv_templates import generate_template, template_filename
    from csv_validation import validate_csv
    from dependencies import get_record_store, require_capability
    from models import EntityKind, UnknownEntityKindError, parse_entity_kind
    from rbac import Capability
    from record_store import RecordStore, RecordStoreError
    from schemas_csv import CsvTextRequest, ImportSummary, ValidationPreview


router = APIRouter(
    prefix="/api/csv",
    tags=["csv"],
)

RECORD_COUNT_HEADER = "X-Record-Count"
EMPTY_FILE_DETAIL = "The file appears to be empty or improperly formatted."

EXPORT_BASENAMES = {
    EntityKind.asset: "assets-export",
    EntityKind.employee: "employees-export",
}


def _kind_or_404(entity_kind: str) -> EntityKind:
    try:
        return parse_entity_kind(entity_kind)
    except UnknownEntityKindError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _check_size(csv_text: str) -> None:
    if len(csv_text.encode("utf-8")) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"CSV file too large (max {MAX_UPLOAD_BYTES} bytes)",
        )


def _parse_or_400(csv_text: str) -> ParsedCsv:
    try:
        return parse_csv_text(csv_text)
    except CsvFormatError as e:
        if IS_DEV:
            print(f"[CSV] Unreadable upload: {e}")
        raise HTTPException(status_code=400, detail=EMPTY_FILE_DETAIL)


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/templates/{entity_kind}")
def download_template(
    entity_kind: str = Path(..., description="asset or employee"),
    ctx: AuthContext = Depends(require_capability(Capability.CSV_TEMPLATE.value)),
) -> Response:
    """
    Download the bulk-import template (header row + one example row).

    Raises:
        HTTPException(404): Unknown entity kind
    """
    kind = _kind_or_404(entity_kind)
    return _csv_response(generate_template(kind), template_filename(kind))


@router.post("/validate/{entity_kind}", response_model=ValidationPreview)
def validate_upload(
    request: CsvTextRequest,
    entity_kind: str = Path(..., description="asset or employee"),
    ctx: AuthContext = Depends(require_capability(Capability.CSV_VALIDATE.value)),
) -> ValidationPreview:
    """
    Validate uploaded CSV text without importing it.

    Always returns 200 with the full error list for well-formed requests;
    the caller blocks submission when result.valid is false.

    Raises:
        HTTPException(400): Text could not be read as CSV
        HTTPException(404): Unknown entity kind
        HTTPException(413): Upload larger than MAX_UPLOAD_BYTES
    """
    kind = _kind_or_404(entity_kind)
    _check_size(request.csv_text)

    parsed = _parse_or_400(request.csv_text)
    result = validate_csv(kind, parsed.headers, parsed.rows)

    return ValidationPreview(
        entity_kind=kind.value,
        result=result,
        headers=parsed.headers,
        preview_rows=parsed.rows[:PREVIEW_ROWS],
        row_count=parsed.row_count,
    )


@router.post("/import/{entity_kind}", response_model=ImportSummary)
def import_upload(
    request: CsvTextRequest,
    entity_kind: str = Path(..., description="asset or employee"),
    ctx: AuthContext = Depends(require_capability(Capability.CSV_IMPORT.value)),
    store: RecordStore = Depends(get_record_store),
) -> ImportSummary:
    """
    Validate and import uploaded CSV text.

    Raises:
        HTTPException(400): File has no header or no data rows, or is not readable CSV
        HTTPException(403): Caller lacks admin access
        HTTPException(404): Unknown entity kind
        HTTPException(413): Upload larger than MAX_UPLOAD_BYTES
        HTTPException(422): Validation failed (detail.errors lists every problem)
        HTTPException(502): Data API rejected the rows
    """
    kind = _kind_or_404(entity_kind)
    _check_size(request.csv_text)

    parsed = _parse_or_400(request.csv_text)
    if parsed.is_empty():
        raise HTTPException(
            status_code=400,
            detail=EMPTY_FILE_DETAIL,
        )

    try:
        summary = run_import(kind, parsed, store, user_id=ctx.user_id)
    except CsvValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "CSV validation failed", "errors": e.result.errors},
        )
    except ImportFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if IS_DEV:
        print(f"[CSV] Import complete: kind={kind.value}, user_id={ctx.user_id}, "
              f"imported={summary.imported}, skipped={summary.skipped}")
    return summary


@router.get("/export/{entity_kind}")
def export_records(
    entity_kind: str = Path(..., description="asset or employee"),
    ctx: AuthContext = Depends(require_capability(Capability.CSV_EXPORT.value)),
    store: RecordStore = Depends(get_record_store),
) -> Response:
    """
    Export every record of an entity kind visible to the caller as CSV.

    Returns an empty file body when there are no records. The record count is
    sent in X-Record-Count since quoted values may span lines.

    Raises:
        HTTPException(404): Unknown entity kind
        HTTPException(502): Data API unavailable
    """
    kind = _kind_or_404(entity_kind)

    try:
        records = store.fetch_records(kind)
    except RecordStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))

    csv_text = serialize_records(prepare_export(kind, records))
    download = build_download(csv_text, EXPORT_BASENAMES[kind])

    if IS_DEV:
        print(f"[CSV] Export: kind={kind.value}, rows={len(records)}, file={download.filename}")
    return Response(
        content=download.data,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": download.content_disposition,
            RECORD_COUNT_HEADER: str(len(records)),
        },
    )
