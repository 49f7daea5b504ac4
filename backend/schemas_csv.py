"""
backend/schemas_csv.py

Pydantic schemas for CSV validation, import and the /api/csv endpoints.
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, validator


# ========================================================================
# VALIDATION SCHEMAS
# ========================================================================

class ValidationResult(BaseModel):
    """Outcome of validating one parsed CSV. Produced fresh per call, never stored."""
    valid: bool = Field(..., description="True when errors is empty")
    errors: List[str] = Field(default_factory=list, description="Human-readable, row-numbered messages in order")

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors))


class CsvTextRequest(BaseModel):
    """Request body carrying raw CSV text (the decoded upload)."""
    csv_text: str = Field(..., description="CSV file contents")


class ValidationPreview(BaseModel):
    """Validation result plus the first rows, for the import preview table."""
    entity_kind: str
    result: ValidationResult
    headers: List[str] = Field(default_factory=list)
    preview_rows: List[List[str]] = Field(default_factory=list, description="First PREVIEW_ROWS data rows")
    row_count: int = Field(0, description="Total data rows (header excluded)")


# ========================================================================
# IMPORT ROW SCHEMAS
# ========================================================================

class AssetImportRow(BaseModel):
    """Typed asset row, ready to submit to the data API."""
    name: str
    tag: str
    category: str
    status: str
    status_color: Optional[str] = None
    assigned_to: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None
    purchase_date: Optional[str] = None
    purchase_cost: Optional[float] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    wear: Optional[str] = None
    qty: int = 1
    created_at: str
    updated_at: str
    user_id: str

    @validator("status_color", pre=True)
    def lower_status_color(cls, v):
        """Store colors lower-case; validation already accepted them case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower() or None
        return v


class EmployeeImportRow(BaseModel):
    """Typed employee row; name is the upsert key."""
    full_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[str] = None

    @validator("full_name", pre=True)
    def trim_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ImportSummary(BaseModel):
    """Result of a successful import."""
    entity_kind: str
    imported: int = Field(0, description="Rows accepted by the data API")
    skipped: int = Field(0, description="Rows skipped before submission (e.g. blank employee name)")
