"""
backend/test_csv_validation.py

Tests for bulk-import validation.

Covers:
1. Missing required headers (reported once, rows still checked)
2. Per-row accumulation (no short-circuit)
3. Enum case-insensitivity for status / status_color
4. Numeric strictness for qty / purchase_cost
5. Employee reduced rules

Run:
    pytest backend/test_csv_validation.py -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.csv_validation import (
    normalize_headers,
    validate_asset_csv,
    validate_csv,
    validate_employee_csv,
)
from backend.models import UnknownEntityKindError

HEADERS = ["name", "tag", "category", "status"]


def asset_row(name="Laptop", tag="IT-001", category="Computers", status="ready"):
    return [name, tag, category, status]


class TestHeaders:
    def test_normalize_headers(self):
        assert normalize_headers([" Name ", "TAG", "Status_Color"]) == ["name", "tag", "status_color"]

    def test_missing_tag_header_single_error(self):
        headers = ["name", "category", "status"]
        result = validate_asset_csv(headers, [["Laptop", "Computers", "ready"]])
        assert result.valid is False
        assert result.errors == ["Missing required fields: tag"]

    def test_all_missing_fields_named_in_one_error(self):
        result = validate_asset_csv(["name", "notes"], [["Laptop", ""]])
        assert result.errors[0] == "Missing required fields: tag, category, status"
        assert len([e for e in result.errors if e.startswith("Missing required fields")]) == 1

    def test_header_error_does_not_stop_row_checks(self):
        headers = ["name", "category", "status"]
        result = validate_asset_csv(headers, [["", "Computers", "ready"]])
        assert result.errors == [
            "Missing required fields: tag",
            'Row 1: Missing required value for "name"',
        ]

    def test_headers_matched_case_and_whitespace_insensitively(self):
        headers = [" NAME", "Tag ", "Category", "STATUS"]
        assert validate_asset_csv(headers, [asset_row()]).valid


class TestRows:
    def test_valid_rows(self):
        result = validate_asset_csv(HEADERS, [asset_row(), asset_row(tag="IT-002")])
        assert result.valid
        assert result.errors == []

    def test_no_rows_is_valid_when_headers_present(self):
        assert validate_asset_csv(HEADERS, []).valid

    def test_errors_accumulate_across_rows(self):
        rows = [asset_row(name=""), asset_row(tag="  ")]
        result = validate_asset_csv(HEADERS, rows)
        assert result.errors == [
            'Row 1: Missing required value for "name"',
            'Row 2: Missing required value for "tag"',
        ]

    def test_multiple_errors_same_row(self):
        result = validate_asset_csv(HEADERS, [["", "", "Computers", "ready"]])
        assert result.errors == [
            'Row 1: Missing required value for "name"',
            'Row 1: Missing required value for "tag"',
        ]

    def test_column_count_mismatch_flagged_not_dropped(self):
        rows = [asset_row() + ["extra"], ["Laptop", "IT-9"]]
        result = validate_asset_csv(HEADERS, rows)
        assert "Row 1: Column count mismatch (expected 4, got 5)" in result.errors
        assert "Row 2: Column count mismatch (expected 4, got 2)" in result.errors
        # short row: missing cells are also missing required values
        assert 'Row 2: Missing required value for "category"' in result.errors
        assert 'Row 2: Missing required value for "status"' in result.errors

    def test_row_numbers_exclude_header(self):
        result = validate_asset_csv(HEADERS, [asset_row(), asset_row(), asset_row(category="")])
        assert result.errors == ['Row 3: Missing required value for "category"']


class TestEnums:
    def test_uppercase_status_accepted(self):
        assert validate_asset_csv(HEADERS, [asset_row(status="READY")]).valid

    def test_mixed_case_status_accepted(self):
        assert validate_asset_csv(HEADERS, [asset_row(status="Maintenance")]).valid

    def test_invalid_status_lists_options(self):
        result = validate_asset_csv(HEADERS, [asset_row(status="broken-beyond-repair")])
        assert result.errors == [
            'Row 1: Invalid status "broken-beyond-repair". '
            "Valid options: ready, deployed, maintenance, retired"
        ]

    def test_empty_status_reported_only_as_missing(self):
        result = validate_asset_csv(HEADERS, [asset_row(status="")])
        assert result.errors == ['Row 1: Missing required value for "status"']

    def test_status_color(self):
        headers = HEADERS + ["status_color"]
        assert validate_asset_csv(headers, [asset_row() + ["YELLOW"]]).valid
        assert validate_asset_csv(headers, [asset_row() + [""]]).valid
        result = validate_asset_csv(headers, [asset_row() + ["purple"]])
        assert result.errors == [
            'Row 1: Invalid status color "purple". Valid options: green, yellow, red'
        ]

    @pytest.mark.parametrize("status", [" ready", "ready ", " READY "])
    def test_padded_status_rejected(self, status):
        result = validate_asset_csv(HEADERS, [asset_row(status=status)])
        assert result.errors == [
            f'Row 1: Invalid status "{status}". Valid options: ready, deployed, maintenance, retired'
        ]

    def test_whitespace_only_status_is_missing_and_invalid(self):
        result = validate_asset_csv(HEADERS, [asset_row(status="  ")])
        assert result.errors == [
            'Row 1: Missing required value for "status"',
            'Row 1: Invalid status "  ". Valid options: ready, deployed, maintenance, retired',
        ]

    @pytest.mark.parametrize("color", [" green", "red ", " "])
    def test_padded_status_color_rejected(self, color):
        result = validate_asset_csv(HEADERS + ["status_color"], [asset_row() + [color]])
        assert result.errors == [
            f'Row 1: Invalid status color "{color}". Valid options: green, yellow, red'
        ]


class TestNumeric:
    HEADERS = HEADERS + ["qty", "purchase_cost"]

    def _errors(self, qty, cost):
        return validate_asset_csv(self.HEADERS, [asset_row() + [qty, cost]]).errors

    def test_valid_numbers(self):
        assert self._errors("3", "12.50") == []
        assert self._errors("0", "100") == []

    def test_empty_numbers_allowed(self):
        assert self._errors("", "") == []

    def test_decimal_qty_rejected(self):
        assert self._errors("3.5", "") == ["Row 1: Quantity must be a number"]

    @pytest.mark.parametrize("qty", ["-1", "+2", "1e3", " 4", "٣"])
    def test_qty_strict(self, qty):
        assert self._errors(qty, "") == ["Row 1: Quantity must be a number"]

    @pytest.mark.parametrize("cost", ["abc", "12.", ".5", "-3", "1,000", "$10"])
    def test_purchase_cost_strict(self, cost):
        assert self._errors("", cost) == ["Row 1: Purchase cost must be a number"]


class TestEmployees:
    def test_valid_employee_rows(self):
        result = validate_employee_csv(
            ["name", "email", "role"],
            [["Jane Doe", "jane@example.com", "Engineer"]],
        )
        assert result.valid

    def test_email_column_optional(self):
        assert validate_employee_csv(["name", "role"], [["Jane", "Engineer"]]).valid

    def test_blank_email_accepted(self):
        result = validate_employee_csv(["name", "email", "role"], [["Jane Doe", "", "Engineer"]])
        assert result.valid
        assert result.errors == []

    def test_missing_name_header(self):
        result = validate_employee_csv(["email", "role"], [["jane@example.com", "Engineer"]])
        assert result.errors == ["Missing required fields: name"]

    def test_blank_name_row_left_for_import_to_skip(self):
        result = validate_employee_csv(["name", "email"], [["  ", "x@example.com"], ["Jane", ""]])
        assert result.valid

    def test_no_status_or_numeric_checks(self):
        headers = ["name", "email", "status", "qty"]
        result = validate_employee_csv(headers, [["Jane", "jane@example.com", "whatever", "x"]])
        assert result.valid


class TestDispatch:
    def test_validate_csv_dispatches_by_kind(self):
        assert validate_csv("employee", ["name", "email"], [["A", "a@example.com"]]).valid
        assert not validate_csv("asset", ["name", "email"], [["A", "a@example.com"]]).valid

    def test_unknown_kind(self):
        with pytest.raises(UnknownEntityKindError):
            validate_csv("category", ["name"], [])
