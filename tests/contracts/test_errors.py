"""Tests for error handling contracts.

Tests the CalculationError dataclass and the warning factories used by
the calculation passes.
"""

from __future__ import annotations

import pytest

from mkbd_calc.contracts.errors import (
    ERROR_COLUMN_NOT_FOUND,
    ERROR_CORRECTION_SKIPPED,
    ERROR_NON_POSITIVE_EQUITY,
    ERROR_ROW_NOT_FOUND,
    ERROR_TABLE_NOT_FOUND,
    ERROR_UNKNOWN_FORMULA,
    CalculationError,
    column_not_found_warning,
    correction_skipped_warning,
    non_positive_equity_warning,
    row_not_found_warning,
    table_not_found_warning,
    unknown_formula_warning,
)
from mkbd_calc.domain.enums import ErrorCategory, ErrorSeverity


class TestCalculationError:
    """Tests for CalculationError dataclass."""

    def test_create_basic_error(self):
        """Should create error with required fields."""
        error = CalculationError(
            code="TEST001",
            message="Test error message",
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.CALCULATION,
        )

        assert error.code == "TEST001"
        assert error.form is None
        assert error.row_position is None

    def test_str_with_context(self):
        """String form should include form and row when present."""
        error = CalculationError(
            code="COR001",
            message="Target not found",
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.CORRECTION,
            form="VD59",
            row_position=104,
        )
        assert str(error) == "[COR001] WARNING: Target not found | Form: VD59 | Row: 104"

    def test_to_dict(self):
        """Should serialize enums as their values."""
        data = row_not_found_warning("VD52", "TOTAL_EKUITAS").to_dict()

        assert data["code"] == ERROR_ROW_NOT_FOUND
        assert data["severity"] == "warning"
        assert data["category"] == "missing_row"
        assert data["field_name"] == "TOTAL_EKUITAS"

    def test_immutable(self):
        """Errors are frozen."""
        error = table_not_found_warning("VD59", "x")
        with pytest.raises(AttributeError):
            error.code = "OTHER"  # type: ignore[misc]


class TestFactories:
    """Tests for the warning factory functions."""

    def test_table_not_found(self):
        error = table_not_found_warning("VD510", "ranking liabilities set to 0")

        assert error.code == ERROR_TABLE_NOT_FOUND
        assert error.category == ErrorCategory.MISSING_TABLE
        assert error.message == "Form VD510 not found; ranking liabilities set to 0"

    def test_row_not_found(self):
        error = row_not_found_warning("VD59", "MKBD_DIWAJIBKAN", 103, "using the statutory minimum")

        assert error.code == ERROR_ROW_NOT_FOUND
        assert error.row_position == 103
        assert error.message.endswith("using the statutory minimum")

    def test_column_not_found(self):
        error = column_not_found_warning("VD59", "TOTAL", "overwrites skipped")
        assert error.code == ERROR_COLUMN_NOT_FOUND
        assert error.category == ErrorCategory.MISSING_COLUMN

    def test_non_positive_equity(self):
        error = non_positive_equity_warning(-1_000_000.0)

        assert error.code == ERROR_NON_POSITIVE_EQUITY
        assert error.category == ErrorCategory.BUSINESS_RULE
        assert "-1,000,000" in error.message
        assert error.form == "VD510"

    def test_correction_skipped(self):
        error = correction_skipped_warning("VD59", "adjusted_mkbd", 102)
        assert error.code == ERROR_CORRECTION_SKIPPED
        assert error.row_position == 102

    def test_unknown_formula(self):
        error = unknown_formula_warning("foo")
        assert error.code == ERROR_UNKNOWN_FORMULA
        assert error.category == ErrorCategory.CONFIGURATION
        assert "foo" in error.message

    def test_all_factories_are_warnings(self):
        """Degraded input never produces an error-severity entry."""
        errors = [
            table_not_found_warning("VD51", "x"),
            row_not_found_warning("VD51", "x"),
            column_not_found_warning("VD51", "x", "y"),
            non_positive_equity_warning(0.0),
            correction_skipped_warning("VD59", "x"),
            unknown_formula_warning("x"),
        ]
        assert all(e.severity == ErrorSeverity.WARNING for e in errors)
