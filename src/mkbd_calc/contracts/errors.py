"""
Error handling contracts for MKBD calculator.

Provides structured warning representation using the Result pattern:
- CalculationError: Immutable details of a degraded input or skipped step

The engine never raises for missing or malformed form data. Every lookup
that falls back to a default records a CalculationError on the result
instead, so a partially-populated filing still produces a best-effort
figure and the audit trail shows exactly which inputs were missing.
"""

from __future__ import annotations

from dataclasses import dataclass

from mkbd_calc.domain.enums import ErrorCategory, ErrorSeverity


@dataclass(frozen=True)
class CalculationError:
    """
    Immutable representation of a calculation warning or error.

    Attributes:
        code: Unique error code (e.g., "TBL001", "COR001")
              Format: {COMPONENT}{NUMBER} where COMPONENT is 3 chars
        message: Human-readable description of the issue
        severity: Error severity level (WARNING, ERROR, CRITICAL)
        category: Error category for filtering
        form: Optional form name the issue relates to (e.g., "VD59")
        row_position: Optional 1-based row number in the form
        field_name: Optional semantic name of the missing value
    """

    code: str
    message: str
    severity: ErrorSeverity
    category: ErrorCategory
    form: str | None = None
    row_position: int | None = None
    field_name: str | None = None

    def __str__(self) -> str:
        """Human-readable error representation."""
        parts = [f"[{self.code}] {self.severity.value.upper()}: {self.message}"]

        if self.form:
            parts.append(f"Form: {self.form}")
        if self.row_position is not None:
            parts.append(f"Row: {self.row_position}")

        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "form": self.form,
            "row_position": self.row_position,
            "field_name": self.field_name,
        }


# =============================================================================
# ERROR CODE CONSTANTS
# =============================================================================

ERROR_TABLE_NOT_FOUND = "TBL001"
ERROR_ROW_NOT_FOUND = "ROW001"
ERROR_COLUMN_NOT_FOUND = "COL001"
ERROR_NON_POSITIVE_EQUITY = "RNK001"
ERROR_CORRECTION_SKIPPED = "COR001"
ERROR_UNKNOWN_FORMULA = "CFG001"


# =============================================================================
# ERROR FACTORY FUNCTIONS
# =============================================================================


def table_not_found_warning(form: str, consequence: str) -> CalculationError:
    """Create a warning for a form that is absent from the uploaded tables."""
    return CalculationError(
        code=ERROR_TABLE_NOT_FOUND,
        message=f"Form {form} not found; {consequence}",
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.MISSING_TABLE,
        form=form,
    )


def row_not_found_warning(
    form: str,
    field_name: str,
    preferred_position: int | None = None,
    consequence: str = "defaulting to 0",
) -> CalculationError:
    """Create a warning for a labelled row that could not be located."""
    return CalculationError(
        code=ERROR_ROW_NOT_FOUND,
        message=f"Row for '{field_name}' not found in {form}; {consequence}",
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.MISSING_ROW,
        form=form,
        row_position=preferred_position,
        field_name=field_name,
    )


def column_not_found_warning(form: str, field_name: str, consequence: str) -> CalculationError:
    """Create a warning for a semantic column absent from a form."""
    return CalculationError(
        code=ERROR_COLUMN_NOT_FOUND,
        message=f"Column for '{field_name}' not found in {form}; {consequence}",
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.MISSING_COLUMN,
        form=form,
        field_name=field_name,
    )


def non_positive_equity_warning(total_equity: float) -> CalculationError:
    """Create a warning for a skipped ranking-liabilities pass."""
    return CalculationError(
        code=ERROR_NON_POSITIVE_EQUITY,
        message=(
            f"Total equity is {total_equity:,.0f}; the 20% concentration threshold "
            "is undefined, ranking liabilities set to 0"
        ),
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.BUSINESS_RULE,
        form="VD510",
        field_name="TOTAL_EKUITAS",
    )


def correction_skipped_warning(
    form: str,
    field_name: str,
    preferred_position: int | None = None,
) -> CalculationError:
    """Create a warning for an overwrite target that could not be located."""
    return CalculationError(
        code=ERROR_CORRECTION_SKIPPED,
        message=f"Correction target '{field_name}' not found in {form}; overwrite skipped",
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.CORRECTION,
        form=form,
        row_position=preferred_position,
        field_name=field_name,
    )


def unknown_formula_warning(formula_id: str) -> CalculationError:
    """Create a warning for a formula override that matches no formula."""
    return CalculationError(
        code=ERROR_UNKNOWN_FORMULA,
        message=f"Override for unknown formula '{formula_id}' ignored",
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.CONFIGURATION,
        field_name=formula_id,
    )
