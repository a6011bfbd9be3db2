"""
Error conversion utilities for MKBD calculator API.

Engine warnings reach callers as APIError values. The code is kept while
the message is replaced by reviewer-facing text with form and row context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from mkbd_calc.api.models import APIError

if TYPE_CHECKING:
    from mkbd_calc.contracts.errors import CalculationError


# =============================================================================
# Display text
# =============================================================================


ERROR_MESSAGE_OVERRIDES: dict[str, str] = {
    "TBL001": "Form sheet not found in the upload",
    "ROW001": "Expected row not found in form",
    "COL001": "Expected column not found in form",
    "RNK001": "Total equity is not positive; ranking liabilities not calculated",
    "COR001": "Row to correct not found; value not overwritten",
    "CFG001": "Formula override does not match any formula",
}


CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "missing_table": "Missing Form",
    "missing_row": "Missing Row",
    "missing_column": "Missing Column",
    "business_rule": "Business Rule",
    "correction": "Correction",
    "configuration": "Configuration",
    "calculation": "Calculation",
}


# =============================================================================
# Conversion Functions
# =============================================================================


def convert_to_api_error(error: CalculationError) -> APIError:
    """
    Map one engine warning to its display form.

    The engine message survives in details["detail"].
    """
    message = _get_user_friendly_message(error)
    severity = error.severity.value
    category = error.category.value

    return APIError(
        code=error.code,
        message=message,
        severity=severity,
        category=CATEGORY_DISPLAY_NAMES.get(category, category),
        details=_build_error_details(error),
    )


def convert_errors(errors: Iterable[CalculationError]) -> list[APIError]:
    """Map engine warnings in order."""
    return [convert_to_api_error(error) for error in errors]


def create_api_error(
    code: str,
    message: str,
    severity: str = "error",
    category: str = "Calculation",
    **details: str | None,
) -> APIError:
    """
    Build an APIError that did not come from the engine.

    Keyword details whose value is None are dropped.
    """
    kept = {key: value for key, value in details.items() if value is not None}
    return APIError(
        code=code,
        message=message,
        severity=severity,
        category=category,
        details=kept,
    )


def create_calculation_failure(message: str) -> APIError:
    """
    Create an error for an unexpected failure inside the calculation.

    Args:
        message: Exception text

    Returns:
        Critical APIError
    """
    return APIError(
        code="CALC001",
        message=f"Calculation failed: {message}",
        severity="critical",
        category="Calculation",
    )


# =============================================================================
# Helper Functions
# =============================================================================


def _get_user_friendly_message(error: CalculationError) -> str:
    """Override text for known codes, engine text otherwise, plus context."""
    text = ERROR_MESSAGE_OVERRIDES.get(error.code, error.message)

    context_parts = []
    if error.form:
        context_parts.append(f"Form: {error.form}")
    if error.row_position is not None:
        context_parts.append(f"Baris: {error.row_position}")
    if error.field_name:
        context_parts.append(f"Field: {error.field_name}")

    if context_parts:
        return f"{text} ({', '.join(context_parts)})"
    return text


def _build_error_details(error: CalculationError) -> dict:
    """Engine message plus whichever location fields are set."""
    details: dict = {"detail": error.message}

    if error.form:
        details["form"] = error.form
    if error.row_position is not None:
        details["row_position"] = error.row_position
    if error.field_name:
        details["field_name"] = error.field_name

    return details
