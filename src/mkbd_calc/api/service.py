"""
MKBD Calculator API Service.

MKBDService provides a clean facade for MKBD calculations:
- calculate: Run the calculation (and optionally the corrections) on tables
- get_default_formulas: List the formula table for editor display
- get_default_config: Get the default regulatory constants

This is the main entry point for UI and export integration.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Mapping, Sequence

from mkbd_calc.api.errors import create_calculation_failure
from mkbd_calc.api.formatters import ResultFormatter
from mkbd_calc.contracts.config import MKBDConfig
from mkbd_calc.engine.pipeline import create_pipeline

if TYPE_CHECKING:
    from mkbd_calc.api.models import CalculationResponse
    from mkbd_calc.contracts.bundles import SheetTable
    from mkbd_calc.contracts.config import FormulaOverride

logger = logging.getLogger(__name__)


# =============================================================================
# MKBD Service
# =============================================================================


class MKBDService:
    """
    High-level service for MKBD calculations.

    Wraps MKBDPipeline with an API surface suitable for UI integration.
    Unexpected failures are returned as an error response, never raised.

    Usage:
        from mkbd_calc.api import MKBDService

        service = MKBDService()
        response = service.calculate(tables)

        if response.success:
            print(f"MKBD Disesuaikan: {response.summary.adjusted_mkbd:,.0f}")
            corrected = response.corrected_tables
    """

    def __init__(self, config: MKBDConfig | None = None) -> None:
        """Initialize MKBDService with a base configuration."""
        self._config = config or MKBDConfig.default()
        self._formatter = ResultFormatter()
        self._pipeline = create_pipeline()

    def calculate(
        self,
        tables: Sequence[SheetTable],
        apply_corrections: bool = True,
        formula_overrides: Mapping[str, FormulaOverride] | None = None,
    ) -> CalculationResponse:
        """
        Run the MKBD calculation over uploaded form tables.

        Args:
            tables: Extracted VD51 / VD52 / VD59 / VD510 tables
            apply_corrections: Whether to return corrected table copies
            formula_overrides: Per-call formula overrides keyed by formula id

        Returns:
            CalculationResponse with results or errors
        """
        started_at = datetime.now()

        try:
            if apply_corrections:
                bundle = self._pipeline.apply_corrections(tables, self._config, formula_overrides)
                result, corrected = bundle.result, bundle.tables
            else:
                result = self._pipeline.calculate(tables, self._config, formula_overrides)
                corrected = ()

            return self._formatter.format_response(
                result=result,
                corrected_tables=corrected,
                tables=tables,
                started_at=started_at,
            )

        except Exception as e:
            logger.exception("MKBD calculation failed")
            return self._formatter.format_error_response(
                errors=[create_calculation_failure(str(e))],
                tables=tables,
                started_at=started_at,
            )

    def get_default_formulas(self) -> list[dict]:
        """
        Get the formula table for display in a formula editor.

        Returns:
            List of formula descriptors (id, name, expression, inputs, editable)
        """
        return [formula.to_dict() for formula in self._config.formulas.values()]

    def get_default_config(self) -> dict:
        """
        Get the regulatory constants of the configuration.

        Returns:
            Dictionary of configuration values
        """
        start, end = self._config.haircut_row_range
        return {
            "concentration_limit": str(self._config.concentration_limit),
            "minimum_required_mkbd": str(self._config.minimum_required_mkbd),
            "haircut_row_range": [start, end],
            "placeholder_code_marker": self._config.placeholder_code_marker,
            "formulas": sorted(self._config.formulas),
        }


# =============================================================================
# Convenience Functions
# =============================================================================


def create_service(config: MKBDConfig | None = None) -> MKBDService:
    """
    Factory function to create MKBDService instance.

    Returns:
        Configured MKBDService
    """
    return MKBDService(config)


def quick_calculate(tables: Sequence[SheetTable]) -> CalculationResponse:
    """
    Run a calculation with default configuration and corrections applied.

    Example:
        response = quick_calculate(tables)
        print(response.summary.status)
    """
    return MKBDService().calculate(tables)
