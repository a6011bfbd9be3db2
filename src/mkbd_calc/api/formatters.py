"""
Result formatting utilities for MKBD calculator API.

ResultFormatter: Formats MKBDResult for API responses and builds the
Polars frames the export collaborator writes into the output workbook:

    summary_frame      -> "MKBD_Summary" sheet rows
    corrections_frame  -> cells to patch in the original workbook
    ranking_frame      -> VD510 per-row calculation detail
    steps_frame        -> calculation audit trail

compute_summary: Calculates SummaryStatistics from a result
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Sequence, Sized

import polars as pl

from mkbd_calc.api.errors import convert_errors
from mkbd_calc.api.models import (
    STATUS_CRITICAL,
    STATUS_HEALTHY,
    APIError,
    CalculationResponse,
    PerformanceMetrics,
    SummaryStatistics,
)
from mkbd_calc.contracts.config import MKBDConfig
from mkbd_calc.data.tables.form_patterns import FORM_NAME_PATTERNS
from mkbd_calc.domain.enums import FormRole
from mkbd_calc.engine.audit_namespace import AuditExpr  # noqa: F401 - registers the audit namespace

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import MKBDResult, SheetTable


SUMMARY_SCHEMA: dict[str, pl.DataType] = {
    "section": pl.String,
    "label": pl.String,
    "value": pl.Float64,
    "text": pl.String,
}

CORRECTIONS_SCHEMA: dict[str, pl.DataType] = {
    "table_name": pl.String,
    "row_position": pl.Int64,
    "row_description": pl.String,
    "row_role": pl.String,
    "column": pl.String,
    "old_value": pl.Float64,
    "new_value": pl.Float64,
    "formula": pl.String,
}

RANKING_SCHEMA: dict[str, pl.DataType] = {
    "row_position": pl.Int64,
    "instrument_code": pl.String,
    "instrument_name": pl.String,
    "issuer_group": pl.String,
    "market_value": pl.Float64,
    "group_market_value": pl.Float64,
    "threshold": pl.Float64,
    "charge": pl.Float64,
    "percent_of_equity": pl.Float64,
    "formula": pl.String,
}

STEPS_SCHEMA: dict[str, pl.DataType] = {
    "id": pl.String,
    "name": pl.String,
    "formula": pl.String,
    "result": pl.Float64,
    "source": pl.String,
    "editable": pl.Boolean,
}


# =============================================================================
# Result Formatter
# =============================================================================


class ResultFormatter:
    """
    Formats pipeline results for API responses and export.

    Usage:
        formatter = ResultFormatter()
        response = formatter.format_response(
            result=result,
            corrected_tables=bundle.tables,
            tables=tables,
            started_at=datetime.now(),
        )
        sheet = formatter.summary_frame(result)
    """

    def format_response(
        self,
        result: MKBDResult,
        corrected_tables: Sequence[SheetTable],
        tables: Sequence[SheetTable],
        started_at: datetime,
    ) -> CalculationResponse:
        """
        Format an MKBDResult into a CalculationResponse.

        Args:
            result: Result from the pipeline
            corrected_tables: Corrected clones (empty when not applied)
            tables: Input tables (for performance metrics)
            started_at: Calculation start time

        Returns:
            CalculationResponse ready for API return
        """
        completed_at = datetime.now()

        errors = convert_errors(result.warnings)
        has_critical = any(e.severity == "critical" for e in errors)

        return CalculationResponse(
            success=not has_critical,
            result=result,
            summary=self._compute_summary(result),
            corrected_tables=tuple(corrected_tables),
            errors=errors,
            performance=self._performance(started_at, completed_at, tables),
        )

    def format_error_response(
        self,
        errors: list[APIError],
        tables: Sequence[SheetTable],
        started_at: datetime,
    ) -> CalculationResponse:
        """
        Format an error response when calculation fails.

        Args:
            errors: List of errors that caused failure
            tables: Input tables
            started_at: Calculation start time

        Returns:
            CalculationResponse indicating failure
        """
        completed_at = datetime.now()
        zero = Decimal("0")

        empty_summary = SummaryStatistics(
            total_current_assets=zero,
            total_liabilities=zero,
            total_equity=zero,
            total_ranking_liabilities=zero,
            working_capital=zero,
            haircut_sum=zero,
            adjusted_mkbd=zero,
            required_mkbd=zero,
            surplus_deficit=zero,
        )

        return CalculationResponse(
            success=False,
            result=None,
            summary=empty_summary,
            errors=errors,
            performance=self._performance(started_at, completed_at, tables),
        )

    # =========================================================================
    # Export frames
    # =========================================================================

    def summary_frame(self, result: MKBDResult, config: MKBDConfig | None = None) -> pl.DataFrame:
        """
        Rows of the MKBD summary sheet.

        Sections: data sources, VD510 result, VD59 updates, MKBD result,
        and the formulas used. Numeric rows carry `value`; text rows
        (formulas, status) carry `text`. Labels are unique across the sheet.

        The formula section lists the formulas the run used. `config` is only
        consulted for results that do not carry their formula table.
        """
        formulas = result.formulas or tuple((config or MKBDConfig.default()).formulas.values())
        rows: list[dict] = []

        def add(section: str, label: str, value: float | None = None, text: str | None = None) -> None:
            rows.append({"section": section, "label": label, "value": value, "text": text})

        add("SUMBER DATA", "Total Ekuitas (VD52)", result.total_equity)
        add("SUMBER DATA", "Total Aset Lancar (VD51)", result.total_current_assets)
        add("SUMBER DATA", "Total Liabilitas (VD52)", result.total_liabilities)
        add("SUMBER DATA", "Nilai MKBD yang diwajibkan", result.required_mkbd)

        add("HASIL KALKULASI VD510", "Total Ranking Liabilities", result.total_ranking_liabilities)

        for record in result.corrections:
            if _is_form(record.table_name, FormRole.VD59):
                add("HASIL KALKULASI VD59", f"Baris {record.row_position} - {record.row_description}",
                    record.new_value)

        add("HASIL MKBD", "Total Penyesuaian Risiko", result.haircut_sum)
        add("HASIL MKBD", "MKBD Disesuaikan", result.adjusted_mkbd)
        add("HASIL MKBD", "Lebih/(Kurang) MKBD", result.surplus_deficit)
        add("HASIL MKBD", "Rasio MKBD (%)", result.mkbd_ratio)
        add("HASIL MKBD", "Status", text=_status(result))

        for formula in formulas:
            add("FORMULA YANG DIGUNAKAN", f"Formula: {formula.name}", text=formula.expression)

        return pl.DataFrame(rows, schema=SUMMARY_SCHEMA)

    def corrections_frame(self, result: MKBDResult) -> pl.DataFrame:
        """One row per overwritten cell, in write order."""
        return pl.DataFrame(
            [
                {
                    "table_name": r.table_name,
                    "row_position": r.row_position,
                    "row_description": r.row_description,
                    "row_role": r.row_role,
                    "column": r.column,
                    "old_value": r.old_value,
                    "new_value": r.new_value,
                    "formula": r.formula,
                }
                for r in result.corrections
            ],
            schema=CORRECTIONS_SCHEMA,
        ).with_columns(
            (pl.col("new_value") - pl.col("old_value")).alias("difference"),
        )

    def ranking_frame(self, result: MKBDResult) -> pl.DataFrame:
        """VD510 calculation detail with formatted display columns."""
        frame = pl.DataFrame(
            [
                {
                    "row_position": item.row_position,
                    "instrument_code": item.instrument_code,
                    "instrument_name": item.instrument_name,
                    "issuer_group": item.issuer_group,
                    "market_value": item.market_value,
                    "group_market_value": item.group_market_value,
                    "threshold": item.threshold,
                    "charge": item.charge,
                    "percent_of_equity": item.percent_of_equity,
                    "formula": item.formula,
                }
                for item in result.ranking_details
            ],
            schema=RANKING_SCHEMA,
        )
        return frame.with_columns([
            pl.col("group_market_value").audit.format_short().alias("group_market_value_display"),
            pl.col("charge").audit.format_currency().alias("charge_display"),
            (pl.col("percent_of_equity") / 100).audit.format_percent(2).alias("percent_display"),
        ])

    def steps_frame(self, result: MKBDResult) -> pl.DataFrame:
        """Calculation audit trail in step order."""
        return pl.DataFrame(
            [
                {
                    "id": step.id,
                    "name": step.name,
                    "formula": step.formula,
                    "result": step.result,
                    "source": step.source,
                    "editable": step.editable,
                }
                for step in result.calculation_steps
            ],
            schema=STEPS_SCHEMA,
        )

    # =========================================================================
    # Private Methods
    # =========================================================================

    def _compute_summary(self, result: MKBDResult) -> SummaryStatistics:
        """
        Compute summary statistics from a result.

        Args:
            result: MKBD result

        Returns:
            SummaryStatistics with headline figures as Decimal
        """
        return SummaryStatistics(
            total_current_assets=_decimal(result.total_current_assets),
            total_liabilities=_decimal(result.total_liabilities),
            total_equity=_decimal(result.total_equity),
            total_ranking_liabilities=_decimal(result.total_ranking_liabilities),
            working_capital=_decimal(result.working_capital),
            haircut_sum=_decimal(result.haircut_sum),
            adjusted_mkbd=_decimal(result.adjusted_mkbd),
            required_mkbd=_decimal(result.required_mkbd),
            surplus_deficit=_decimal(result.surplus_deficit),
            mkbd_ratio=_decimal(result.mkbd_ratio),
            status=_status(result),
            ranking_item_count=len(result.ranking_details),
            correction_count=len(result.corrections),
        )

    def _performance(
        self,
        started_at: datetime,
        completed_at: datetime,
        tables: Sequence[SheetTable],
    ) -> PerformanceMetrics:
        return PerformanceMetrics(
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            table_count=len(tables) if isinstance(tables, Sized) else 0,
            row_count=_row_count(tables),
        )


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


def _row_count(tables: Sequence[SheetTable]) -> int:
    """Total input rows; 0 when the input is not a sequence of tables."""
    try:
        return sum(table.row_count for table in tables)
    except (TypeError, AttributeError):
        return 0


def _status(result: MKBDResult) -> str:
    return STATUS_HEALTHY if result.is_compliant else STATUS_CRITICAL


def _is_form(table_name: str, role: FormRole) -> bool:
    return FORM_NAME_PATTERNS[role].search(table_name) is not None


# =============================================================================
# Convenience Functions
# =============================================================================


def compute_summary(result: MKBDResult) -> SummaryStatistics:
    """
    Compute summary statistics from an MKBD result.

    Args:
        result: MKBD result

    Returns:
        SummaryStatistics with headline figures
    """
    return ResultFormatter()._compute_summary(result)
