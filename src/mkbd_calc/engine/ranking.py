"""
Ranking liabilities pass for MKBD calculator.

Computes the concentration charge of every eligible VD510 row:

    threshold = concentration_limit x TOTAL_EKUITAS          (20%)
    charge    = MAX(0, group_market_value - threshold)
    percent   = group_market_value / TOTAL_EKUITAS x 100

group_market_value is the row's pre-aggregated group field when present,
otherwise the row's own fair market value. Rows are not eligible when
the group value is null or <= 0, when the instrument code is empty or a
placeholder ("Other"), or when the row is the "Total" summary row.

Pipeline position:
    ExtractedBaseValues + VD510 -> RankingLiabilitiesCalculator -> RankingResultBundle

Usage:
    calculator = RankingLiabilitiesCalculator()
    ranking = calculator.calculate(tables, extracted, MKBDConfig.default())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import polars as pl

from mkbd_calc.contracts.bundles import (
    CalculationStep,
    RankingLiabilityItem,
    RankingResultBundle,
)
from mkbd_calc.contracts.errors import (
    CalculationError,
    column_not_found_warning,
    non_positive_equity_warning,
    table_not_found_warning,
)
from mkbd_calc.data.tables.form_patterns import COLUMN_PATTERNS
from mkbd_calc.data.tables.mkbd_formulas import DEFAULT_FORMULAS, FORMULA_RANKING_PER_ITEM
from mkbd_calc.domain.enums import ColumnFallback, ColumnRole, FormRole, RowRole
from mkbd_calc.engine.audit_namespace import format_short_number  # registers the audit namespace
from mkbd_calc.engine.locator import find_column, find_table, row_text
from mkbd_calc.engine.parsing import parse_optional_numeric

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import ExtractedBaseValues, SheetTable
    from mkbd_calc.contracts.config import MKBDConfig

logger = logging.getLogger(__name__)

STEP_ID = "pass2_ranking_liabilities"

# Normalised VD510 frame schema
RANKING_SCHEMA: dict[str, pl.DataType] = {
    "row_position": pl.Int64,
    "instrument_code": pl.String,
    "instrument_name": pl.String,
    "issuer_group": pl.String,
    "row_label": pl.String,
    "market_value": pl.Float64,
    "group_market_value_raw": pl.Float64,
}


class RankingLiabilitiesCalculator:
    """
    Compute VD510 concentration charges against the equity threshold.

    The pass is skipped (total 0, no items) when VD510 is absent or
    total equity is not positive.
    """

    def calculate(
        self,
        tables: Sequence[SheetTable],
        extracted: ExtractedBaseValues,
        config: MKBDConfig,
    ) -> RankingResultBundle:
        """
        Run the ranking liabilities pass.

        Args:
            tables: All uploaded form tables
            extracted: Output of the extraction pass
            config: Calculation configuration

        Returns:
            RankingResultBundle with per-row items and their total
        """
        total_equity = extracted.total_equity

        table = find_table(tables, FormRole.VD510)
        if table is None:
            logger.warning("VD510 not found; ranking liabilities set to 0")
            return RankingResultBundle(
                skipped=True,
                errors=(table_not_found_warning("VD510", "ranking liabilities set to 0"),),
            )

        if total_equity <= 0:
            logger.warning("Total equity %s is not positive; ranking pass skipped", total_equity)
            return RankingResultBundle(
                skipped=True,
                errors=(non_positive_equity_warning(total_equity),),
            )

        limit = float(config.concentration_limit)
        threshold = limit * total_equity
        errors: list[CalculationError] = []

        frame = self._normalize(table, errors)
        eligible = self._eligible_rows(frame, total_equity, config).collect()

        formula = config.formula(FORMULA_RANKING_PER_ITEM)
        is_default_formula = formula is DEFAULT_FORMULAS[FORMULA_RANKING_PER_ITEM]

        items: list[RankingLiabilityItem] = []
        for row in eligible.iter_rows(named=True):
            group_value = row["group_market_value"]
            charge = formula.evaluate({
                "GRUP_NILAI_PASAR_WAJAR": group_value,
                "BATAS_KONSENTRASI": limit,
                "TOTAL_EKUITAS": total_equity,
            })
            if is_default_formula:
                display = row["ranking_calculation"]
            else:
                display = f"{formula.expression} = {format_short_number(charge)}"
            items.append(RankingLiabilityItem(
                row_position=row["row_position"],
                instrument_code=row["instrument_code"],
                instrument_name=row["instrument_name"],
                issuer_group=row["issuer_group"],
                market_value=row["market_value"] if row["market_value"] is not None else 0.0,
                group_market_value=group_value,
                threshold=threshold,
                charge=charge,
                percent_of_equity=row["percent_of_equity"],
                formula=display,
            ))

        total = sum(item.charge for item in items)

        step = CalculationStep(
            id=STEP_ID,
            name="Total Ranking Liabilities (VD510)",
            formula=f"SUM({formula.expression})",
            input_values={
                "TOTAL_EKUITAS": total_equity,
                "BATAS_KONSENTRASI": limit,
                "THRESHOLD": threshold,
                "JUMLAH_ITEM": float(len(items)),
            },
            result=total,
            source=FormRole.VD510.value,
            editable=formula.editable,
        )

        logger.info(
            "Ranking liabilities: %d eligible rows, total %s (threshold %s)",
            len(items), f"{total:,.0f}", f"{threshold:,.0f}",
        )

        return RankingResultBundle(
            items=tuple(items),
            total=total,
            threshold=threshold,
            skipped=False,
            steps=(step,),
            errors=tuple(errors),
        )

    def _normalize(self, table: SheetTable, errors: list[CalculationError]) -> pl.LazyFrame:
        """
        Normalise VD510 into the ranking frame schema.

        Cells are parsed here, so downstream expressions only see typed
        columns. A missing column yields nulls for that field.
        """
        code_col = self._column(table, ColumnRole.INSTRUMENT_CODE)
        name_col = self._column(table, ColumnRole.INSTRUMENT_NAME)
        group_col = self._column(table, ColumnRole.ISSUER_GROUP)
        market_col = self._column(table, ColumnRole.MARKET_VALUE)
        group_value_col = self._column(table, ColumnRole.GROUP_MARKET_VALUE)

        if code_col is None:
            errors.append(column_not_found_warning(
                "VD510", "KODE_EFEK", "no row has an instrument code; no ranking items",
            ))
        if market_col is None and group_value_col is None:
            errors.append(column_not_found_warning(
                "VD510", "NILAI_PASAR_WAJAR", "no row has a market value; no ranking items",
            ))

        records: dict[str, list] = {name: [] for name in RANKING_SCHEMA}
        for position, row in table:
            records["row_position"].append(position)
            records["instrument_code"].append(_text(row.get(code_col)) if code_col else None)
            records["instrument_name"].append(_text(row.get(name_col)) if name_col else None)
            records["issuer_group"].append(_text(row.get(group_col)) if group_col else None)
            records["row_label"].append(row_text(row))
            records["market_value"].append(
                parse_optional_numeric(row.get(market_col)) if market_col else None
            )
            records["group_market_value_raw"].append(
                parse_optional_numeric(row.get(group_value_col)) if group_value_col else None
            )

        return pl.LazyFrame(records, schema=RANKING_SCHEMA)

    def _eligible_rows(
        self,
        frame: pl.LazyFrame,
        total_equity: float,
        config: MKBDConfig,
    ) -> pl.LazyFrame:
        """Apply group-value precedence, eligibility filters and display columns."""
        marker = config.placeholder_code_marker.lower()
        summary_pattern = config.row_pattern(RowRole.PORTFOLIO_TOTAL).pattern.pattern
        code = pl.col("instrument_code").fill_null("")

        return (
            frame
            .with_columns([
                # Group field first, else the row's own value
                pl.coalesce(
                    pl.col("group_market_value_raw"), pl.col("market_value"),
                ).alias("group_market_value"),
                code.alias("instrument_code"),
            ])
            .filter(
                (pl.col("group_market_value") > 0)
                & (pl.col("instrument_code") != "")
                & ~pl.col("instrument_code").str.to_lowercase().str.contains(marker, literal=True)
                & ~pl.col("row_label").str.contains(summary_pattern)
            )
            .with_columns([
                pl.when(pl.col("instrument_name").fill_null("") == "")
                .then(pl.col("instrument_code"))
                .otherwise(pl.col("instrument_name"))
                .alias("instrument_name"),
                pl.when(pl.col("issuer_group").fill_null("") == "")
                .then(pl.col("instrument_code"))
                .otherwise(pl.col("issuer_group"))
                .alias("issuer_group"),
                (pl.col("group_market_value") / total_equity * 100).alias("percent_of_equity"),
                pl.lit(total_equity).alias("total_equity"),
            ])
            .audit.build_ranking_calculation(config.concentration_limit)
            .sort("row_position")
        )

    @staticmethod
    def _column(table: SheetTable, role: ColumnRole) -> str | None:
        return find_column(table, COLUMN_PATTERNS[role], fallback=ColumnFallback.NONE)


def _text(value: object) -> str | None:
    """Cell as stripped text; numeric codes keep their integer form."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def create_ranking_calculator() -> RankingLiabilitiesCalculator:
    """
    Create a ranking liabilities calculator instance.

    Returns:
        RankingLiabilitiesCalculator ready for use
    """
    return RankingLiabilitiesCalculator()
