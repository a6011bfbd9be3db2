"""
Correction pass for MKBD calculator.

Recomputes the dependent VD59 figures and blind-overwrites their cells:

    Baris 12              <- total ranking liabilities (VD510)
    Baris 13, 15, 18, 20  <- working capital
                             = TOTAL_ASET_LANCAR - TOTAL_LIABILITAS - ranking
    Baris 102             <- MKBD disesuaikan = working capital - SUM(Baris 33-92)
    Baris 104             <- lebih/(kurang) = MKBD disesuaikan - Baris 103

and writes each VD510 row's own charge into its ranking liability column,
plus the total into the VD510 "Total" row.

The pass is split in two:
    plan()  reads the original cells and returns a CorrectionPlan
    apply() clones every table and writes the planned records into the clones

so the records reported by calculate_mkbd are exactly those that
apply_mkbd_corrections writes. Caller-owned tables are never mutated.

A target row that cannot be located is skipped with a COR001 warning;
the computed figures are unaffected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

import polars as pl

from mkbd_calc.contracts.bundles import (
    CalculationStep,
    CorrectionPlan,
    CorrectionRecord,
    CorrectionResultBundle,
)
from mkbd_calc.contracts.errors import (
    CalculationError,
    column_not_found_warning,
    correction_skipped_warning,
    table_not_found_warning,
)
from mkbd_calc.data.tables.form_patterns import COLUMN_PATTERNS, FORM_VALUE_COLUMNS
from mkbd_calc.data.tables.mkbd_formulas import (
    FORMULA_ADJUSTED_MKBD,
    FORMULA_SURPLUS_DEFICIT,
    FORMULA_WORKING_CAPITAL,
)
from mkbd_calc.domain.enums import ColumnFallback, FormRole, RowRole
from mkbd_calc.engine.locator import (
    find_column,
    find_row,
    find_table,
    last_numeric_value,
    row_description,
)
from mkbd_calc.engine.parsing import parse_numeric_value, parse_optional_numeric

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import (
        ExtractedBaseValues,
        MKBDResult,
        RankingResultBundle,
        SheetTable,
    )
    from mkbd_calc.contracts.config import MKBDConfig

logger = logging.getLogger(__name__)

CALCULATED_SOURCE = "Calculated"
RANKING_ITEM_ROLE = "ranking_liability_item"


@dataclass
class _PlanState:
    """Accumulator for one planning run."""

    records: list[CorrectionRecord] = field(default_factory=list)
    steps: list[CalculationStep] = field(default_factory=list)
    errors: list[CalculationError] = field(default_factory=list)
    claimed: set[int] = field(default_factory=set)


class CorrectionPass:
    """
    Plan and apply the VD59 / VD510 blind overwrites.

    Usage:
        corrector = CorrectionPass()
        plan = corrector.plan(tables, extracted, ranking, config)
        bundle = corrector.apply(tables, plan, result)
    """

    # =========================================================================
    # Planning
    # =========================================================================

    def plan(
        self,
        tables: Sequence[SheetTable],
        extracted: ExtractedBaseValues,
        ranking: RankingResultBundle,
        config: MKBDConfig,
    ) -> CorrectionPlan:
        """
        Compute the dependent figures and the cells they overwrite.

        Args:
            tables: Original form tables (read only)
            extracted: Output of the extraction pass
            ranking: Output of the ranking pass
            config: Calculation configuration

        Returns:
            CorrectionPlan with figures, ordered records, steps and warnings
        """
        state = _PlanState()

        working_capital = self._working_capital(extracted, ranking, config, state)

        vd59 = find_table(tables, FormRole.VD59)
        vd59_column: str | None = None
        if vd59 is None:
            state.errors.append(table_not_found_warning(
                "VD59", "haircut sum is 0 and VD59 overwrites are skipped",
            ))
            logger.warning("VD59 not found; corrections limited to VD510")
        else:
            vd59_column = find_column(
                vd59,
                COLUMN_PATTERNS[FORM_VALUE_COLUMNS[FormRole.VD59]],
                fallback=ColumnFallback.NONE,
            )
            if vd59_column is None:
                state.errors.append(column_not_found_warning(
                    "VD59", "TOTAL", "VD59 overwrites skipped; figures read from last numeric cell",
                ))
                logger.warning("No Total column in '%s'; VD59 overwrites skipped", vd59.name)

        ranking_total = ranking.total
        if vd59 is not None:
            self._overwrite(
                vd59, vd59_column, RowRole.RANKING_LIABILITIES_TOTAL, ranking_total,
                "SUM(Nilai Ranking Liabilities VD510)", config, state,
            )
            working_capital_formula = config.formula(FORMULA_WORKING_CAPITAL)
            for position in config.row_pattern(RowRole.WORKING_CAPITAL).preferred_positions:
                self._overwrite(
                    vd59, vd59_column, RowRole.WORKING_CAPITAL, working_capital,
                    working_capital_formula.expression, config, state, position,
                )

        haircut_sum = self._haircut_sum(vd59, vd59_column, config, state)

        adjusted_formula = config.formula(FORMULA_ADJUSTED_MKBD)
        adjusted_mkbd = adjusted_formula.evaluate({
            "TOTAL_MODAL_KERJA_BERSIH": working_capital,
            "TOTAL_PENYESUAIAN_RISIKO": haircut_sum,
        })
        state.steps.append(CalculationStep(
            id="pass3_mkbd_disesuaikan",
            name=adjusted_formula.name,
            formula=adjusted_formula.expression,
            input_values={
                "TOTAL_MODAL_KERJA_BERSIH": working_capital,
                "TOTAL_PENYESUAIAN_RISIKO": haircut_sum,
            },
            result=adjusted_mkbd,
            source=CALCULATED_SOURCE,
            editable=adjusted_formula.editable,
        ))
        if vd59 is not None:
            self._overwrite(
                vd59, vd59_column, RowRole.ADJUSTED_MKBD, adjusted_mkbd,
                adjusted_formula.expression, config, state,
            )

        required_mkbd = extracted.required_mkbd
        surplus_formula = config.formula(FORMULA_SURPLUS_DEFICIT)
        surplus_deficit = surplus_formula.evaluate({
            "MKBD_DISESUAIKAN": adjusted_mkbd,
            "MKBD_DIWAJIBKAN": required_mkbd,
        })
        state.steps.append(CalculationStep(
            id="pass3_lebih_kurang_mkbd",
            name=surplus_formula.name,
            formula=surplus_formula.expression,
            input_values={
                "MKBD_DISESUAIKAN": adjusted_mkbd,
                "MKBD_DIWAJIBKAN": required_mkbd,
            },
            result=surplus_deficit,
            source=CALCULATED_SOURCE,
            editable=surplus_formula.editable,
        ))
        if vd59 is not None:
            self._overwrite(
                vd59, vd59_column, RowRole.SURPLUS_DEFICIT, surplus_deficit,
                surplus_formula.expression, config, state,
            )

        self._plan_vd510(tables, ranking, config, state)

        logger.info(
            "Correction plan: working capital %s, adjusted MKBD %s, surplus/deficit %s, %d cells",
            f"{working_capital:,.0f}", f"{adjusted_mkbd:,.0f}", f"{surplus_deficit:,.0f}",
            len(state.records),
        )

        return CorrectionPlan(
            working_capital=working_capital,
            haircut_sum=haircut_sum,
            adjusted_mkbd=adjusted_mkbd,
            required_mkbd=required_mkbd,
            surplus_deficit=surplus_deficit,
            records=tuple(state.records),
            steps=tuple(state.steps),
            errors=tuple(state.errors),
        )

    def _working_capital(
        self,
        extracted: ExtractedBaseValues,
        ranking: RankingResultBundle,
        config: MKBDConfig,
        state: _PlanState,
    ) -> float:
        formula = config.formula(FORMULA_WORKING_CAPITAL)
        inputs = {
            "TOTAL_ASET_LANCAR": extracted.total_current_assets,
            "TOTAL_LIABILITAS": extracted.total_liabilities,
            "TOTAL_RANKING_LIABILITIES": ranking.total,
        }
        working_capital = formula.evaluate(inputs)
        state.steps.append(CalculationStep(
            id="pass3_modal_kerja",
            name=formula.name,
            formula=formula.expression,
            input_values=inputs,
            result=working_capital,
            source=CALCULATED_SOURCE,
            editable=formula.editable,
        ))
        return working_capital

    def _haircut_sum(
        self,
        vd59: SheetTable | None,
        column: str | None,
        config: MKBDConfig,
        state: _PlanState,
    ) -> float:
        """
        Sum the VD59 value column over the haircut row range.

        Without a value column each row contributes its last numeric cell.
        Rows beyond the end of the table contribute nothing.
        """
        start, end = config.haircut_row_range
        if vd59 is None:
            return 0.0

        positions: list[int] = []
        values: list[float | None] = []
        for position, row in vd59:
            if not start <= position <= end:
                continue
            positions.append(position)
            if column is not None:
                values.append(parse_optional_numeric(row.get(column)))
            else:
                values.append(last_numeric_value(row))

        haircut_sum = (
            pl.DataFrame(
                {"row_position": positions, "value": values},
                schema={"row_position": pl.Int64, "value": pl.Float64},
            )
            .select(pl.col("value").fill_null(0.0).sum())
            .item()
        )
        haircut_sum = float(haircut_sum or 0.0)

        state.steps.append(CalculationStep(
            id="pass3_penyesuaian_risiko",
            name="Total Penyesuaian Risiko (VD59)",
            formula=f"SUM(Baris {start}-{end})",
            input_values={"JUMLAH_BARIS": float(len(positions))},
            result=haircut_sum,
            source=FormRole.VD59.value,
            editable=False,
        ))
        return haircut_sum

    def _overwrite(
        self,
        table: SheetTable,
        column: str | None,
        role: RowRole,
        new_value: float,
        formula: str,
        config: MKBDConfig,
        state: _PlanState,
        preferred_position: int | None = None,
    ) -> None:
        """Locate one target row and record the overwrite of its value cell."""
        if column is None:
            return

        row_pattern = config.row_pattern(role)
        if preferred_position is None:
            preferred_position = row_pattern.preferred_position

        match = find_row(table, row_pattern.pattern, preferred_position, exclude=state.claimed)
        if match is None:
            state.errors.append(correction_skipped_warning(
                row_pattern.form.value, role.value, preferred_position,
            ))
            logger.warning(
                "Correction target '%s' (Baris %s) not found in '%s'; skipped",
                row_pattern.description, preferred_position, table.name,
            )
            return

        state.claimed.add(match.position)
        state.records.append(_record(table, match.position, match.row, role.value, column, new_value, formula))

    def _plan_vd510(
        self,
        tables: Sequence[SheetTable],
        ranking: RankingResultBundle,
        config: MKBDConfig,
        state: _PlanState,
    ) -> None:
        """Write each item's charge back into VD510, then the Total row."""
        if ranking.skipped:
            return
        vd510 = find_table(tables, FormRole.VD510)
        if vd510 is None:
            return

        column = find_column(
            vd510,
            COLUMN_PATTERNS[FORM_VALUE_COLUMNS[FormRole.VD510]],
            fallback=ColumnFallback.NONE,
        )
        if column is None:
            state.errors.append(column_not_found_warning(
                "VD510", "NILAI_RANKING_LIABILITIES", "per-item charges not written back",
            ))
            logger.warning("No ranking liability column in '%s'; write-back skipped", vd510.name)
            return

        for item in ranking.items:
            row = vd510.row(item.row_position)
            if row is None:
                continue
            state.records.append(_record(
                vd510, item.row_position, row, RANKING_ITEM_ROLE, column, item.charge, item.formula,
            ))

        pattern = config.row_pattern(RowRole.PORTFOLIO_TOTAL)
        match = find_row(vd510, pattern.pattern)
        if match is not None:
            state.records.append(_record(
                vd510, match.position, match.row, RowRole.PORTFOLIO_TOTAL.value, column,
                ranking.total, "SUM(Nilai Ranking Liabilities)",
            ))

    # =========================================================================
    # Applying
    # =========================================================================

    def apply(
        self,
        tables: Sequence[SheetTable],
        plan: CorrectionPlan,
        result: MKBDResult,
    ) -> CorrectionResultBundle:
        """
        Write a plan into cloned tables.

        Args:
            tables: Original form tables (left untouched)
            plan: Plan produced by plan() from the same tables
            result: MKBD result the plan belongs to

        Returns:
            CorrectionResultBundle with the corrected clones
        """
        clones = [table.copy() for table in tables]
        by_name: dict[str, SheetTable] = {}
        for clone in clones:
            by_name.setdefault(clone.name, clone)

        for record in plan.records:
            by_name[record.table_name].set_cell(record.row_position, record.column, record.new_value)

        logger.info("Applied %d corrections", len(plan.records))

        return CorrectionResultBundle(
            tables=tuple(clones),
            corrections=plan.records,
            result=result,
        )


def _record(
    table: SheetTable,
    position: int,
    row: dict[str, Any],
    role: str,
    column: str,
    new_value: float,
    formula: str,
) -> CorrectionRecord:
    return CorrectionRecord(
        table_name=table.name,
        row_position=position,
        row_description=row_description(row, exclude_columns=(column,)),
        row_role=role,
        column=column,
        old_value=parse_numeric_value(row.get(column)),
        new_value=new_value,
        formula=formula,
    )


def create_correction_pass() -> CorrectionPass:
    """
    Create a correction pass instance.

    Returns:
        CorrectionPass ready for use
    """
    return CorrectionPass()
