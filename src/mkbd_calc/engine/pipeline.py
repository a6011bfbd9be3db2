"""
Pipeline Orchestrator for MKBD calculator.

Orchestrates the multi-pass MKBD calculation, wiring together:
    BaseValueExtractor -> RankingLiabilitiesCalculator -> CorrectionPass

Pipeline position:
    Entry point for full pipeline execution

Key responsibilities:
- Build the per-call configuration (formula overrides merged, never global)
- Run the passes in dependency order
- Accumulate warnings from all passes
- Keep caller-owned tables untouched (corrections go to clones)

Usage:
    from mkbd_calc.engine.pipeline import calculate_mkbd, apply_mkbd_corrections

    result = calculate_mkbd(tables)
    corrected = apply_mkbd_corrections(tables)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Sequence

from mkbd_calc.contracts.bundles import MKBDResult
from mkbd_calc.contracts.config import MKBDConfig
from mkbd_calc.contracts.errors import unknown_formula_warning

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import (
        CorrectionPlan,
        CorrectionResultBundle,
        ExtractedBaseValues,
        RankingResultBundle,
        SheetTable,
    )
    from mkbd_calc.contracts.config import FormulaOverride
    from mkbd_calc.contracts.errors import CalculationError
    from mkbd_calc.contracts.protocols import (
        CorrectionPassProtocol,
        ExtractorProtocol,
        RankingCalculatorProtocol,
    )

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline Orchestrator Implementation
# =============================================================================


class MKBDPipeline:
    """
    Orchestrate the MKBD calculation passes.

    Pipeline stages:
    1. Extraction: base values from VD51, VD52, VD59
    2. Ranking: VD510 concentration charges against 20% of equity
    3. Correction: working capital, adjusted MKBD, surplus/deficit and
       the cells they overwrite

    Usage:
        pipeline = MKBDPipeline(
            extractor=BaseValueExtractor(),
            ranking_calculator=RankingLiabilitiesCalculator(),
            corrector=CorrectionPass(),
        )
        result = pipeline.calculate(tables, MKBDConfig.default())
    """

    def __init__(
        self,
        extractor: ExtractorProtocol | None = None,
        ranking_calculator: RankingCalculatorProtocol | None = None,
        corrector: CorrectionPassProtocol | None = None,
    ) -> None:
        """
        Initialize pipeline with components.

        Components can be injected for testing or customization.
        If not provided, defaults will be created on first use.
        """
        self._extractor = extractor
        self._ranking_calculator = ranking_calculator
        self._corrector = corrector

    # =========================================================================
    # Public API
    # =========================================================================

    def calculate(
        self,
        tables: Sequence[SheetTable],
        config: MKBDConfig | None = None,
        formula_overrides: Mapping[str, FormulaOverride] | None = None,
    ) -> MKBDResult:
        """
        Compute the MKBD result without touching the tables.

        The result's corrections are the planned overwrites, identical to
        what apply_corrections() would write.
        """
        result, _ = self._run(tables, config, formula_overrides)
        return result

    def apply_corrections(
        self,
        tables: Sequence[SheetTable],
        config: MKBDConfig | None = None,
        formula_overrides: Mapping[str, FormulaOverride] | None = None,
    ) -> CorrectionResultBundle:
        """
        Compute the MKBD result and write corrections into cloned tables.

        Returns:
            CorrectionResultBundle with corrected clones, records and result
        """
        result, plan = self._run(tables, config, formula_overrides)
        return self._corrector.apply(tables, plan, result)

    # =========================================================================
    # Private Methods
    # =========================================================================

    def _run(
        self,
        tables: Sequence[SheetTable],
        config: MKBDConfig | None,
        formula_overrides: Mapping[str, FormulaOverride] | None,
    ) -> tuple[MKBDResult, CorrectionPlan]:
        self._ensure_components_initialized()

        base_config = config or MKBDConfig.default()
        warnings: list[CalculationError] = [
            unknown_formula_warning(formula_id)
            for formula_id in (formula_overrides or {})
            if formula_id not in base_config.formulas
        ]
        run_config = base_config.with_formula_overrides(formula_overrides)

        logger.info("Running MKBD calculation over %d tables", len(tables))

        extracted = self._extractor.extract(tables, run_config)
        ranking = self._ranking_calculator.calculate(tables, extracted, run_config)
        plan = self._corrector.plan(tables, extracted, ranking, run_config)

        warnings = list(extracted.errors) + warnings + list(ranking.errors) + list(plan.errors)
        result = self._build_result(extracted, ranking, plan, warnings, run_config)

        logger.info(
            "MKBD disesuaikan %s vs diwajibkan %s: %s",
            f"{result.adjusted_mkbd:,.0f}",
            f"{result.required_mkbd:,.0f}",
            "compliant" if result.is_compliant else "shortfall",
        )
        return result, plan

    def _ensure_components_initialized(self) -> None:
        """Ensure all passes are initialized."""
        from mkbd_calc.engine.corrector import CorrectionPass
        from mkbd_calc.engine.extractor import BaseValueExtractor
        from mkbd_calc.engine.ranking import RankingLiabilitiesCalculator

        if self._extractor is None:
            self._extractor = BaseValueExtractor()
        if self._ranking_calculator is None:
            self._ranking_calculator = RankingLiabilitiesCalculator()
        if self._corrector is None:
            self._corrector = CorrectionPass()

    @staticmethod
    def _build_result(
        extracted: ExtractedBaseValues,
        ranking: RankingResultBundle,
        plan: CorrectionPlan,
        warnings: list[CalculationError],
        config: MKBDConfig,
    ) -> MKBDResult:
        return MKBDResult(
            extracted=extracted,
            total_current_assets=extracted.total_current_assets,
            total_liabilities=extracted.total_liabilities,
            total_equity=extracted.total_equity,
            total_ranking_liabilities=ranking.total,
            working_capital=plan.working_capital,
            net_working_capital=plan.working_capital,
            haircut_sum=plan.haircut_sum,
            adjusted_mkbd=plan.adjusted_mkbd,
            required_mkbd=plan.required_mkbd,
            surplus_deficit=plan.surplus_deficit,
            calculation_steps=extracted.steps + ranking.steps + plan.steps,
            ranking_details=ranking.items,
            corrections=plan.records,
            warnings=tuple(warnings),
            formulas=tuple(config.formulas.values()),
        )


# =============================================================================
# Factory Functions
# =============================================================================


def create_pipeline(
    extractor: ExtractorProtocol | None = None,
    ranking_calculator: RankingCalculatorProtocol | None = None,
    corrector: CorrectionPassProtocol | None = None,
) -> MKBDPipeline:
    """
    Create an MKBD pipeline with default components.

    Returns:
        MKBDPipeline ready for use

    Usage:
        pipeline = create_pipeline()
        result = pipeline.calculate(tables)
    """
    return MKBDPipeline(
        extractor=extractor,
        ranking_calculator=ranking_calculator,
        corrector=corrector,
    )


def calculate_mkbd(
    tables: Sequence[SheetTable],
    config: MKBDConfig | None = None,
    formula_overrides: Mapping[str, FormulaOverride] | None = None,
) -> MKBDResult:
    """
    Calculate MKBD from the uploaded form tables.

    Pure: the same tables always give the same result and are never
    mutated.

    Args:
        tables: VD51 / VD52 / VD59 / VD510 tables (any order, extras ignored)
        config: Calculation configuration (default OJK constants)
        formula_overrides: Per-call formula overrides keyed by formula id

    Returns:
        MKBDResult
    """
    return create_pipeline().calculate(tables, config, formula_overrides)


def apply_mkbd_corrections(
    tables: Sequence[SheetTable],
    config: MKBDConfig | None = None,
    formula_overrides: Mapping[str, FormulaOverride] | None = None,
) -> CorrectionResultBundle:
    """
    Calculate MKBD and blind-overwrite the recomputed cells in clones.

    The returned tables are authoritative for export; the caller's tables
    are left untouched, so repeated calls give identical output.

    Args:
        tables: VD51 / VD52 / VD59 / VD510 tables
        config: Calculation configuration
        formula_overrides: Per-call formula overrides keyed by formula id

    Returns:
        CorrectionResultBundle with corrected clones, records and result
    """
    return create_pipeline().apply_corrections(tables, config, formula_overrides)
