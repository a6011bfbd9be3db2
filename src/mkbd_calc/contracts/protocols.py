"""
Protocol definitions for MKBD calculator passes.

Defines interfaces using Python's Protocol (PEP 544) for structural
typing, so each pass can be mocked in tests or swapped in MKBDPipeline:

    ExtractorProtocol -> RankingCalculatorProtocol -> CorrectionPassProtocol
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import (
        CorrectionPlan,
        CorrectionResultBundle,
        ExtractedBaseValues,
        MKBDResult,
        RankingResultBundle,
        SheetTable,
    )
    from mkbd_calc.contracts.config import MKBDConfig


@runtime_checkable
class ExtractorProtocol(Protocol):
    """
    Protocol for the base value extraction pass.

    Input: uploaded form tables
    Output: ExtractedBaseValues
    """

    def extract(
        self,
        tables: Sequence[SheetTable],
        config: MKBDConfig,
    ) -> ExtractedBaseValues:
        """Read the base quantities; must not mutate the tables."""
        ...


@runtime_checkable
class RankingCalculatorProtocol(Protocol):
    """
    Protocol for the ranking liabilities pass.

    Input: form tables + ExtractedBaseValues
    Output: RankingResultBundle
    """

    def calculate(
        self,
        tables: Sequence[SheetTable],
        extracted: ExtractedBaseValues,
        config: MKBDConfig,
    ) -> RankingResultBundle:
        """Compute per-row concentration charges and their total."""
        ...


@runtime_checkable
class CorrectionPassProtocol(Protocol):
    """
    Protocol for the correction pass.

    plan() is pure; apply() writes into clones of the tables.
    """

    def plan(
        self,
        tables: Sequence[SheetTable],
        extracted: ExtractedBaseValues,
        ranking: RankingResultBundle,
        config: MKBDConfig,
    ) -> CorrectionPlan:
        """Compute dependent figures and the cells they overwrite."""
        ...

    def apply(
        self,
        tables: Sequence[SheetTable],
        plan: CorrectionPlan,
        result: MKBDResult,
    ) -> CorrectionResultBundle:
        """Write the plan into cloned tables."""
        ...
