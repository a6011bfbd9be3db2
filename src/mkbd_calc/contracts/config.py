"""
Configuration contracts for MKBD calculator.

Provides an immutable configuration object passed explicitly into the
pipeline:
- MKBDConfig: Regulatory constants, formula table and row patterns

There is no process-wide formula registry. Overrides are merged into a
new MKBDConfig per call, so concurrent calculations with different
formulas never interfere and every run is reproducible from its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from mkbd_calc.data.tables.form_patterns import ROW_PATTERNS, RowPattern
from mkbd_calc.data.tables.mkbd_formulas import DEFAULT_FORMULAS, FormulaDefinition
from mkbd_calc.domain.enums import RowRole

logger = logging.getLogger(__name__)

FormulaOverride = FormulaDefinition | Mapping[str, Any]


@dataclass(frozen=True)
class MKBDConfig:
    """
    Master configuration for one MKBD calculation.

    Attributes:
        concentration_limit: Share of total equity one issuer group may
            represent before a ranking liability arises (20%)
        minimum_required_mkbd: Statutory floor used when the required MKBD
            cannot be read from VD59 (IDR 25 billion)
        haircut_row_range: Inclusive 1-based VD59 rows holding the risk
            haircut deductions (Baris 33-92)
        placeholder_code_marker: Instrument codes containing this text
            (case-insensitive) are placeholders, not instruments
        formulas: Formula table keyed by formula id
        row_patterns: Row identity table keyed by row role

    Usage:
        config = MKBDConfig.default()
        custom = config.with_formula_overrides({
            "modal_kerja": {"calculate": lambda i: ...},
        })
    """

    concentration_limit: Decimal = Decimal("0.20")
    minimum_required_mkbd: Decimal = Decimal("25000000000")
    haircut_row_range: tuple[int, int] = (33, 92)
    placeholder_code_marker: str = "other"
    formulas: Mapping[str, FormulaDefinition] = field(default_factory=lambda: DEFAULT_FORMULAS)
    row_patterns: Mapping[RowRole, RowPattern] = field(default_factory=lambda: ROW_PATTERNS)

    def __post_init__(self) -> None:
        start, end = self.haircut_row_range
        if start < 1 or end < start:
            raise ValueError(f"Invalid haircut row range: {self.haircut_row_range}")
        if not Decimal("0") < self.concentration_limit <= Decimal("1"):
            raise ValueError(f"Concentration limit must be in (0, 1]: {self.concentration_limit}")
        object.__setattr__(self, "formulas", MappingProxyType(dict(self.formulas)))
        object.__setattr__(self, "row_patterns", MappingProxyType(dict(self.row_patterns)))

    @classmethod
    def default(cls) -> MKBDConfig:
        """Default OJK MKBD configuration."""
        return cls()

    def formula(self, formula_id: str) -> FormulaDefinition:
        """Look up a formula by id."""
        return self.formulas[formula_id]

    def row_pattern(self, role: RowRole) -> RowPattern:
        """Look up a row pattern by role."""
        return self.row_patterns[role]

    def with_formula_overrides(
        self,
        overrides: Mapping[str, FormulaOverride] | None,
    ) -> MKBDConfig:
        """
        Return a new configuration with formula overrides merged in.

        Each override is either a complete FormulaDefinition or a partial
        mapping of FormulaDefinition fields merged onto the existing one.
        Ids not present in the formula table are ignored.

        Args:
            overrides: Mapping formula id -> override

        Returns:
            New MKBDConfig; self is unchanged
        """
        if not overrides:
            return self

        merged = dict(self.formulas)
        for formula_id, override in overrides.items():
            current = merged.get(formula_id)
            if current is None:
                logger.warning("Ignoring override for unknown formula '%s'", formula_id)
                continue
            if isinstance(override, FormulaDefinition):
                merged[formula_id] = replace(override, id=formula_id)
            else:
                fields = {k: v for k, v in override.items() if k != "id"}
                merged[formula_id] = replace(current, **fields)

        return replace(self, formulas=merged)

    def with_row_patterns(self, patterns: Mapping[RowRole, RowPattern]) -> MKBDConfig:
        """Return a new configuration with row patterns replaced per role."""
        merged = dict(self.row_patterns)
        merged.update(patterns)
        return replace(self, row_patterns=merged)
