"""
Data transfer bundles for MKBD calculator pipeline.

Defines the containers passed between pipeline passes. Each bundle is
the output of one pass and the input of the next:

    SheetTable[] -> BaseValueExtractor -> ExtractedBaseValues
                                                |
                            RankingLiabilitiesCalculator -> RankingResultBundle
                                                                |
                                            CorrectionPass -> CorrectionPlan
                                                                |
                                        (apply on clones) -> CorrectionResultBundle

SheetTable is the only mutable contract: the correction pass writes into
private copies produced by SheetTable.copy(), never into caller-owned
tables. Everything else is frozen.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Mapping

import polars as pl

from mkbd_calc.domain.enums import BaseQuantity, ErrorSeverity

if TYPE_CHECKING:
    from mkbd_calc.contracts.errors import CalculationError
    from mkbd_calc.data.tables.mkbd_formulas import FormulaDefinition


CellValue = int | float | str | None


# =============================================================================
# Source tables
# =============================================================================


@dataclass
class SheetTable:
    """
    One extracted form table, as produced by the ingestion collaborator.

    Row positions are 1-based and encode regulatory row numbers
    ("Baris 12", "Baris 102"), so row order must never change.

    Attributes:
        name: Sheet name identifying the form (e.g., "VD5-10")
        columns: Ordered, unique column labels
        rows: Ordered records mapping column label -> cell value
    """

    name: str
    columns: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"Duplicate column labels in table '{self.name}'")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row(self, position: int) -> dict[str, Any] | None:
        """Return the row at a 1-based position, or None when out of range."""
        if 1 <= position <= len(self.rows):
            return self.rows[position - 1]
        return None

    def cell(self, position: int, column: str) -> CellValue:
        """Return the cell at a 1-based row position, or None."""
        row = self.row(position)
        if row is None:
            return None
        return row.get(column)

    def set_cell(self, position: int, column: str, value: CellValue) -> None:
        """Overwrite one cell in place. Only used on cloned tables."""
        row = self.row(position)
        if row is None:
            raise IndexError(f"Row {position} out of range for table '{self.name}'")
        if column not in self.columns:
            raise KeyError(f"Unknown column '{column}' in table '{self.name}'")
        row[column] = value

    def copy(self) -> SheetTable:
        """Deep-clone the table so the copy can be mutated safely."""
        return SheetTable(
            name=self.name,
            columns=list(self.columns),
            rows=copy.deepcopy(self.rows),
        )

    def __iter__(self) -> Iterator[tuple[int, dict[str, Any]]]:
        """Iterate (1-based position, row) pairs in row order."""
        return iter(enumerate(self.rows, start=1))

    @classmethod
    def from_frame(cls, name: str, frame: pl.DataFrame) -> SheetTable:
        """Build a table from a Polars DataFrame (ingestion boundary)."""
        return cls(name=name, columns=list(frame.columns), rows=frame.to_dicts())

    def to_frame(self) -> pl.DataFrame:
        """
        Materialize the table as a Polars DataFrame (export boundary).

        Columns holding only numbers (or blanks) become Float64; any column
        containing text is rendered as String so mixed cells survive.
        """
        series = []
        for column in self.columns:
            values = [row.get(column) for row in self.rows]
            if all(_is_number(v) or v is None for v in values):
                series.append(pl.Series(column, [None if v is None else float(v) for v in values], dtype=pl.Float64))
            else:
                series.append(pl.Series(column, [None if v is None else str(v) for v in values], dtype=pl.String))
        return pl.DataFrame(series)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Extraction pass
# =============================================================================


@dataclass(frozen=True)
class ExtractedValue:
    """
    One base figure with its provenance.

    Attributes:
        quantity: Which base quantity this is
        value: Parsed numeric value (0 or statutory default when not found)
        source: Form name the value came from, or "Default"
        formula: Human-readable provenance (e.g., "Extract from VD52 Baris 164")
        row_position: 1-based row the value was read from, if located
        column: Column the value was read from, if a named column was used
        found: Whether the value was actually located in a form
    """

    quantity: BaseQuantity
    value: float
    source: str
    formula: str
    row_position: int | None = None
    column: str | None = None
    found: bool = True


@dataclass(frozen=True)
class ExtractedBaseValues:
    """
    Output from the extraction pass.

    Attributes:
        values: Mapping quantity -> ExtractedValue (read-only)
        steps: Audit steps, one per primary quantity located or defaulted
        errors: Warnings for missing forms/rows
    """

    values: Mapping[BaseQuantity, ExtractedValue]
    steps: tuple[CalculationStep, ...] = ()
    errors: tuple[CalculationError, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, quantity: BaseQuantity, default: float = 0.0) -> float:
        """Numeric value of a quantity, or default when never recorded."""
        extracted = self.values.get(quantity)
        return extracted.value if extracted is not None else default

    def __getitem__(self, quantity: BaseQuantity) -> ExtractedValue:
        return self.values[quantity]

    def __contains__(self, quantity: object) -> bool:
        return quantity in self.values

    @property
    def total_current_assets(self) -> float:
        return self.get(BaseQuantity.TOTAL_CURRENT_ASSETS)

    @property
    def total_liabilities(self) -> float:
        return self.get(BaseQuantity.TOTAL_LIABILITIES)

    @property
    def total_equity(self) -> float:
        return self.get(BaseQuantity.TOTAL_EQUITY)

    @property
    def required_mkbd(self) -> float:
        return self.get(BaseQuantity.REQUIRED_MKBD)


# =============================================================================
# Audit steps
# =============================================================================


@dataclass(frozen=True)
class CalculationStep:
    """
    One step of the calculation audit trail, shown to reviewers.

    Attributes:
        id: Stable step identifier (e.g., "pass1_total_equity")
        name: Display name (e.g., "Total Ekuitas (VD52)")
        formula: Formula or provenance text
        input_values: Named numeric inputs of the step
        result: Step result
        source: Form the step read from, "Calculated", or "Default"
        editable: Whether the formula may be overridden through config
    """

    id: str
    name: str
    formula: str
    input_values: Mapping[str, float]
    result: float
    source: str
    editable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_values", MappingProxyType(dict(self.input_values)))


# =============================================================================
# Ranking liabilities pass
# =============================================================================


@dataclass(frozen=True)
class RankingLiabilityItem:
    """
    Concentration charge for one eligible VD510 row.

    Attributes:
        row_position: 1-based row in the VD510 table
        instrument_code: Kode efek
        instrument_name: Nama / jenis efek (falls back to the code)
        issuer_group: Grup emiten (falls back to the code)
        market_value: The row's own fair market value
        group_market_value: Figure used for the charge (group value if present)
        threshold: Concentration limit x total equity
        charge: Ranking liability for this row
        percent_of_equity: group_market_value / total equity x 100
        formula: Display formula with the actual figures
    """

    row_position: int
    instrument_code: str
    instrument_name: str
    issuer_group: str
    market_value: float
    group_market_value: float
    threshold: float
    charge: float
    percent_of_equity: float
    formula: str


@dataclass(frozen=True)
class RankingResultBundle:
    """
    Output from the ranking-liabilities pass.

    Attributes:
        items: Per-row charges in VD510 row order
        total: Sum of item charges
        threshold: Concentration threshold used (0 when the pass was skipped)
        skipped: Whether the pass was skipped (no VD510 or equity <= 0)
        steps: Audit steps
        errors: Warnings
    """

    items: tuple[RankingLiabilityItem, ...] = ()
    total: float = 0.0
    threshold: float = 0.0
    skipped: bool = False
    steps: tuple[CalculationStep, ...] = ()
    errors: tuple[CalculationError, ...] = ()


# =============================================================================
# Correction pass
# =============================================================================


@dataclass(frozen=True)
class CorrectionRecord:
    """
    One blind-overwritten cell.

    Attributes:
        table_name: Name of the table the cell belongs to
        row_position: 1-based row number of the cell
        row_description: Label text of the row
        row_role: Semantic role of the row (e.g., "working_capital")
        column: Column label of the cell
        old_value: Parsed value before the overwrite
        new_value: Value written
        formula: Formula that produced the new value
    """

    table_name: str
    row_position: int
    row_description: str
    row_role: str
    column: str
    old_value: float
    new_value: float
    formula: str

    @property
    def changed(self) -> bool:
        return self.old_value != self.new_value


@dataclass(frozen=True)
class CorrectionPlan:
    """
    Figures and overwrites computed by the correction pass.

    Produced without mutating anything; applying the plan to cloned
    tables yields the corrected output.
    """

    working_capital: float
    haircut_sum: float
    adjusted_mkbd: float
    required_mkbd: float
    surplus_deficit: float
    records: tuple[CorrectionRecord, ...] = ()
    steps: tuple[CalculationStep, ...] = ()
    errors: tuple[CalculationError, ...] = ()


# =============================================================================
# Final result
# =============================================================================


@dataclass(frozen=True)
class MKBDResult:
    """
    Aggregate output of one MKBD calculation run.

    Attributes:
        extracted: All extracted base values with provenance
        total_current_assets: TOTAL_ASET_LANCAR
        total_liabilities: TOTAL_LIABILITAS
        total_equity: TOTAL_EKUITAS
        total_ranking_liabilities: Sum of VD510 concentration charges
        working_capital: Assets - liabilities - ranking liabilities
        net_working_capital: Total Modal Kerja Bersih (VD59 Baris 18)
        haircut_sum: Sum of VD59 risk-haircut rows
        adjusted_mkbd: Net working capital - haircut sum
        required_mkbd: Minimum MKBD the broker must hold
        surplus_deficit: Adjusted MKBD - required MKBD
        calculation_steps: Ordered audit trail
        ranking_details: Per-row VD510 charges
        corrections: Overwritten (or to-be-overwritten) cells
        warnings: Degraded inputs and skipped steps
        formulas: Formula table in effect for the run, overrides included
    """

    extracted: ExtractedBaseValues
    total_current_assets: float
    total_liabilities: float
    total_equity: float
    total_ranking_liabilities: float
    working_capital: float
    net_working_capital: float
    haircut_sum: float
    adjusted_mkbd: float
    required_mkbd: float
    surplus_deficit: float
    calculation_steps: tuple[CalculationStep, ...] = ()
    ranking_details: tuple[RankingLiabilityItem, ...] = ()
    corrections: tuple[CorrectionRecord, ...] = ()
    warnings: tuple[CalculationError, ...] = ()
    formulas: tuple[FormulaDefinition, ...] = ()

    @property
    def is_compliant(self) -> bool:
        """Whether adjusted MKBD meets the required minimum."""
        return self.surplus_deficit >= 0

    @property
    def mkbd_ratio(self) -> float:
        """Adjusted MKBD as a percentage of the required MKBD."""
        if self.required_mkbd == 0:
            return 0.0
        return self.adjusted_mkbd / self.required_mkbd * 100

    @property
    def has_errors(self) -> bool:
        """Check if any errors (not warnings) occurred."""
        return any(
            e.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
            for e in self.warnings
        )

    def steps_from(self, source: str) -> list[CalculationStep]:
        """Steps sourced from a given form; empty means the form was missing."""
        return [step for step in self.calculation_steps if step.source == source]


@dataclass(frozen=True)
class CorrectionResultBundle:
    """
    Output of apply_mkbd_corrections.

    Attributes:
        tables: Corrected copies of every input table, in input order
        corrections: Every overwritten cell, in write order
        result: The MKBD result the corrections were derived from
    """

    tables: tuple[SheetTable, ...]
    corrections: tuple[CorrectionRecord, ...]
    result: MKBDResult

    def table(self, name: str) -> SheetTable | None:
        """Look up a corrected table by its exact name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None
