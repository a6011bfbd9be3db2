"""
API response models for MKBD calculator.

MKBDService uses these models for clean interface contracts:
- SummaryStatistics: Headline MKBD figures for dashboard display
- APIError: User-friendly warning / error representation
- PerformanceMetrics: Timing of the calculation run
- CalculationResponse: Result, corrected tables, summary and errors

Every model is a frozen dataclass; figures are carried as Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import CorrectionRecord, MKBDResult, SheetTable


STATUS_HEALTHY = "SEHAT"
STATUS_CRITICAL = "KRITIS"


# =============================================================================
# Headline figures
# =============================================================================


@dataclass(frozen=True)
class SummaryStatistics:
    """
    Headline figures of one MKBD calculation.

    Attributes:
        total_current_assets: Total Aset Lancar (VD51)
        total_liabilities: Total Liabilitas (VD52)
        total_equity: Total Ekuitas (VD52)
        total_ranking_liabilities: Sum of VD510 concentration charges
        working_capital: Total Modal Kerja
        haircut_sum: Total risk haircut deductions (VD59 Baris 33-92)
        adjusted_mkbd: MKBD Disesuaikan
        required_mkbd: Nilai MKBD yang diwajibkan
        surplus_deficit: Lebih/(Kurang) MKBD
        mkbd_ratio: Adjusted MKBD as percentage of required MKBD
        status: "SEHAT" when compliant, otherwise "KRITIS"
        ranking_item_count: Number of eligible VD510 rows
        correction_count: Number of overwritten cells
    """

    total_current_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_ranking_liabilities: Decimal
    working_capital: Decimal
    haircut_sum: Decimal
    adjusted_mkbd: Decimal
    required_mkbd: Decimal
    surplus_deficit: Decimal
    mkbd_ratio: Decimal = field(default_factory=lambda: Decimal("0"))
    status: Literal["SEHAT", "KRITIS"] = STATUS_CRITICAL
    ranking_item_count: int = 0
    correction_count: int = 0

    @property
    def is_compliant(self) -> bool:
        return self.status == STATUS_HEALTHY


# =============================================================================
# Warnings and errors
# =============================================================================


@dataclass(frozen=True)
class APIError:
    """
    A CalculationError rewritten for display.

    Message text and category names are the ones shown to the
    person reviewing the filing, not the engine wording.

    Attributes:
        code: Error code (e.g., "ROW001")
        message: Display message, with form and row context appended
        severity: "warning", "error" or "critical"
        category: Display name of the error category
        details: Additional context (form, row_position, field_name)
    """

    code: str
    message: str
    severity: Literal["warning", "error", "critical"]
    category: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code}] {self.severity.upper()}: {self.message}"


# =============================================================================
# Timing
# =============================================================================


@dataclass(frozen=True)
class PerformanceMetrics:
    """
    Wall-clock timing of one service call.

    Attributes:
        started_at: When the service call started
        completed_at: When the response was assembled
        duration_seconds: Elapsed seconds between the two
        table_count: Number of input tables
        row_count: Total number of input rows
    """

    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    table_count: int
    row_count: int = 0

    @property
    def rows_per_second(self) -> float:
        """Input rows processed per second."""
        if self.duration_seconds > 0:
            return self.row_count / self.duration_seconds
        return 0.0


# =============================================================================
# Response
# =============================================================================


@dataclass(frozen=True)
class CalculationResponse:
    """
    Response model for MKBD calculation results.

    Attributes:
        success: False when any critical error was reported
        result: Full MKBD result (None when the calculation failed)
        corrected_tables: Corrected table copies (empty unless corrections applied)
        summary: Headline figures
        errors: Warnings and errors encountered
        performance: Timing of the call
    """

    success: bool
    result: MKBDResult | None
    summary: SummaryStatistics
    corrected_tables: tuple[SheetTable, ...] = ()
    errors: list[APIError] = field(default_factory=list)
    performance: PerformanceMetrics | None = None

    @property
    def corrections(self) -> tuple[CorrectionRecord, ...]:
        """Overwritten cells, empty when the calculation failed."""
        return self.result.corrections if self.result is not None else ()

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def warning_count(self) -> int:
        return len([e for e in self.errors if e.severity == "warning"])

    @property
    def error_count(self) -> int:
        """Errors and critical errors; warnings are not counted."""
        return len([e for e in self.errors if e.severity != "warning"])
