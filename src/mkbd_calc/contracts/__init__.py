"""
Contracts module for MKBD calculator.

Provides the data transfer objects, configuration and error contracts
shared by the calculation passes. This module enables:
- Isolated unit testing of each pass
- Clear data flow boundaries between passes
- Explicit, per-call configuration

Submodules:
- bundles: SheetTable and the pass output dataclasses
- config: MKBDConfig
- errors: CalculationError and warning factories
- protocols: Protocol definitions for the calculation passes
"""

# Configuration contracts
from mkbd_calc.contracts.config import MKBDConfig

# Error handling contracts
from mkbd_calc.contracts.errors import (
    ERROR_COLUMN_NOT_FOUND,
    ERROR_CORRECTION_SKIPPED,
    ERROR_NON_POSITIVE_EQUITY,
    ERROR_ROW_NOT_FOUND,
    ERROR_TABLE_NOT_FOUND,
    ERROR_UNKNOWN_FORMULA,
    CalculationError,
    column_not_found_warning,
    correction_skipped_warning,
    non_positive_equity_warning,
    row_not_found_warning,
    table_not_found_warning,
    unknown_formula_warning,
)

# Protocol contracts
from mkbd_calc.contracts.protocols import (
    CorrectionPassProtocol,
    ExtractorProtocol,
    RankingCalculatorProtocol,
)

# Data bundle contracts
from mkbd_calc.contracts.bundles import (
    CalculationStep,
    CorrectionPlan,
    CorrectionRecord,
    CorrectionResultBundle,
    ExtractedBaseValues,
    ExtractedValue,
    MKBDResult,
    RankingLiabilityItem,
    RankingResultBundle,
    SheetTable,
)

__all__ = [
    # Configuration
    "MKBDConfig",
    # Errors
    "CalculationError",
    "column_not_found_warning",
    "correction_skipped_warning",
    "non_positive_equity_warning",
    "row_not_found_warning",
    "table_not_found_warning",
    "unknown_formula_warning",
    # Error codes
    "ERROR_COLUMN_NOT_FOUND",
    "ERROR_CORRECTION_SKIPPED",
    "ERROR_NON_POSITIVE_EQUITY",
    "ERROR_ROW_NOT_FOUND",
    "ERROR_TABLE_NOT_FOUND",
    "ERROR_UNKNOWN_FORMULA",
    # Bundles
    "CalculationStep",
    "CorrectionPlan",
    "CorrectionRecord",
    "CorrectionResultBundle",
    "ExtractedBaseValues",
    "ExtractedValue",
    "MKBDResult",
    "RankingLiabilityItem",
    "RankingResultBundle",
    "SheetTable",
    # Protocols
    "CorrectionPassProtocol",
    "ExtractorProtocol",
    "RankingCalculatorProtocol",
]
