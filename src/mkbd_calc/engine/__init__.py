"""
MKBD calculation engine components.

This package contains the production implementations of the calculation
passes:

    BaseValueExtractor -> RankingLiabilitiesCalculator -> CorrectionPass

Each pass implements a protocol from mkbd_calc.contracts.protocols.

Modules:
    parsing: Cell value parser (Indonesian / English number formats)
    locator: Table, column and row lookup by pattern and preferred row
    extractor: Base value extraction (VD51, VD52, VD59)
    ranking: VD510 ranking liabilities
    corrector: Working capital / adjusted MKBD recomputation and overwrites
    pipeline: Pipeline orchestration

Polars Namespaces:
    All namespaces are registered when their parent modules are imported.
    - expr.audit / lf.audit: Audit trail formatting
"""

# Import namespace modules to register namespaces on module load
import mkbd_calc.engine.audit_namespace  # noqa: F401

from .audit_namespace import AuditExpr, AuditLazyFrame, format_short_number
from .corrector import CorrectionPass, create_correction_pass
from .extractor import BaseValueExtractor, create_base_value_extractor
from .locator import RowMatch, find_column, find_row, find_table, last_numeric_value, row_text
from .parsing import parse_numeric_series, parse_numeric_value, parse_optional_numeric
from .pipeline import MKBDPipeline, apply_mkbd_corrections, calculate_mkbd, create_pipeline
from .ranking import RankingLiabilitiesCalculator, create_ranking_calculator

__all__ = [
    "BaseValueExtractor",
    "create_base_value_extractor",
    "RankingLiabilitiesCalculator",
    "create_ranking_calculator",
    "CorrectionPass",
    "create_correction_pass",
    "MKBDPipeline",
    "create_pipeline",
    "calculate_mkbd",
    "apply_mkbd_corrections",
    # Locator
    "RowMatch",
    "find_column",
    "find_row",
    "find_table",
    "last_numeric_value",
    "row_text",
    # Parsing
    "parse_numeric_series",
    "parse_numeric_value",
    "parse_optional_numeric",
    # Namespace classes
    "AuditExpr",
    "AuditLazyFrame",
    "format_short_number",
]
