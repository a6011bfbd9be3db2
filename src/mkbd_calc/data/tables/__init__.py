"""
MKBD regulatory lookup tables.

Static tables describing the OJK MKBD forms: how sheets, columns and
rows are recognised, and the default formula definitions.

Modules:
    form_patterns: Sheet-name, column and row patterns with preferred row numbers
    mkbd_formulas: Default formula definitions (working capital, ranking, MKBD)
"""

from .form_patterns import (
    COLUMN_PATTERNS,
    FORM_NAME_PATTERNS,
    FORM_VALUE_COLUMNS,
    QUANTITY_ROWS,
    ROW_PATTERNS,
    RowPattern,
    get_row_pattern,
)
from .mkbd_formulas import (
    DEFAULT_FORMULAS,
    FORMULA_ADJUSTED_MKBD,
    FORMULA_RANKING_PER_ITEM,
    FORMULA_SURPLUS_DEFICIT,
    FORMULA_WORKING_CAPITAL,
    FormulaDefinition,
    get_default_formulas,
)

__all__ = [
    "COLUMN_PATTERNS",
    "FORM_NAME_PATTERNS",
    "FORM_VALUE_COLUMNS",
    "QUANTITY_ROWS",
    "ROW_PATTERNS",
    "RowPattern",
    "get_row_pattern",
    "DEFAULT_FORMULAS",
    "FORMULA_ADJUSTED_MKBD",
    "FORMULA_RANKING_PER_ITEM",
    "FORMULA_SURPLUS_DEFICIT",
    "FORMULA_WORKING_CAPITAL",
    "FormulaDefinition",
    "get_default_formulas",
]
