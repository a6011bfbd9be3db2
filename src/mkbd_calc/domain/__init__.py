"""
Domain module for MKBD calculator.

Contains core domain enumerations describing the regulatory forms and the
semantic rows/columns located inside them.
"""

from mkbd_calc.domain.enums import (
    BaseQuantity,
    ColumnFallback,
    ColumnRole,
    ErrorCategory,
    ErrorSeverity,
    FormRole,
    RowRole,
)

__all__ = [
    "BaseQuantity",
    "ColumnFallback",
    "ColumnRole",
    "ErrorCategory",
    "ErrorSeverity",
    "FormRole",
    "RowRole",
]
