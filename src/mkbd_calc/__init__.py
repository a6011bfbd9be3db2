"""
MKBD Calculator.

Computes MKBD (Modal Kerja Bersih Disesuaikan, Adjusted Net Working
Capital) for an Indonesian securities broker from the VD51, VD52, VD59
and VD510 report forms, and blind-overwrites the recomputed cells in
corrected copies of those forms with a full audit log.

Basic usage:
    >>> from mkbd_calc.engine.pipeline import calculate_mkbd, apply_mkbd_corrections
    >>> from mkbd_calc.contracts.bundles import SheetTable
    >>>
    >>> result = calculate_mkbd(tables)
    >>> result.adjusted_mkbd, result.surplus_deficit
    >>> corrected = apply_mkbd_corrections(tables)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
