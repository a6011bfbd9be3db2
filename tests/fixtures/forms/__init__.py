"""
MKBD form test fixtures module.

This module provides builders for realistic VD51, VD52, VD59 and VD510
tables, laid out with the regulatory row numbers the engine expects.
"""

from .builders import (
    build_vd51,
    build_vd52,
    build_vd59,
    build_vd510,
    standard_tables,
    vd510_item,
)

__all__ = [
    "build_vd51",
    "build_vd52",
    "build_vd59",
    "build_vd510",
    "standard_tables",
    "vd510_item",
]
