"""
Shared fixtures for MKBD acceptance tests.

Provides the reference filing (see tests.fixtures.forms) and its
calculated result and corrected tables.
"""

from __future__ import annotations

import pytest

from mkbd_calc.contracts.bundles import CorrectionResultBundle, MKBDResult, SheetTable
from mkbd_calc.engine.pipeline import apply_mkbd_corrections, calculate_mkbd
from tests.fixtures.forms import standard_tables


# =============================================================================
# Reference filing
# =============================================================================


@pytest.fixture
def reference_tables() -> list[SheetTable]:
    """Fresh copy of the reference filing per test."""
    return standard_tables()


@pytest.fixture
def reference_result(reference_tables: list[SheetTable]) -> MKBDResult:
    return calculate_mkbd(reference_tables)


@pytest.fixture
def reference_corrections(reference_tables: list[SheetTable]) -> CorrectionResultBundle:
    return apply_mkbd_corrections(reference_tables)
