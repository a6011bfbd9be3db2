"""
MKBD Calculator API Module.

Public API for MKBD calculations providing:
- MKBDService: Main service facade for calculations
- Response models: Clean interface contracts
- ResultFormatter: Export frames for the output workbook

Usage:
    from mkbd_calc.api import MKBDService

    service = MKBDService()
    response = service.calculate(tables)

    if response.success:
        print(f"MKBD Disesuaikan: {response.summary.adjusted_mkbd:,.0f}")
        print(f"Status: {response.summary.status}")
    for error in response.errors:
        print(f"{error.code}: {error.message}")
"""

from mkbd_calc.api.formatters import ResultFormatter, compute_summary
from mkbd_calc.api.models import (
    APIError,
    CalculationResponse,
    PerformanceMetrics,
    SummaryStatistics,
)
from mkbd_calc.api.service import (
    MKBDService,
    create_service,
    quick_calculate,
)

__all__ = [
    # Service
    "MKBDService",
    "create_service",
    "quick_calculate",
    # Response models
    "CalculationResponse",
    "SummaryStatistics",
    "APIError",
    "PerformanceMetrics",
    # Formatting
    "ResultFormatter",
    "compute_summary",
]
