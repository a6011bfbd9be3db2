"""Unit tests for the API formatters module.

Tests cover:
- ResultFormatter response building
- Export frames (summary, corrections, ranking, steps)
- compute_summary
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import polars as pl
import pytest

from mkbd_calc.api.errors import create_calculation_failure
from mkbd_calc.api.formatters import ResultFormatter, compute_summary
from mkbd_calc.api.models import STATUS_HEALTHY
from mkbd_calc.engine.pipeline import calculate_mkbd
from tests.fixtures.forms import build_vd51, build_vd52, standard_tables


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def formatter() -> ResultFormatter:
    return ResultFormatter()


@pytest.fixture
def result():
    return calculate_mkbd(standard_tables())


# =============================================================================
# Responses
# =============================================================================


class TestFormatResponse:
    """Tests for ResultFormatter.format_response."""

    def test_success_response(self, formatter: ResultFormatter, result) -> None:
        tables = standard_tables()
        response = formatter.format_response(result, (), tables, datetime.now())

        assert response.success is True
        assert response.result is result
        assert response.summary.correction_count == 10
        assert response.summary.ranking_item_count == 2
        assert response.performance is not None
        assert response.performance.table_count == 4

    def test_warnings_converted(self, formatter: ResultFormatter) -> None:
        result = calculate_mkbd([build_vd51(), build_vd52()])
        response = formatter.format_response(result, (), [], datetime.now())

        assert [e.code for e in response.errors] == ["TBL001", "TBL001", "TBL001"]
        assert response.errors[0].category == "Missing Form"

    def test_error_response(self, formatter: ResultFormatter) -> None:
        errors = [create_calculation_failure("boom")]
        response = formatter.format_error_response(errors, [], datetime.now())

        assert response.success is False
        assert response.result is None
        assert response.summary.total_equity == Decimal("0")
        assert response.error_count == 1


# =============================================================================
# Summary
# =============================================================================


class TestSummary:
    """Tests for compute_summary."""

    def test_values(self, result) -> None:
        summary = compute_summary(result)

        assert summary.total_equity == Decimal("2000000000.0")
        assert summary.total_ranking_liabilities == Decimal("600000000.0")
        assert summary.working_capital == Decimal("39400000000.0")
        assert summary.haircut_sum == Decimal("5000000000.0")
        assert summary.required_mkbd == Decimal("25000000000.0")
        assert summary.mkbd_ratio == Decimal(str(result.mkbd_ratio))
        assert summary.status == STATUS_HEALTHY
        assert summary.is_compliant is True


# =============================================================================
# Export frames
# =============================================================================


class TestExportFrames:
    """Tests for the frames written to the output workbook."""

    def test_summary_frame_sections(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.summary_frame(result)

        assert frame.columns == ["section", "label", "value", "text"]
        sections = frame["section"].unique(maintain_order=True).to_list()
        assert sections == [
            "SUMBER DATA",
            "HASIL KALKULASI VD510",
            "HASIL KALKULASI VD59",
            "HASIL MKBD",
            "FORMULA YANG DIGUNAKAN",
        ]

    def test_summary_frame_values(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.summary_frame(result)

        def value(label: str) -> float:
            return frame.filter(pl.col("label") == label)["value"].item()

        assert value("Total Ekuitas (VD52)") == pytest.approx(2_000_000_000)
        assert value("Total Ranking Liabilities") == pytest.approx(600_000_000)
        assert value("MKBD Disesuaikan") == pytest.approx(34_400_000_000)
        assert value("Lebih/(Kurang) MKBD") == pytest.approx(9_400_000_000)
        status = frame.filter(pl.col("label") == "Status")["text"].item()
        assert status == "SEHAT"

    def test_summary_frame_vd59_rows(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.summary_frame(result).filter(pl.col("section") == "HASIL KALKULASI VD59")

        assert frame.height == 7
        assert frame["label"][0] == "Baris 12 - Total Ranking Liabilities"
        assert frame["label"][5] == "Baris 102 - MKBD Disesuaikan"

    def test_summary_frame_formulas(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.summary_frame(result).filter(pl.col("section") == "FORMULA YANG DIGUNAKAN")

        assert frame.height == 4
        assert frame["text"][3] == "MKBD_DISESUAIKAN - MKBD_DIWAJIBKAN"

    def test_summary_frame_labels_unique(self, formatter: ResultFormatter, result) -> None:
        """Result rows and formula rows never share a label."""
        frame = formatter.summary_frame(result)

        assert frame["label"].n_unique() == frame.height
        formulas = frame.filter(pl.col("section") == "FORMULA YANG DIGUNAKAN")
        assert "Formula: MKBD Disesuaikan" in formulas["label"].to_list()

    def test_summary_frame_lists_overridden_formula(self, formatter: ResultFormatter) -> None:
        """The formula section shows the expressions the run actually used."""
        overrides = {
            "modal_kerja": {
                "calculate": lambda i: i["TOTAL_ASET_LANCAR"] - i["TOTAL_LIABILITAS"],
                "expression": "TOTAL_ASET_LANCAR - TOTAL_LIABILITAS",
            },
        }
        result = calculate_mkbd(standard_tables(), formula_overrides=overrides)

        frame = formatter.summary_frame(result)
        text = frame.filter(pl.col("label") == "Formula: Total Modal Kerja")["text"].item()

        assert text == "TOTAL_ASET_LANCAR - TOTAL_LIABILITAS"
        used = next(f for f in result.formulas if f.id == "modal_kerja")
        assert used.expression == text

    def test_corrections_frame(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.corrections_frame(result)

        assert frame.height == 10
        assert "difference" in frame.columns
        first = frame.row(0, named=True)
        assert first["row_position"] == 12
        assert first["difference"] == pytest.approx(600_000_000 - 1)

    def test_ranking_frame(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.ranking_frame(result)

        assert frame["instrument_code"].to_list() == ["BBCA", "TLKM"]
        assert frame["group_market_value_display"].to_list() == ["1.00B", "300.00M"]
        assert frame["charge_display"].to_list() == ["600000000", "0"]
        assert frame["percent_display"].to_list() == ["50.0%", "15.0%"]

    def test_steps_frame(self, formatter: ResultFormatter, result) -> None:
        frame = formatter.steps_frame(result)

        assert frame.height == len(result.calculation_steps)
        assert frame.filter(pl.col("id") == "pass3_mkbd_disesuaikan")["result"].item() == pytest.approx(
            34_400_000_000
        )

    def test_empty_frames(self, formatter: ResultFormatter) -> None:
        """A result without VD510 rows still yields typed, empty frames."""
        result = calculate_mkbd([])

        assert formatter.ranking_frame(result).height == 0
        assert formatter.corrections_frame(result).height == 0
        assert formatter.ranking_frame(result).schema["charge"] == pl.Float64
