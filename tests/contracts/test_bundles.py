"""Tests for the data transfer bundles.

Tests SheetTable access and cloning, the frozen pass outputs and the
derived properties of MKBDResult.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import polars as pl
import pytest

from mkbd_calc.contracts.bundles import (
    CalculationStep,
    CorrectionRecord,
    CorrectionResultBundle,
    ExtractedBaseValues,
    ExtractedValue,
    MKBDResult,
    SheetTable,
)
from mkbd_calc.domain.enums import BaseQuantity


def _table() -> SheetTable:
    return SheetTable(
        name="VD5-9",
        columns=["Baris", "Keterangan", "Total"],
        rows=[
            {"Baris": 1, "Keterangan": "Kas", "Total": 1.0},
            {"Baris": 2, "Keterangan": "Bank", "Total": "2.500"},
        ],
    )


def _result(**overrides) -> MKBDResult:
    values = dict(
        extracted=ExtractedBaseValues(values={}),
        total_current_assets=0.0,
        total_liabilities=0.0,
        total_equity=0.0,
        total_ranking_liabilities=0.0,
        working_capital=0.0,
        net_working_capital=0.0,
        haircut_sum=0.0,
        adjusted_mkbd=30.0,
        required_mkbd=25.0,
        surplus_deficit=5.0,
    )
    values.update(overrides)
    return MKBDResult(**values)


class TestSheetTable:
    """Tests for the mutable table contract."""

    def test_duplicate_columns_rejected(self):
        with pytest.raises(ValueError, match="Duplicate column"):
            SheetTable(name="X", columns=["A", "A"])

    def test_cell_access_is_one_based(self):
        table = _table()

        assert table.cell(1, "Keterangan") == "Kas"
        assert table.cell(2, "Total") == "2.500"
        assert table.cell(0, "Total") is None
        assert table.cell(3, "Total") is None
        assert table.row_count == 2

    def test_iteration_yields_positions(self):
        assert [position for position, _ in _table()] == [1, 2]

    def test_set_cell(self):
        table = _table()
        table.set_cell(2, "Total", 9.0)
        assert table.cell(2, "Total") == 9.0

    def test_set_cell_errors(self):
        table = _table()
        with pytest.raises(IndexError):
            table.set_cell(5, "Total", 1.0)
        with pytest.raises(KeyError):
            table.set_cell(1, "Nope", 1.0)

    def test_copy_is_deep(self):
        table = _table()
        clone = table.copy()
        clone.set_cell(1, "Total", 100.0)

        assert table.cell(1, "Total") == 1.0
        assert clone == SheetTable(name="VD5-9", columns=table.columns, rows=clone.rows)

    def test_frame_round_trip(self):
        frame = pl.DataFrame({"No": [1, 2], "Nama": ["Kas", "Bank"]})
        table = SheetTable.from_frame("VD5-1", frame)

        assert table.columns == ["No", "Nama"]
        assert table.cell(2, "Nama") == "Bank"

    def test_to_frame_types(self):
        """Numeric columns become Float64; columns holding text become String."""
        frame = _table().to_frame()

        assert frame.schema["Baris"] == pl.Float64
        assert frame.schema["Total"] == pl.String
        assert frame["Total"].to_list() == ["1.0", "2.500"]


class TestExtractedBaseValues:
    """Tests for the extraction output."""

    def test_lookup(self):
        extracted = ExtractedBaseValues(values={
            BaseQuantity.TOTAL_EQUITY: ExtractedValue(BaseQuantity.TOTAL_EQUITY, 2.0, "VD52", "x"),
        })

        assert extracted.total_equity == 2.0
        assert extracted.total_liabilities == 0.0
        assert extracted.get(BaseQuantity.REQUIRED_MKBD, 7.0) == 7.0
        assert BaseQuantity.TOTAL_EQUITY in extracted
        assert extracted[BaseQuantity.TOTAL_EQUITY].source == "VD52"

    def test_values_read_only(self):
        extracted = ExtractedBaseValues(values={})
        with pytest.raises(TypeError):
            extracted.values[BaseQuantity.TOTAL_EQUITY] = None  # type: ignore[index]


class TestCalculationStep:
    """Tests for CalculationStep."""

    def test_inputs_read_only(self):
        step = CalculationStep("id", "name", "A - B", {"A": 1.0}, 1.0, "Calculated")
        with pytest.raises(TypeError):
            step.input_values["B"] = 2.0  # type: ignore[index]
        assert step.editable is False


class TestMKBDResult:
    """Tests for MKBDResult derived properties."""

    def test_compliance(self):
        assert _result().is_compliant is True
        assert _result(surplus_deficit=0.0).is_compliant is True
        assert _result(surplus_deficit=-0.01).is_compliant is False

    def test_ratio(self):
        assert _result().mkbd_ratio == pytest.approx(120.0)
        assert _result(required_mkbd=0.0).mkbd_ratio == 0.0

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            _result().adjusted_mkbd = 1.0  # type: ignore[misc]


class TestCorrectionBundles:
    """Tests for CorrectionRecord and CorrectionResultBundle."""

    def test_changed(self):
        record = CorrectionRecord("VD5-9", 12, "Total Ranking Liabilities", "x", "Total", 1.0, 1.0, "f")
        assert record.changed is False

    def test_table_lookup(self):
        table = _table()
        bundle = CorrectionResultBundle(tables=(table,), corrections=(), result=_result())

        assert bundle.table("VD5-9") is table
        assert bundle.table("VD5-10") is None
