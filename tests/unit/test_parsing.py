"""Unit tests for the cell value parser.

Tests cover:
- Numbers and non-numbers
- Indonesian and English separator conventions
- Currency markers, accounting negatives and nil markers
- Series parsing
"""

from __future__ import annotations

import math

import polars as pl
import pytest

from mkbd_calc.engine.parsing import (
    parse_numeric_series,
    parse_numeric_value,
    parse_optional_numeric,
)


class TestNumericInput:
    """Tests for values that are already numbers."""

    def test_int_returned_as_float(self) -> None:
        """Integers should be returned unchanged as floats."""
        assert parse_numeric_value(1500) == 1500.0
        assert isinstance(parse_numeric_value(1500), float)

    def test_float_is_idempotent(self) -> None:
        """Parsing a parsed value should return it unchanged."""
        value = parse_numeric_value("1.234.567,89")
        assert parse_numeric_value(value) == value

    def test_nan_is_zero(self) -> None:
        """NaN cells should parse to 0."""
        assert parse_numeric_value(math.nan) == 0.0
        assert parse_optional_numeric(math.nan) is None

    def test_bool_is_not_numeric(self) -> None:
        """Booleans should not be treated as 1/0."""
        assert parse_numeric_value(True) == 0.0
        assert parse_optional_numeric(False) is None


class TestBlankAndGarbage:
    """Tests for absent and non-numeric cells."""

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "Total Aset", [1, 2]])
    def test_defaults_to_zero(self, value: object) -> None:
        """Absent or non-numeric input should yield 0."""
        assert parse_numeric_value(value) == 0.0

    @pytest.mark.parametrize("value", [None, "", "n/a"])
    def test_optional_returns_none(self, value: object) -> None:
        """The optional parser should distinguish blank from zero."""
        assert parse_optional_numeric(value) is None

    def test_nil_dash_is_zero(self) -> None:
        """A lone dash is the spreadsheet nil and means 0."""
        assert parse_optional_numeric("-") == 0.0


class TestSeparators:
    """Tests for thousands and decimal separators."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.234.567,89", 1_234_567.89),
            ("1,234,567.89", 1_234_567.89),
            ("25.000.000.000", 25_000_000_000.0),
            ("25,000,000,000", 25_000_000_000.0),
            ("1.500", 1500.0),
            ("1,500", 1500.0),
            ("0.125", 0.125),
            ("12,5", 12.5),
            ("3.75", 3.75),
            ("1e9", 1_000_000_000.0),
        ],
    )
    def test_parses(self, text: str, expected: float) -> None:
        """Separator conventions should resolve to the intended number."""
        assert parse_numeric_value(text) == pytest.approx(expected)


class TestDecorations:
    """Tests for currency markers, signs and whitespace."""

    def test_rupiah_prefix(self) -> None:
        """Rp prefixes should be stripped."""
        assert parse_numeric_value("Rp 1.000.000") == 1_000_000.0
        assert parse_numeric_value("Rp. 2.500") == 2500.0

    def test_idr_suffix(self) -> None:
        """Currency codes after the number should be stripped."""
        assert parse_numeric_value("1.000 IDR") == 1000.0

    def test_nbsp(self) -> None:
        """Non-breaking spaces should be ignored."""
        assert parse_numeric_value(" 1.000.000 ") == 1_000_000.0

    def test_accounting_negative(self) -> None:
        """Parenthesised amounts are negative."""
        assert parse_numeric_value("(1.000)") == -1000.0

    def test_unicode_minus(self) -> None:
        """Unicode minus signs are accepted."""
        assert parse_numeric_value("−1.000") == -1000.0

    def test_plain_minus(self) -> None:
        """Leading minus is negative."""
        assert parse_numeric_value("-2.500.000") == -2_500_000.0

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Rp 1.000.000,-", 1_000_000.0),
            ("1.000,-", 1000.0),
            ("2,500.-", 2500.0),
            ("(1.000.000,-)", -1_000_000.0),
            ("0,-", 0.0),
        ],
    )
    def test_dash_decimals(self, text: str, expected: float) -> None:
        """A trailing ",-" means no decimals, not an unparseable cell."""
        assert parse_numeric_value(text) == expected


class TestExponents:
    """Tests for exponent notation in text cells."""

    def test_finite_exponent(self) -> None:
        assert parse_numeric_value("1.5e3") == 1500.0

    @pytest.mark.parametrize("text", ["1e999", "-1e999"])
    def test_overflow_holds_no_number(self, text: str) -> None:
        """Exponents overflowing to infinity must not leak into totals."""
        assert parse_optional_numeric(text) is None
        assert parse_numeric_value(text) == 0.0


class TestSeries:
    """Tests for parse_numeric_series."""

    def test_numeric_series_cast(self) -> None:
        """Numeric series should be cast to Float64 keeping nulls."""
        series = pl.Series("v", [1, None, 3])
        result = parse_numeric_series(series)
        assert result.dtype == pl.Float64
        assert result.to_list() == [1.0, None, 3.0]

    def test_string_series_parsed(self) -> None:
        """String series should be parsed element-wise."""
        series = pl.Series("v", ["1.000", "", "abc", "(500)"])
        result = parse_numeric_series(series)
        assert result.to_list() == [1000.0, None, None, -500.0]
        assert result.name == "v"
