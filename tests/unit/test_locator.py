"""Unit tests for the table, column and row locator.

Tests cover:
- Sheet name recognition per form
- Column header matching and fallbacks
- Preferred-row fast path, full scan and exclusions
- Row text / description helpers
"""

from __future__ import annotations

import pytest

from mkbd_calc.contracts.bundles import SheetTable
from mkbd_calc.data.tables.form_patterns import COLUMN_PATTERNS, ROW_PATTERNS
from mkbd_calc.domain.enums import ColumnFallback, ColumnRole, FormRole, RowRole
from mkbd_calc.engine.locator import (
    find_column,
    find_row,
    find_table,
    last_numeric_value,
    normalize_label,
    row_description,
    row_text,
)
from tests.fixtures.forms import build_vd52, build_vd59


def _table(name: str, columns: list[str] | None = None) -> SheetTable:
    return SheetTable(name=name, columns=columns or ["A"], rows=[])


# =============================================================================
# Tables
# =============================================================================


class TestFindTable:
    """Tests for sheet-name based form lookup."""

    @pytest.mark.parametrize(
        ("name", "role"),
        [
            ("VD5-1", FormRole.VD51),
            ("vd51", FormRole.VD51),
            ("VD5_2", FormRole.VD52),
            ("VD5.9 Perhitungan MKBD", FormRole.VD59),
            ("VD5-10", FormRole.VD510),
            ("vd510", FormRole.VD510),
            ("Formulir 9", FormRole.VD59),
        ],
    )
    def test_recognises_sheet_names(self, name: str, role: FormRole) -> None:
        """Common sheet name spellings should resolve to their form."""
        table = _table(name)
        assert find_table([table], role) is table

    def test_vd51_does_not_match_vd510(self) -> None:
        """VD5-10 must never be taken for VD5-1."""
        vd510 = _table("VD5-10")
        assert find_table([vd510], FormRole.VD51) is None

    def test_first_match_wins(self) -> None:
        """Duplicate forms resolve to the first table in upload order."""
        first = _table("VD5-9")
        second = _table("VD59 (copy)")
        assert find_table([first, second], FormRole.VD59) is first

    def test_missing_form(self) -> None:
        """An absent form should return None, not raise."""
        assert find_table([_table("Cover"), _table("VD5-1")], FormRole.VD52) is None


# =============================================================================
# Columns
# =============================================================================


class TestFindColumn:
    """Tests for header matching."""

    def test_normalises_header(self) -> None:
        """Underscores, dashes and casing should not matter."""
        table = _table("VD5-10", ["No", "KODE_EFEK", "Nilai-Pasar  Wajar"])
        assert find_column(table, COLUMN_PATTERNS[ColumnRole.INSTRUMENT_CODE]) == "KODE_EFEK"
        assert find_column(table, COLUMN_PATTERNS[ColumnRole.MARKET_VALUE]) == "Nilai-Pasar  Wajar"

    def test_market_value_skips_group_column(self) -> None:
        """The own market value pattern must not match the group column."""
        table = _table("VD5-10", ["Nilai Pasar Grup", "Nilai Pasar Wajar"])
        assert find_column(table, COLUMN_PATTERNS[ColumnRole.MARKET_VALUE]) == "Nilai Pasar Wajar"
        assert find_column(table, COLUMN_PATTERNS[ColumnRole.GROUP_MARKET_VALUE]) == "Nilai Pasar Grup"

    def test_string_pattern_accepted(self) -> None:
        """Plain string patterns should be compiled on the fly."""
        table = _table("X", ["Keterangan", "Total"])
        assert find_column(table, r"total") == "Total"

    def test_no_match_returns_none(self) -> None:
        """NONE fallback returns None when nothing matches."""
        table = _table("X", ["Keterangan", "Nilai"])
        assert find_column(table, COLUMN_PATTERNS[ColumnRole.TOTAL]) is None

    def test_first_fallback(self) -> None:
        """FIRST fallback returns the first column."""
        table = _table("X", ["Keterangan", "Nilai"])
        result = find_column(table, r"zzz", fallback=ColumnFallback.FIRST)
        assert result == "Keterangan"

    def test_first_fallback_on_empty_columns(self) -> None:
        """FIRST fallback on a table without columns still returns None."""
        table = SheetTable(name="X", columns=[], rows=[])
        assert find_column(table, r"zzz", fallback=ColumnFallback.FIRST) is None


# =============================================================================
# Rows
# =============================================================================


class TestFindRow:
    """Tests for labelled row lookup."""

    def test_preferred_position_fast_path(self) -> None:
        """The preferred row is used when it carries the label."""
        vd59 = build_vd59()
        pattern = ROW_PATTERNS[RowRole.ADJUSTED_MKBD]
        match = find_row(vd59, pattern.pattern, 102)

        assert match is not None
        assert match.position == 102
        assert match.by_preferred_position is True

    def test_scan_when_preferred_row_drifted(self) -> None:
        """A shifted form is found by scanning."""
        vd59 = build_vd59(shift=2)
        pattern = ROW_PATTERNS[RowRole.ADJUSTED_MKBD]
        match = find_row(vd59, pattern.pattern, 102)

        assert match is not None
        assert match.position == 104
        assert match.by_preferred_position is False

    def test_preferred_position_out_of_range(self) -> None:
        """A preferred row beyond the table end falls back to scanning."""
        vd59 = build_vd59()
        match = find_row(vd59, ROW_PATTERNS[RowRole.RANKING_LIABILITIES_TOTAL].pattern, 500)
        assert match is not None
        assert match.position == 12

    def test_exclude_skips_claimed_rows(self) -> None:
        """Excluded positions are skipped on both paths."""
        vd59 = build_vd59()
        pattern = ROW_PATTERNS[RowRole.WORKING_CAPITAL].pattern

        match = find_row(vd59, pattern, 13, exclude={13})
        assert match is not None
        assert match.position == 15

    def test_working_capital_pattern_ignores_adjusted_row(self) -> None:
        """MKBD Disesuaikan must not be taken for a working capital row."""
        vd59 = build_vd59()
        pattern = ROW_PATTERNS[RowRole.WORKING_CAPITAL].pattern
        match = find_row(vd59, pattern, None, exclude={13, 15, 18, 20})
        assert match is None

    def test_not_found(self) -> None:
        """A missing label returns None."""
        vd52 = build_vd52(include_equity_row=False)
        assert find_row(vd52, ROW_PATTERNS[RowRole.TOTAL_EQUITY].pattern) is None

    def test_total_liabilities_ignores_combined_total(self) -> None:
        """'Total Liabilitas dan Ekuitas' is not 'Total Liabilitas'."""
        vd52 = build_vd52()
        pattern = ROW_PATTERNS[RowRole.TOTAL_LIABILITIES].pattern
        match = find_row(vd52, pattern, 172)
        assert match is not None
        assert match.position == 164


# =============================================================================
# Helpers
# =============================================================================


class TestRowHelpers:
    """Tests for row text helpers."""

    def test_normalize_label(self) -> None:
        assert normalize_label("  Nilai_Pasar--Wajar ") == "nilai pasar wajar"

    def test_row_text_ignores_numbers(self) -> None:
        """Only string cells contribute to the row text."""
        row = {"No": 102, "Keterangan": "MKBD_Disesuaikan", "Total": 1.0}
        assert row_text(row) == "mkbd disesuaikan"

    def test_row_text_exclude_columns(self) -> None:
        row = {"Keterangan": "Modal Kerja", "Catatan": "Lihat lampiran"}
        assert row_text(row, exclude_columns=("Catatan",)) == "modal kerja"

    def test_row_description_keeps_case_and_drops_numeric_text(self) -> None:
        """Descriptions keep the original casing and skip numeric strings."""
        row = {"Baris": "102", "Keterangan": "MKBD Disesuaikan", "Total": "1.000"}
        assert row_description(row) == "MKBD Disesuaikan"

    def test_last_numeric_value(self) -> None:
        """The right-most numeric cell wins, blanks are skipped."""
        row = {"No": 5, "Label": "Kas", "Saldo": "1.500", "Catatan": "  "}
        assert last_numeric_value(row) == 1500.0

    def test_last_numeric_value_none(self) -> None:
        assert last_numeric_value({"Label": "Kas", "Saldo": None}) is None
