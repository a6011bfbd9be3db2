"""
MKBD form lookup patterns.

Regulatory row and column identity is inferred from loosely formatted
text: headers and labels vary in spacing, casing, underscores and
language (Indonesian / English). This module keeps every such pattern in
one tagged table instead of inline regexes:

- FORM_NAME_PATTERNS: sheet name -> form role
- COLUMN_PATTERNS: column role -> header pattern
- FORM_VALUE_COLUMNS: which column role holds the figures of each form
- ROW_PATTERNS: row role -> (form, label pattern, preferred row numbers)

Row patterns are matched against normalised row text (see
engine.locator.row_text); column patterns against normalised headers.

Preferred row numbers follow the OJK MKBD form layout (VD59 Baris 12,
13/15/18/20, 102-104; VD51 Baris 100; VD52 Baris 164).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from mkbd_calc.domain.enums import BaseQuantity, ColumnRole, FormRole, RowRole


# Separators tolerated between tokens of a sheet name ("VD5-10", "vd5_10")
_SEP = r"[\s\-_.]*"


# =============================================================================
# FORM NAMES
# =============================================================================

FORM_NAME_PATTERNS: Mapping[FormRole, re.Pattern[str]] = MappingProxyType({
    FormRole.VD51: re.compile(rf"vd{_SEP}5{_SEP}1(?!\d)|formulir{_SEP}1(?!\d)", re.IGNORECASE),
    FormRole.VD52: re.compile(rf"vd{_SEP}5{_SEP}2(?!\d)|formulir{_SEP}2(?!\d)", re.IGNORECASE),
    FormRole.VD59: re.compile(rf"vd{_SEP}5{_SEP}9(?!\d)|formulir{_SEP}9(?!\d)", re.IGNORECASE),
    FormRole.VD510: re.compile(rf"vd{_SEP}5{_SEP}10(?!\d)|formulir{_SEP}10(?!\d)", re.IGNORECASE),
})


# =============================================================================
# COLUMNS
# =============================================================================

COLUMN_PATTERNS: Mapping[ColumnRole, re.Pattern[str]] = MappingProxyType({
    ColumnRole.BALANCE: re.compile(r"saldo|balance|jumlah|amount|nilai"),
    ColumnRole.TOTAL: re.compile(r"\btotal\b|jumlah|amount"),
    ColumnRole.INSTRUMENT_CODE: re.compile(
        r"kode\s*efek|kode\s*saham|instrument\s*code|security\s*code|stock\s*code|^kode$|^code$"
    ),
    ColumnRole.INSTRUMENT_NAME: re.compile(
        r"nama\s*efek|jenis\s*efek|nama\s*akun|instrument\s*name|security\s*name"
    ),
    # Own market value; must not pick up the pre-aggregated group column
    ColumnRole.MARKET_VALUE: re.compile(
        r"^(?!.*(grup|group)).*(nilai\s*pasar\s*wajar|nilai\s*pasar|market\s*value|fair\s*value)"
    ),
    ColumnRole.GROUP_MARKET_VALUE: re.compile(
        r"(grup|group).*(nilai|market|value)|(nilai|market|value).*(grup|group)"
    ),
    ColumnRole.ISSUER_GROUP: re.compile(r"grup\s*emiten|issuer\s*group|group\s*issuer|^grup$|^group$"),
    ColumnRole.RANKING_LIABILITY: re.compile(r"rang?king"),
})

# Column role holding the reported figures in each form
FORM_VALUE_COLUMNS: Mapping[FormRole, ColumnRole] = MappingProxyType({
    FormRole.VD51: ColumnRole.BALANCE,
    FormRole.VD52: ColumnRole.BALANCE,
    FormRole.VD59: ColumnRole.TOTAL,
    FormRole.VD510: ColumnRole.RANKING_LIABILITY,
})


# =============================================================================
# ROWS
# =============================================================================


@dataclass(frozen=True)
class RowPattern:
    """
    Tagged row identity: where a semantic row lives and how to find it.

    Attributes:
        role: Semantic row role
        form: Form the row belongs to
        pattern: Regex searched in the normalised row text
        preferred_positions: Expected 1-based row numbers, tried first
        description: Display label (used in audit records and exports)
    """

    role: RowRole
    form: FormRole
    pattern: re.Pattern[str]
    preferred_positions: tuple[int, ...] = ()
    description: str = ""

    @property
    def preferred_position(self) -> int | None:
        """First preferred row number, or None when the row floats."""
        return self.preferred_positions[0] if self.preferred_positions else None


def _row(
    role: RowRole,
    form: FormRole,
    pattern: str,
    preferred: tuple[int, ...] = (),
    description: str = "",
) -> RowPattern:
    return RowPattern(
        role=role,
        form=form,
        pattern=re.compile(pattern),
        preferred_positions=preferred,
        description=description,
    )


ROW_PATTERNS: Mapping[RowRole, RowPattern] = MappingProxyType({
    # Extraction rows
    RowRole.TOTAL_CURRENT_ASSETS: _row(
        RowRole.TOTAL_CURRENT_ASSETS, FormRole.VD51,
        r"total\s*(aset|asset|aktiva)\s*lancar|total\s*current\s*assets?",
        (100,), "Total Aset Lancar",
    ),
    RowRole.TOTAL_LIABILITIES: _row(
        RowRole.TOTAL_LIABILITIES, FormRole.VD52,
        r"total\s*(liabilitas|kewajiban)(?!\s*(dan|&|jangka))"
        r"|total\s*liabilit(y|ies)(?!\s*(and|&))",
        (164,), "Total Liabilitas",
    ),
    RowRole.TOTAL_EQUITY: _row(
        RowRole.TOTAL_EQUITY, FormRole.VD52,
        r"total\s*(ekuitas|modal\s*sendiri)|total\s*(equity|shareholders'?\s*equity)",
        (), "Total Ekuitas",
    ),
    RowRole.REQUIRED_MKBD: _row(
        RowRole.REQUIRED_MKBD, FormRole.VD59,
        r"mkbd\s*(yang\s*)?diwajibkan|required\s*mkbd|minimum\s*mkbd",
        (103,), "Nilai MKBD yang diwajibkan",
    ),
    RowRole.CASH_AND_EQUIVALENTS: _row(
        RowRole.CASH_AND_EQUIVALENTS, FormRole.VD51,
        r"kas\s*(dan|&)?\s*setara\s*kas|cash\s*(and|&)?\s*(cash\s*)?equivalents?",
        (), "Kas dan Setara Kas",
    ),
    RowRole.BANK_DEPOSITS: _row(
        RowRole.BANK_DEPOSITS, FormRole.VD51,
        r"deposito\s*bank|bank\s*deposits?",
        (), "Deposito Bank",
    ),
    RowRole.CLIENT_RECEIVABLES: _row(
        RowRole.CLIENT_RECEIVABLES, FormRole.VD51,
        r"piutang\s*nasabah|client\s*receivables?|receivables?\s*from\s*clients?",
        (), "Piutang Nasabah",
    ),
    RowRole.SECURITIES_PORTFOLIO: _row(
        RowRole.SECURITIES_PORTFOLIO, FormRole.VD51,
        r"portofolio\s*efek|securities\s*portfolio",
        (), "Portofolio Efek",
    ),
    RowRole.SUBORDINATED_DEBT: _row(
        RowRole.SUBORDINATED_DEBT, FormRole.VD52,
        r"utang\s*sub[\-\s]?ordinasi|subordinated\s*(debt|loans?)",
        (), "Utang Sub-ordinasi",
    ),
    RowRole.SHORT_TERM_DEBT: _row(
        RowRole.SHORT_TERM_DEBT, FormRole.VD52,
        r"utang\s*jangka\s*pendek|short[\-\s]?term\s*(debt|loans?|borrowings?)",
        (), "Utang Jangka Pendek",
    ),

    # VD59 correction targets
    RowRole.RANKING_LIABILITIES_TOTAL: _row(
        RowRole.RANKING_LIABILITIES_TOTAL, FormRole.VD59,
        r"rang?king\s*liabilit",
        (12,), "Total Ranking Liabilities",
    ),
    # Baris 13, 15, 18 and 20 carry the same figure by definition
    RowRole.WORKING_CAPITAL: _row(
        RowRole.WORKING_CAPITAL, FormRole.VD59,
        r"^(?!.*(disesuaikan|adjusted)).*(modal\s*kerja|working\s*capital)",
        (13, 15, 18, 20), "Total Modal Kerja",
    ),
    RowRole.ADJUSTED_MKBD: _row(
        RowRole.ADJUSTED_MKBD, FormRole.VD59,
        r"mkbd\s*(yang\s*)?disesuaikan|modal\s*kerja\s*bersih\s*disesuaikan"
        r"|adjusted\s*(net\s*)?working\s*capital|adjusted\s*mkbd",
        (102,), "MKBD Disesuaikan",
    ),
    RowRole.SURPLUS_DEFICIT: _row(
        RowRole.SURPLUS_DEFICIT, FormRole.VD59,
        r"lebih\s*/?\s*\(?\s*kurang|surplus|deficit|shortfall",
        (104,), "Lebih/(Kurang) MKBD",
    ),

    # VD510 summary row ("Total Portofolio")
    RowRole.PORTFOLIO_TOTAL: _row(
        RowRole.PORTFOLIO_TOTAL, FormRole.VD510,
        r"^(total|jumlah)\b",
        (), "Total Portofolio",
    ),
})


# Which row role each base quantity is read from
QUANTITY_ROWS: Mapping[BaseQuantity, RowRole] = MappingProxyType({
    BaseQuantity.TOTAL_CURRENT_ASSETS: RowRole.TOTAL_CURRENT_ASSETS,
    BaseQuantity.TOTAL_LIABILITIES: RowRole.TOTAL_LIABILITIES,
    BaseQuantity.TOTAL_EQUITY: RowRole.TOTAL_EQUITY,
    BaseQuantity.REQUIRED_MKBD: RowRole.REQUIRED_MKBD,
    BaseQuantity.CASH_AND_EQUIVALENTS: RowRole.CASH_AND_EQUIVALENTS,
    BaseQuantity.BANK_DEPOSITS: RowRole.BANK_DEPOSITS,
    BaseQuantity.CLIENT_RECEIVABLES: RowRole.CLIENT_RECEIVABLES,
    BaseQuantity.SECURITIES_PORTFOLIO: RowRole.SECURITIES_PORTFOLIO,
    BaseQuantity.SUBORDINATED_DEBT: RowRole.SUBORDINATED_DEBT,
    BaseQuantity.SHORT_TERM_DEBT: RowRole.SHORT_TERM_DEBT,
})


def get_row_pattern(role: RowRole) -> RowPattern:
    """Look up the default pattern for a row role."""
    return ROW_PATTERNS[role]
