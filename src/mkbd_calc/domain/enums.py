"""
Domain enums for MKBD calculator.

Defines core enumerations used throughout the calculation pipeline:
- FormRole: Regulatory MKBD forms (VD51, VD52, VD59, VD510)
- BaseQuantity: Figures pulled out of the forms by the extraction pass
- RowRole: Semantic rows inside a form (targets of lookup and correction)
- ColumnRole: Semantic columns inside a form
- ErrorSeverity / ErrorCategory: Classification of calculation warnings

MKBD (Modal Kerja Bersih Disesuaikan) is the Adjusted Net Working Capital
figure an Indonesian securities broker reports to the regulator.
"""

from enum import Enum


class FormRole(Enum):
    """
    Regulatory forms of the MKBD report.

    VD51: Aset (statement of assets)
    VD52: Liabilitas dan Ekuitas (liabilities and equity)
    VD59: Perhitungan MKBD (the MKBD computation itself)
    VD510: Ranking Liabilities (concentration of securities by issuer group)
    """

    VD51 = "VD51"
    VD52 = "VD52"
    VD59 = "VD59"
    VD510 = "VD510"


class BaseQuantity(Enum):
    """
    Base figures extracted from the source forms.

    The first four are primary inputs of the MKBD chain. The remaining
    ones are informational and never feed a formula.
    """

    TOTAL_CURRENT_ASSETS = "TOTAL_ASET_LANCAR"
    TOTAL_LIABILITIES = "TOTAL_LIABILITAS"
    TOTAL_EQUITY = "TOTAL_EKUITAS"
    REQUIRED_MKBD = "MKBD_DIWAJIBKAN"

    # Supplementary figures (VD51)
    CASH_AND_EQUIVALENTS = "KAS_SETARA_KAS"
    BANK_DEPOSITS = "DEPOSITO_BANK"
    CLIENT_RECEIVABLES = "PIUTANG_NASABAH"
    SECURITIES_PORTFOLIO = "PORTOFOLIO_EFEK"

    # Supplementary figures (VD52)
    SUBORDINATED_DEBT = "UTANG_SUB_ORDINASI"
    SHORT_TERM_DEBT = "UTANG_JANGKA_PENDEK"

    @property
    def is_primary(self) -> bool:
        """Whether the quantity is an input of the MKBD formulas."""
        return self in _PRIMARY_QUANTITIES


_PRIMARY_QUANTITIES = frozenset({
    BaseQuantity.TOTAL_CURRENT_ASSETS,
    BaseQuantity.TOTAL_LIABILITIES,
    BaseQuantity.TOTAL_EQUITY,
    BaseQuantity.REQUIRED_MKBD,
})


class RowRole(Enum):
    """
    Semantic rows located by label pattern and preferred row number.

    Extraction rows live in VD51/VD52/VD59; correction targets live in VD59
    (plus the summary row of VD510).
    """

    TOTAL_CURRENT_ASSETS = "total_current_assets"
    TOTAL_LIABILITIES = "total_liabilities"
    TOTAL_EQUITY = "total_equity"
    REQUIRED_MKBD = "required_mkbd"
    CASH_AND_EQUIVALENTS = "cash_and_equivalents"
    BANK_DEPOSITS = "bank_deposits"
    CLIENT_RECEIVABLES = "client_receivables"
    SECURITIES_PORTFOLIO = "securities_portfolio"
    SUBORDINATED_DEBT = "subordinated_debt"
    SHORT_TERM_DEBT = "short_term_debt"

    RANKING_LIABILITIES_TOTAL = "ranking_liabilities_total"
    WORKING_CAPITAL = "working_capital"
    ADJUSTED_MKBD = "adjusted_mkbd"
    SURPLUS_DEFICIT = "surplus_deficit"
    PORTFOLIO_TOTAL = "portfolio_total"


class ColumnRole(Enum):
    """Semantic columns located by header pattern."""

    BALANCE = "balance"
    TOTAL = "total"
    INSTRUMENT_CODE = "instrument_code"
    INSTRUMENT_NAME = "instrument_name"
    MARKET_VALUE = "market_value"
    GROUP_MARKET_VALUE = "group_market_value"
    ISSUER_GROUP = "issuer_group"
    RANKING_LIABILITY = "ranking_liability"


class ColumnFallback(Enum):
    """
    What find_column returns when no header matches.

    NONE: return None (caller treats the column as absent)
    FIRST: return the first column of the table
    """

    NONE = "none"
    FIRST = "first"


class ErrorSeverity(Enum):
    """
    Severity levels for calculation warnings.

    WARNING: Input degraded to a default, calculation continues
    ERROR: A figure could not be produced as specified
    CRITICAL: Calculation could not run at all (API layer only)
    """

    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of calculation warnings for filtering and reporting."""

    MISSING_TABLE = "missing_table"
    MISSING_ROW = "missing_row"
    MISSING_COLUMN = "missing_column"
    BUSINESS_RULE = "business_rule"
    CORRECTION = "correction"
    CONFIGURATION = "configuration"
    CALCULATION = "calculation"
