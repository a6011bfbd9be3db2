"""
Polars namespaces for MKBD audit trail generation.

Provides shared formatting utilities and audit trail builders:
- `expr.audit.format_currency(decimals)` - Format as plain rounded amount
- `expr.audit.format_percent(decimals)` - Format a ratio as percentage
- `expr.audit.format_short()` - Format large amounts as 1.50T / 2.00B / 600.00M
- `lf.audit.build_ranking_calculation(limit)` - Build VD510 ranking formula string

Usage:
    import polars as pl
    import mkbd_calc.engine.audit_namespace  # Register namespace

    result = df.with_columns(
        pl.col("group_market_value").audit.format_short().alias("nilai_grup"),
    )

Audit strings follow the form used on the MKBD summary sheet:
    MAX(0, {group value} - (20% × {equity}))

Example:
    MAX(0, 1.00B - (20% × 2.00B))
"""

from __future__ import annotations

from decimal import Decimal

import polars as pl

# Scale suffixes, largest first
SHORT_SCALES: tuple[tuple[float, str], ...] = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
)


def format_short_number(value: float) -> str:
    """
    Format an amount with a T/B/M suffix and two decimals.

    Amounts below one million (including negatives) are printed as a
    rounded integer with "." thousands grouping.

    Examples:
        format_short_number(2_000_000_000) -> "2.00B"
        format_short_number(600_000_000) -> "600.00M"
        format_short_number(12_345) -> "12.345"
    """
    for scale, suffix in SHORT_SCALES:
        if value >= scale:
            return f"{value / scale:.2f}{suffix}"
    return f"{value:,.0f}".replace(",", ".")


def format_limit(limit: Decimal | float) -> str:
    """Concentration limit as a percentage label (0.20 -> "20%")."""
    return f"{float(limit) * 100:g}%"


# =============================================================================
# EXPRESSION NAMESPACE
# =============================================================================


@pl.api.register_expr_namespace("audit")
class AuditExpr:
    """
    Audit formatting namespace for Polars Expressions.

    Example:
        df.with_columns(
            pl.col("charge").audit.format_currency().alias("charge_formatted"),
        )
    """

    def __init__(self, expr: pl.Expr) -> None:
        self._expr = expr

    def format_currency(self, decimals: int = 0) -> pl.Expr:
        """
        Format value as a rounded amount (no symbol, no grouping).

        Args:
            decimals: Number of decimal places

        Returns:
            Expression formatted as string
        """
        if decimals == 0:
            return self._expr.round(0).cast(pl.Int64).cast(pl.String)
        return self._expr.round(decimals).cast(pl.String)

    def format_percent(self, decimals: int = 1) -> pl.Expr:
        """
        Format a ratio as percentage.

        Args:
            decimals: Number of decimal places

        Returns:
            Expression formatted as percentage string (e.g., "20.0%")
        """
        return pl.concat_str([
            (self._expr * 100).round(decimals).cast(pl.String),
            pl.lit("%"),
        ])

    def format_short(self) -> pl.Expr:
        """
        Format large amounts with a T/B/M suffix and two decimals.

        Matches format_short_number() for amounts of one million and more;
        smaller amounts are printed as a rounded integer without grouping.

        Returns:
            Expression formatted as string (e.g., "2.00B")
        """
        expr = self._expr.cast(pl.Float64)
        formatted = expr.round(0).cast(pl.Int64).cast(pl.String)
        for scale, suffix in reversed(SHORT_SCALES):
            formatted = pl.when(expr >= scale).then(_scaled(expr, scale, suffix)).otherwise(formatted)
        return formatted


def _scaled(expr: pl.Expr, scale: float, suffix: str) -> pl.Expr:
    hundredths = (expr / scale * 100).round(0).cast(pl.Int64)
    return pl.concat_str([
        (hundredths // 100).cast(pl.String),
        pl.lit("."),
        (hundredths % 100).cast(pl.String).str.zfill(2),
        pl.lit(suffix),
    ])


# =============================================================================
# LAZYFRAME NAMESPACE
# =============================================================================


@pl.api.register_lazyframe_namespace("audit")
class AuditLazyFrame:
    """
    Audit trail namespace for Polars LazyFrames.

    Example:
        items = vd510_frame.audit.build_ranking_calculation(Decimal("0.20"))
    """

    def __init__(self, lf: pl.LazyFrame) -> None:
        self._lf = lf

    def build_ranking_calculation(self, concentration_limit: Decimal | float) -> pl.LazyFrame:
        """
        Build the VD510 ranking liability audit string.

        Format: MAX(0, {group_market_value} - ({limit}% × {total_equity}))

        Requires group_market_value and total_equity columns.

        Returns:
            LazyFrame with ranking_calculation column
        """
        return self._lf.with_columns([
            pl.concat_str([
                pl.lit("MAX(0, "),
                pl.col("group_market_value").audit.format_short(),
                pl.lit(f" - ({format_limit(concentration_limit)} × "),
                pl.col("total_equity").audit.format_short(),
                pl.lit("))"),
            ]).alias("ranking_calculation"),
        ])
