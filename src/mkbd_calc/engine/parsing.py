"""
Cell value parser for MKBD form tables.

Converts heterogeneous spreadsheet cells into floats:
- parse_numeric_value: total function, anything unparseable -> 0.0
- parse_optional_numeric: same rules, but blanks/garbage -> None
- parse_numeric_series: element-wise parse of a Polars Series

String conventions handled:
- Currency markers (Rp, IDR, USD, $), percent signs, NBSP and spaces
- Accounting negatives "(1.000)" and leading (unicode) minus signs
- Indonesian format "1.234.567,89" and English format "1,234,567.89"
- A lone "-" (spreadsheet nil) is zero, and "1.000,-" is 1000
- Exponent notation overflowing to infinity holds no number

Separator rules: when both "." and "," occur, the last one is the decimal
mark. A separator occurring more than once is grouping. A single separator
followed by exactly three digits, with a non-zero integer part, is grouping
("1.500" -> 1500, "0.125" -> 0.125); otherwise it is a decimal mark.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

import polars as pl

MINUS_CHARS = "-−‒–—"
NIL_MARKERS = frozenset({"-", "−", "–", "—", "--"})

_CURRENCY_RE = re.compile(r"(?i)\b(rp|idr|usd)\b\.?|rp\.?|\$|%")
_WHITESPACE_RE = re.compile(r"\s+")
_EXPONENT_RE = re.compile(r"\d+(\.\d+)?[eE][+-]?\d+")
_DIGITS_RE = re.compile(r"[\d.,]*\d[\d.,]*")
# "1.000.000,-": the dash stands for zero decimals
_DASH_DECIMALS_RE = re.compile(r"[.,][-−–—]+(?=\)?$)")


def parse_optional_numeric(value: Any) -> float | None:
    """
    Parse a cell value, returning None when it holds no number.

    Args:
        value: Cell value (None, number, or string)

    Returns:
        Parsed float, or None for blank / non-numeric input
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        result = float(value)
        return result if math.isfinite(result) else None
    if not isinstance(value, str):
        return None

    text = _CURRENCY_RE.sub("", value)
    text = _WHITESPACE_RE.sub("", text)
    text = _DASH_DECIMALS_RE.sub("", text)
    if not text:
        return None
    if text in NIL_MARKERS:
        return 0.0

    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1]
    if text and text[0] in MINUS_CHARS:
        negative = not negative
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]

    number = _parse_unsigned(text)
    if number is None:
        return None
    return -number if negative else number


def parse_numeric_value(value: Any) -> float:
    """
    Parse a cell value into a float; never raises.

    Absent, blank, non-numeric or unparseable input yields 0.0. Numbers are
    returned unchanged (as float), so parsing is idempotent.
    """
    result = parse_optional_numeric(value)
    return 0.0 if result is None else result


def parse_numeric_series(series: pl.Series) -> pl.Series:
    """
    Parse a Polars Series of raw cells into Float64, keeping nulls.

    Numeric series are cast directly; anything else is parsed per element.
    """
    if series.dtype.is_numeric():
        return series.cast(pl.Float64)
    return pl.Series(
        series.name,
        [parse_optional_numeric(v) for v in series.to_list()],
        dtype=pl.Float64,
    )


def _parse_unsigned(text: str) -> float | None:
    if _EXPONENT_RE.fullmatch(text):
        result = float(text)
        return result if math.isfinite(result) else None
    if not _DIGITS_RE.fullmatch(text):
        return None

    dots = text.count(".")
    commas = text.count(",")

    if dots and commas:
        decimal_mark = "." if text.rfind(".") > text.rfind(",") else ","
        grouping = "," if decimal_mark == "." else "."
        text = text.replace(grouping, "").replace(decimal_mark, ".")
    elif dots or commas:
        separator = "." if dots else ","
        if text.count(separator) > 1:
            text = text.replace(separator, "")
        else:
            integer_part, fraction = text.split(separator)
            if len(fraction) == 3 and integer_part.strip("0"):
                text = integer_part + fraction
            else:
                text = f"{integer_part}.{fraction}"

    try:
        return float(text)
    except ValueError:
        return None
