"""
Table, column and row locator for MKBD form tables.

Finds semantically-identified tables, columns and rows inside loosely
structured spreadsheet extracts:

    find_table  -> first table whose sheet name matches a form role
    find_column -> first column whose header matches a pattern
    find_row    -> preferred row number first, then full-text scan

Regulatory forms have nominally fixed row numbers, but real uploads shift
rows between form versions. find_row therefore checks the expected row
number first and only scans the whole table when that row does not carry
the expected label. Every lookup degrades to None rather than raising.

Usage:
    from mkbd_calc.engine.locator import find_table, find_row

    vd59 = find_table(tables, FormRole.VD59)
    match = find_row(vd59, pattern.pattern, preferred_position=102)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Collection, Iterable, Mapping

from mkbd_calc.data.tables.form_patterns import FORM_NAME_PATTERNS
from mkbd_calc.domain.enums import ColumnFallback, FormRole
from mkbd_calc.engine.parsing import parse_optional_numeric

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import SheetTable

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[_\-]+")
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class RowMatch:
    """
    A located row.

    Attributes:
        position: 1-based row number
        row: The row record (live reference into the table)
        text: Normalised row text the pattern was matched against
        by_preferred_position: Whether the fast path matched
    """

    position: int
    row: dict[str, Any]
    text: str
    by_preferred_position: bool = False


# =============================================================================
# Normalisation
# =============================================================================


def normalize_label(label: str) -> str:
    """Lower-case a header, turn "_"/"-" into spaces and collapse whitespace."""
    text = _SEPARATORS_RE.sub(" ", str(label).lower())
    return _SPACES_RE.sub(" ", text).strip()


def row_text(row: Mapping[str, Any], exclude_columns: Collection[str] = ()) -> str:
    """
    Concatenate the string cells of a row for label matching.

    Numbers and blanks are ignored, so the text is the row's labels only.
    Underscores become spaces (labels are often exported as "Total_Aset").
    """
    parts = [
        value
        for column, value in row.items()
        if isinstance(value, str) and value.strip() and column not in exclude_columns
    ]
    text = " ".join(parts).lower().replace("_", " ")
    return _SPACES_RE.sub(" ", text).strip()


def row_description(row: Mapping[str, Any], exclude_columns: Collection[str] = ()) -> str:
    """Readable label of a row (original casing), for audit records."""
    parts = [
        value.strip()
        for column, value in row.items()
        if isinstance(value, str)
        and value.strip()
        and column not in exclude_columns
        and parse_optional_numeric(value) is None
    ]
    return " ".join(parts)


# =============================================================================
# Tables
# =============================================================================


def find_table(
    tables: Iterable[SheetTable],
    role: FormRole,
    patterns: Mapping[FormRole, re.Pattern[str]] = FORM_NAME_PATTERNS,
) -> SheetTable | None:
    """
    Find the first table whose sheet name matches a form role.

    Args:
        tables: Candidate tables in upload order
        role: Form role to find
        patterns: Sheet-name patterns per role

    Returns:
        Matching table, or None when no table matches
    """
    pattern = patterns[role]
    for table in tables:
        if pattern.search(table.name):
            logger.debug("Form %s resolved to table '%s'", role.value, table.name)
            return table
    logger.debug("Form %s not present", role.value)
    return None


# =============================================================================
# Columns
# =============================================================================


def find_column(
    table: SheetTable,
    pattern: re.Pattern[str] | str,
    *,
    fallback: ColumnFallback = ColumnFallback.NONE,
) -> str | None:
    """
    Find the first column whose normalised header matches a pattern.

    Args:
        table: Table to search
        pattern: Regex searched in the normalised header
        fallback: What to return when nothing matches

    Returns:
        Column label, the first column (FIRST fallback), or None
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    for column in table.columns:
        if regex.search(normalize_label(column)):
            return column

    if fallback is ColumnFallback.FIRST and table.columns:
        logger.debug(
            "No column matching /%s/ in '%s'; falling back to '%s'",
            regex.pattern, table.name, table.columns[0],
        )
        return table.columns[0]

    logger.debug("No column matching /%s/ in '%s'", regex.pattern, table.name)
    return None


# =============================================================================
# Rows
# =============================================================================


def find_row(
    table: SheetTable,
    pattern: re.Pattern[str] | str,
    preferred_position: int | None = None,
    *,
    exclude: Collection[int] = (),
) -> RowMatch | None:
    """
    Locate a labelled row.

    Order of attempts:
    1. The preferred 1-based row number, if its text matches
    2. Every row in order; the first match wins
    3. None

    Args:
        table: Table to search
        pattern: Regex searched in the normalised row text
        preferred_position: Expected regulatory row number
        exclude: Positions already claimed by other targets in this pass

    Returns:
        RowMatch, or None when no row matches
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    if preferred_position is not None and preferred_position not in exclude:
        row = table.row(preferred_position)
        if row is not None:
            text = row_text(row)
            if regex.search(text):
                return RowMatch(preferred_position, row, text, by_preferred_position=True)

    for position, row in table:
        if position in exclude:
            continue
        text = row_text(row)
        if regex.search(text):
            if preferred_position is not None:
                logger.debug(
                    "Row /%s/ in '%s' found at %d instead of preferred %d",
                    regex.pattern, table.name, position, preferred_position,
                )
            return RowMatch(position, row, text)

    logger.debug("No row matching /%s/ in '%s'", regex.pattern, table.name)
    return None


def last_numeric_value(row: Mapping[str, Any]) -> float | None:
    """
    Last non-empty cell of a row that parses as a number.

    Used when a row is found but its value column is not: forms put the
    figure to the right of the label.
    """
    for value in reversed(list(row.values())):
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        number = parse_optional_numeric(value)
        if number is not None:
            return number
    return None
