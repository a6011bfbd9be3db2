"""
Base value extraction pass for MKBD calculator.

Pulls the base figures out of their owning forms:
    TOTAL_ASET_LANCAR  <- VD51 "Total Aset Lancar" (Baris 100)
    TOTAL_LIABILITAS   <- VD52 "Total Liabilitas" (Baris 164)
    TOTAL_EKUITAS      <- VD52 "Total Ekuitas"
    MKBD_DIWAJIBKAN    <- VD59 "Nilai MKBD yang diwajibkan" (Baris 103)

plus the informational VD51/VD52 line items (cash, deposits, client
receivables, securities portfolio, subordinated and short-term debt).

Pipeline position:
    SheetTable[] -> BaseValueExtractor -> ExtractedBaseValues

The pass only reads its input. A missing form or row yields 0 (or the
statutory minimum for the required MKBD) and a warning.

Usage:
    extractor = BaseValueExtractor()
    extracted = extractor.extract(tables, MKBDConfig.default())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from mkbd_calc.contracts.bundles import CalculationStep, ExtractedBaseValues, ExtractedValue
from mkbd_calc.contracts.errors import (
    CalculationError,
    row_not_found_warning,
    table_not_found_warning,
)
from mkbd_calc.data.tables.form_patterns import (
    COLUMN_PATTERNS,
    FORM_VALUE_COLUMNS,
    QUANTITY_ROWS,
)
from mkbd_calc.domain.enums import BaseQuantity, ColumnFallback, FormRole
from mkbd_calc.engine.locator import find_column, find_row, find_table, last_numeric_value
from mkbd_calc.engine.parsing import parse_optional_numeric

if TYPE_CHECKING:
    from mkbd_calc.contracts.bundles import SheetTable
    from mkbd_calc.contracts.config import MKBDConfig

logger = logging.getLogger(__name__)

# Extraction order (declaration order); also the order of the audit steps
PRIMARY_QUANTITIES: tuple[BaseQuantity, ...] = tuple(q for q in BaseQuantity if q.is_primary)

SUPPLEMENTARY_QUANTITIES: tuple[BaseQuantity, ...] = tuple(q for q in BaseQuantity if not q.is_primary)

STEP_IDS: dict[BaseQuantity, str] = {
    BaseQuantity.TOTAL_CURRENT_ASSETS: "pass1_aset_lancar",
    BaseQuantity.TOTAL_LIABILITIES: "pass1_liabilitas",
    BaseQuantity.TOTAL_EQUITY: "pass1_ekuitas",
    BaseQuantity.REQUIRED_MKBD: "pass1_mkbd_diwajibkan",
}

DEFAULT_SOURCE = "Default"


class BaseValueExtractor:
    """
    Extract base quantities from the VD51, VD52 and VD59 forms.

    For each quantity:
    1. Locate the owning form by sheet name
    2. Locate the labelled row (preferred row number, then text scan)
    3. Read the form's value column, else the row's last numeric cell
    """

    def extract(
        self,
        tables: Sequence[SheetTable],
        config: MKBDConfig,
    ) -> ExtractedBaseValues:
        """
        Run the extraction pass.

        Args:
            tables: All uploaded form tables
            config: Calculation configuration

        Returns:
            ExtractedBaseValues with one audit step per primary quantity
            that was located (or defaulted, for the required MKBD)
        """
        values: dict[BaseQuantity, ExtractedValue] = {}
        steps: list[CalculationStep] = []
        errors: list[CalculationError] = []
        missing_forms: set[FormRole] = set()

        for quantity in PRIMARY_QUANTITIES:
            extracted = self._extract_quantity(tables, quantity, config, errors, missing_forms)
            if not extracted.found:
                extracted = self._default_value(quantity, config)
            values[quantity] = extracted

            step = self._build_step(quantity, extracted)
            if step is not None:
                steps.append(step)

        for quantity in SUPPLEMENTARY_QUANTITIES:
            extracted = self._extract_quantity(tables, quantity, config, None, missing_forms)
            if extracted.found:
                values[quantity] = extracted

        logger.info(
            "Extracted base values: %s",
            ", ".join(f"{q.value}={values[q].value:,.0f}" for q in PRIMARY_QUANTITIES),
        )

        return ExtractedBaseValues(values=values, steps=tuple(steps), errors=tuple(errors))

    def _extract_quantity(
        self,
        tables: Sequence[SheetTable],
        quantity: BaseQuantity,
        config: MKBDConfig,
        errors: list[CalculationError] | None,
        missing_forms: set[FormRole],
    ) -> ExtractedValue:
        """Locate and read one quantity; found=False when not located."""
        row_pattern = config.row_pattern(QUANTITY_ROWS[quantity])
        form = row_pattern.form
        provenance = _provenance(form, row_pattern.preferred_position)

        table = find_table(tables, form)
        if table is None:
            if errors is not None and form not in missing_forms:
                errors.append(table_not_found_warning(
                    form.value, "values read from it default to 0",
                ))
                logger.warning("Form %s not found among uploaded tables", form.value)
            missing_forms.add(form)
            return ExtractedValue(quantity, 0.0, form.value, provenance, found=False)

        match = find_row(table, row_pattern.pattern, row_pattern.preferred_position)
        if match is None:
            if errors is not None:
                consequence = (
                    "using the statutory minimum"
                    if quantity is BaseQuantity.REQUIRED_MKBD
                    else "defaulting to 0"
                )
                errors.append(row_not_found_warning(
                    form.value, quantity.value, row_pattern.preferred_position, consequence,
                ))
                logger.warning(
                    "Row '%s' not found in %s ('%s')",
                    row_pattern.description, form.value, table.name,
                )
            return ExtractedValue(quantity, 0.0, form.value, provenance, found=False)

        column = find_column(
            table,
            COLUMN_PATTERNS[FORM_VALUE_COLUMNS[form]],
            fallback=ColumnFallback.NONE,
        )
        value = parse_optional_numeric(match.row.get(column)) if column is not None else None
        if value is None:
            # Value column absent or blank on this row: take the right-most figure
            value = last_numeric_value(match.row)
            column = None
        if value is None:
            value = 0.0

        return ExtractedValue(
            quantity=quantity,
            value=value,
            source=form.value,
            formula=_provenance(form, match.position),
            row_position=match.position,
            column=column,
            found=True,
        )

    def _default_value(self, quantity: BaseQuantity, config: MKBDConfig) -> ExtractedValue:
        if quantity is BaseQuantity.REQUIRED_MKBD:
            floor = float(config.minimum_required_mkbd)
            return ExtractedValue(
                quantity=quantity,
                value=floor,
                source=DEFAULT_SOURCE,
                formula=f"Statutory minimum MKBD ({floor:,.0f})",
                found=False,
            )
        return ExtractedValue(
            quantity=quantity,
            value=0.0,
            source=DEFAULT_SOURCE,
            formula="Not found; defaulted to 0",
            found=False,
        )

    def _build_step(
        self,
        quantity: BaseQuantity,
        extracted: ExtractedValue,
    ) -> CalculationStep | None:
        """One step per located quantity; a defaulted required MKBD also gets one."""
        if not extracted.found and quantity is not BaseQuantity.REQUIRED_MKBD:
            return None
        return CalculationStep(
            id=STEP_IDS[quantity],
            name=f"{_display_name(quantity)} ({extracted.source})",
            formula=extracted.formula,
            input_values={"value": extracted.value},
            result=extracted.value,
            source=extracted.source,
            editable=False,
        )


def _provenance(form: FormRole, position: int | None) -> str:
    if position is None:
        return f"Extract from {form.value}"
    return f"Extract from {form.value} Baris {position}"


def _display_name(quantity: BaseQuantity) -> str:
    return quantity.value.replace("_", " ").title()


def create_base_value_extractor() -> BaseValueExtractor:
    """
    Create a base value extractor instance.

    Returns:
        BaseValueExtractor ready for use
    """
    return BaseValueExtractor()
