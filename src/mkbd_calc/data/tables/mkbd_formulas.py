"""
Default MKBD formula table.

Formulas are fixed Python computations, not an expression language: the
`expression` string is for display in the audit trail and export summary,
`calculate` is what actually runs. Callers customise a calculation by
passing overrides through MKBDConfig.with_formula_overrides(), which
builds a new configuration per call rather than mutating this table.

Formula ids follow the regulatory line items:
    modal_kerja: Total Modal Kerja (VD59 Baris 13/15/18/20)
    ranking_liability_per_item: Nilai Rangking Liabilities per VD510 row
    mkbd_disesuaikan: MKBD Disesuaikan (VD59 Baris 102)
    lebih_kurang_mkbd: Lebih/(Kurang) MKBD (VD59 Baris 104)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

FORMULA_WORKING_CAPITAL = "modal_kerja"
FORMULA_RANKING_PER_ITEM = "ranking_liability_per_item"
FORMULA_ADJUSTED_MKBD = "mkbd_disesuaikan"
FORMULA_SURPLUS_DEFICIT = "lebih_kurang_mkbd"


@dataclass(frozen=True)
class FormulaDefinition:
    """
    A named, fixed computation over named numeric inputs.

    Attributes:
        id: Formula identifier (key in MKBDConfig.formulas)
        name: Display name
        description: Longer explanation for reviewers
        expression: Display form of the computation
        inputs: Names of required inputs
        calculate: Function computing the result from an input mapping
        editable: Whether the UI offers the formula for override
    """

    id: str
    name: str
    description: str
    expression: str
    inputs: tuple[str, ...]
    calculate: Callable[[Mapping[str, float]], float]
    editable: bool = True

    def evaluate(self, inputs: Mapping[str, float]) -> float:
        """
        Run the formula.

        Raises:
            KeyError: If a declared input is missing (programming error)
        """
        missing = [name for name in self.inputs if name not in inputs]
        if missing:
            raise KeyError(f"Formula '{self.id}' missing inputs: {', '.join(missing)}")
        return float(self.calculate(inputs))

    def to_dict(self) -> dict:
        """Serializable description (without the callable)."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "expression": self.expression,
            "inputs": list(self.inputs),
            "editable": self.editable,
        }


DEFAULT_FORMULAS: Mapping[str, FormulaDefinition] = MappingProxyType({
    FORMULA_WORKING_CAPITAL: FormulaDefinition(
        id=FORMULA_WORKING_CAPITAL,
        name="Total Modal Kerja",
        description="Total Aset Lancar - Total Liabilitas - Total Ranking Liabilities",
        expression="TOTAL_ASET_LANCAR - TOTAL_LIABILITAS - TOTAL_RANKING_LIABILITIES",
        inputs=("TOTAL_ASET_LANCAR", "TOTAL_LIABILITAS", "TOTAL_RANKING_LIABILITIES"),
        calculate=lambda i: (
            i["TOTAL_ASET_LANCAR"] - i["TOTAL_LIABILITAS"] - i["TOTAL_RANKING_LIABILITIES"]
        ),
    ),
    FORMULA_RANKING_PER_ITEM: FormulaDefinition(
        id=FORMULA_RANKING_PER_ITEM,
        name="Nilai Rangking Liabilities",
        description="Nilai grup emiten di atas 20% Total Ekuitas, minimum 0",
        expression="MAX(0, GRUP_NILAI_PASAR_WAJAR - (BATAS_KONSENTRASI x TOTAL_EKUITAS))",
        inputs=("GRUP_NILAI_PASAR_WAJAR", "BATAS_KONSENTRASI", "TOTAL_EKUITAS"),
        calculate=lambda i: max(
            0.0,
            i["GRUP_NILAI_PASAR_WAJAR"] - i["BATAS_KONSENTRASI"] * i["TOTAL_EKUITAS"],
        ),
    ),
    FORMULA_ADJUSTED_MKBD: FormulaDefinition(
        id=FORMULA_ADJUSTED_MKBD,
        name="MKBD Disesuaikan",
        description="Total Modal Kerja Bersih (Baris 18) dikurangi penyesuaian risiko (Baris 33-92)",
        expression="TOTAL_MODAL_KERJA_BERSIH - SUM(BARIS_33_92)",
        inputs=("TOTAL_MODAL_KERJA_BERSIH", "TOTAL_PENYESUAIAN_RISIKO"),
        calculate=lambda i: i["TOTAL_MODAL_KERJA_BERSIH"] - i["TOTAL_PENYESUAIAN_RISIKO"],
    ),
    FORMULA_SURPLUS_DEFICIT: FormulaDefinition(
        id=FORMULA_SURPLUS_DEFICIT,
        name="Lebih/(Kurang) MKBD",
        description="MKBD Disesuaikan dikurangi Nilai MKBD yang diwajibkan",
        expression="MKBD_DISESUAIKAN - MKBD_DIWAJIBKAN",
        inputs=("MKBD_DISESUAIKAN", "MKBD_DIWAJIBKAN"),
        calculate=lambda i: i["MKBD_DISESUAIKAN"] - i["MKBD_DIWAJIBKAN"],
        editable=False,
    ),
})


def get_default_formulas() -> dict[str, FormulaDefinition]:
    """Return a fresh, mutable copy of the default formula table."""
    return dict(DEFAULT_FORMULAS)
