"""Data models and type aliases for ``boekhouding``.

Everything that crosses a pipeline step boundary (parse → categorize → review
→ import) is a Pydantic model so the caller can carry it as JSON between
stateless steps and hand it back for validation. Report summaries are
Pydantic models for the same reason. Amounts are always ``Decimal``.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

type TransactionType = Literal["INCOME", "EXPENSE"]
type Category = Literal["Purchases", "Sales", "Travel", "Office", "Other"]
type VatRate = Literal[0, 9, 21]
type Confidence = Literal["high", "low"]
type VatTreatment = Literal["domestic", "foreign_service_reverse_charge"]
type EuLocation = Literal["EU", "NON_EU", "UNKNOWN"]

CATEGORIES: tuple[str, ...] = get_args(Category.__value__)
VAT_RATES: tuple[int, ...] = get_args(VatRate.__value__)
CONFIDENCES: tuple[str, ...] = get_args(Confidence.__value__)

FALLBACK_CATEGORY = "Other"
FALLBACK_VAT_RATE = 21
FALLBACK_CONFIDENCE = "low"

REVERSE_CHARGE = "foreign_service_reverse_charge"

ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Pipeline DTOs
# ---------------------------------------------------------------------------


class ParsedRow(BaseModel):
    """One bank statement line in the common shape shared by all dialects.

    ``signed_amount`` is positive for credits (income) and negative for debits
    (expenses).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    date: dt.date
    description: str
    signed_amount: Decimal
    counterparty_iban: str | None = None
    counterparty_name: str | None = None


class CategorizedTransaction(BaseModel):
    """A parsed row after type derivation, categorization and duplicate check.

    This is the review shape: the user may edit ``category``, ``vat_rate``,
    ``date``, ``amount``, ``description`` or ``transaction_type`` and toggle
    ``selected`` before the rows are handed to the importer. Duplicates
    default to ``selected=False``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    date: dt.date
    description: str
    amount: Decimal = Field(ge=0)
    transaction_type: TransactionType
    category: Category
    vat_rate: VatRate
    vat_treatment: Literal["domestic"] = "domestic"
    is_duplicate: bool = False
    categorization_confidence: Confidence = "low"
    selected: bool = True


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """Read-only view of a stored transaction, as consumed by the report folds."""

    date: dt.date
    amount: Decimal
    transaction_type: str
    vat_rate: int
    category: str | None = None
    vat_treatment: str = "domestic"
    eu_location: str | None = None


# ---------------------------------------------------------------------------
# Report summaries
# ---------------------------------------------------------------------------


class RubricAmounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    turnover: Decimal = ZERO
    vat: Decimal = ZERO


class VatSummary(BaseModel):
    """Quarterly BTW return figures.

    ``reverse_charge_non_eu`` is rubric 4a, ``reverse_charge_eu`` rubric 4b and
    ``domestic_input_vat_deductible`` rubric 5b (voorbelasting).
    """

    model_config = ConfigDict(frozen=True)

    sales_excl_vat_21: Decimal = ZERO
    vat_collected_21: Decimal = ZERO
    sales_excl_vat_9: Decimal = ZERO
    vat_collected_9: Decimal = ZERO
    reverse_charge_non_eu: RubricAmounts = RubricAmounts()
    reverse_charge_eu: RubricAmounts = RubricAmounts()
    incomplete_reverse_charge_count: int = 0
    domestic_input_vat_deductible: Decimal = ZERO
    net_vat_payable: Decimal = ZERO
    transaction_count: int = 0


class IbTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    profit: Decimal = ZERO


class MonthlyAmounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    month_name: str
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO


class CategoryAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal


class CategoryBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    revenue: list[CategoryAmount] = []
    expenses: list[CategoryAmount] = []


class Deductibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    fully_deductible: Decimal = ZERO
    limited_deductible: Decimal = ZERO
    limited_at_80_pct: Decimal = ZERO
    limited_at_20_pct_disallowed: Decimal = ZERO


class IbCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_count: int = 0
    revenue_count: int = 0
    expense_count: int = 0


class IbSummary(BaseModel):
    """Annual income-tax overview. All figures are VAT-exclusive."""

    model_config = ConfigDict(frozen=True)

    year: int
    totals: IbTotals = IbTotals()
    monthly: list[MonthlyAmounts] = []
    categories: CategoryBreakdown = CategoryBreakdown()
    deductibility: Deductibility = Deductibility()
    counts: IbCounts = IbCounts()


__all__ = [
    "TransactionType",
    "Category",
    "VatRate",
    "Confidence",
    "VatTreatment",
    "EuLocation",
    "CATEGORIES",
    "VAT_RATES",
    "CONFIDENCES",
    "FALLBACK_CATEGORY",
    "FALLBACK_VAT_RATE",
    "FALLBACK_CONFIDENCE",
    "REVERSE_CHARGE",
    "ParsedRow",
    "CategorizedTransaction",
    "LedgerEntry",
    "RubricAmounts",
    "VatSummary",
    "IbTotals",
    "MonthlyAmounts",
    "CategoryAmount",
    "CategoryBreakdown",
    "Deductibility",
    "IbCounts",
    "IbSummary",
]
