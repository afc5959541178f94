from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from boekhouding.models import REVERSE_CHARGE, LedgerEntry, RubricAmounts, VatSummary
from boekhouding.reports import (
    compute_vat_summary,
    get_vat_summary,
    quarter_date_range,
    year_date_range,
)
from boekhouding.vat import exclusive_amount, round_cents, split_inclusive

from tests.helpers.db import seed_transactions


def _entry(
    amount: str,
    tx_type: str = "EXPENSE",
    vat_rate: int = 21,
    *,
    treatment: str = "domestic",
    location: str | None = None,
    date: dt.date = dt.date(2025, 2, 1),
) -> LedgerEntry:
    return LedgerEntry(
        date=date,
        amount=Decimal(amount),
        transaction_type=tx_type,
        vat_rate=vat_rate,
        vat_treatment=treatment,
        eu_location=location,
    )


# ---- VAT arithmetic --------------------------------------------------------------


def test_split_inclusive() -> None:
    assert split_inclusive(Decimal("121"), 21) == (Decimal("100"), Decimal("21"))
    assert split_inclusive(Decimal("109"), 9) == (Decimal("100"), Decimal("9"))
    assert split_inclusive(Decimal("50"), 0) == (Decimal("50"), Decimal("0"))


def test_exclusive_amount_passes_reverse_charge_base_through() -> None:
    assert exclusive_amount(Decimal("121"), 21) == Decimal("100")
    assert exclusive_amount(Decimal("100"), 21, REVERSE_CHARGE) == Decimal("100")


def test_round_cents_half_up() -> None:
    assert round_cents(Decimal("0.005")) == Decimal("0.01")
    assert round_cents(Decimal("-0.005")) == Decimal("-0.01")
    assert round_cents(Decimal("10.004")) == Decimal("10.00")


# ---- Quarter ranges --------------------------------------------------------------


@pytest.mark.parametrize(
    ("quarter", "start", "end"),
    [
        (1, dt.date(2024, 1, 1), dt.date(2024, 3, 31)),
        (2, dt.date(2024, 4, 1), dt.date(2024, 6, 30)),
        (3, dt.date(2024, 7, 1), dt.date(2024, 9, 30)),
        (4, dt.date(2024, 10, 1), dt.date(2024, 12, 31)),
    ],
)
def test_quarter_date_range(quarter: int, start: dt.date, end: dt.date) -> None:
    assert quarter_date_range(2024, quarter) == (start, end)


@pytest.mark.parametrize("quarter", [0, 5])
def test_invalid_quarter_raises(quarter: int) -> None:
    with pytest.raises(ValueError):
        quarter_date_range(2025, quarter)
    with pytest.raises(ValueError):
        get_vat_summary("owner-1", 2025, quarter)


# ---- Summary fold ------------------------------------------------------------------


def test_domestic_sales_split_by_rate() -> None:
    summary = compute_vat_summary(
        [_entry("121.00", "INCOME", 21), _entry("109.00", "INCOME", 9), _entry("50", "INCOME", 0)]
    )
    assert summary.sales_excl_vat_21 == Decimal("100.00")
    assert summary.vat_collected_21 == Decimal("21.00")
    assert summary.sales_excl_vat_9 == Decimal("100.00")
    assert summary.vat_collected_9 == Decimal("9.00")
    assert summary.net_vat_payable == Decimal("30.00")
    assert summary.transaction_count == 3


def test_reverse_charge_goes_to_4a_or_4b_and_raises_net_payable() -> None:
    summary = compute_vat_summary(
        [
            _entry("100.00", treatment=REVERSE_CHARGE, location="EU"),
            _entry("200.00", treatment=REVERSE_CHARGE, location="NON_EU"),
        ]
    )
    assert summary.reverse_charge_eu == RubricAmounts(
        turnover=Decimal("100.00"), vat=Decimal("21.00")
    )
    assert summary.reverse_charge_non_eu == RubricAmounts(
        turnover=Decimal("200.00"), vat=Decimal("42.00")
    )
    # Not claimed back in 5b
    assert summary.domestic_input_vat_deductible == Decimal("0.00")
    assert summary.net_vat_payable == Decimal("63.00")


def test_reverse_charge_without_location_is_only_counted() -> None:
    summary = compute_vat_summary(
        [
            _entry("80.00", treatment=REVERSE_CHARGE, location="UNKNOWN"),
            _entry("80.00", treatment=REVERSE_CHARGE, location=None),
        ]
    )
    assert summary.incomplete_reverse_charge_count == 2
    assert summary.reverse_charge_eu == RubricAmounts()
    assert summary.reverse_charge_non_eu == RubricAmounts()
    assert summary.net_vat_payable == Decimal("0.00")
    assert summary.transaction_count == 2


def test_domestic_expenses_give_input_vat() -> None:
    summary = compute_vat_summary(
        [_entry("60.50", vat_rate=21), _entry("10.90", vat_rate=9), _entry("25.00", vat_rate=0)]
    )
    assert summary.domestic_input_vat_deductible == Decimal("11.40")
    assert summary.net_vat_payable == Decimal("-11.40")


def test_rounding_happens_on_totals_only() -> None:
    # 3 x 0.10 incl. 21% is 0.0521 VAT unrounded; per-row rounding would give 0.06
    summary = compute_vat_summary([_entry("0.10", "INCOME", 21)] * 3)
    assert summary.vat_collected_21 == Decimal("0.05")
    assert summary.sales_excl_vat_21 == Decimal("0.25")


def test_empty_period_is_all_zero() -> None:
    assert compute_vat_summary([]) == VatSummary()


# ---- Store-backed --------------------------------------------------------------------


def test_get_vat_summary_reads_owner_quarter(db_url: str) -> None:
    seed_transactions(
        database_url=db_url,
        owner_id="owner-1",
        rows=[
            {"date": "2025-01-31", "amount": "121.00", "transaction_type": "INCOME",
             "category": "Sales", "vat_rate": 21},
            {"date": "2025-03-31", "amount": "60.50", "vat_rate": 21, "category": "Office"},
            {"date": "2025-02-14", "amount": "100.00", "vat_rate": 21, "category": "Office",
             "vat_treatment": REVERSE_CHARGE, "eu_location": "EU"},
            # Next quarter
            {"date": "2025-04-01", "amount": "1210.00", "transaction_type": "INCOME",
             "category": "Sales", "vat_rate": 21},
        ],
    )
    seed_transactions(
        database_url=db_url,
        owner_id="owner-2",
        rows=[{"date": "2025-02-01", "amount": "999.00", "transaction_type": "INCOME",
               "category": "Sales"}],
    )

    summary = get_vat_summary("owner-1", 2025, 1, database_url=db_url)

    assert summary.transaction_count == 3
    assert summary.sales_excl_vat_21 == Decimal("100.00")
    assert summary.vat_collected_21 == Decimal("21.00")
    assert summary.domestic_input_vat_deductible == Decimal("10.50")
    assert summary.reverse_charge_eu.vat == Decimal("21.00")
    assert summary.net_vat_payable == Decimal("31.50")


def test_get_vat_summary_store_error_gives_zero_summary() -> None:
    # No DATABASE_URL in the environment
    assert get_vat_summary("owner-1", 2025, 1) == VatSummary()


@pytest.mark.parametrize("year", [0, 10_000])
def test_year_outside_calendar_raises_before_loading(year: int) -> None:
    with pytest.raises(ValueError, match="year must be"):
        year_date_range(year)
    with pytest.raises(ValueError, match="year must be"):
        get_vat_summary("owner-1", year, 1)
