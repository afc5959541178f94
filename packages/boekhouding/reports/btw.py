"""Quarterly BTW (VAT return) summary.

Rubric mapping:

- 1a / 1b: domestic sales at 21 % / 9 % (turnover excl. VAT and VAT collected)
- 4a: services purchased from outside the EU (reverse charge)
- 4b: services purchased from EU suppliers (reverse charge)
- 5b: deductible input VAT on domestic purchases (voorbelasting)

Reverse-charge VAT counts as owed but is not added to 5b, so a reverse-charge
purchase raises ``net_vat_payable`` by its VAT. Reverse-charge rows without a
known EU/non-EU location are only counted in
``incomplete_reverse_charge_count`` for manual review.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from db.client import session_scope

from ..logging_setup import get_logger
from ..models import REVERSE_CHARGE, ZERO, LedgerEntry, RubricAmounts, VatSummary
from ..persistence import fetch_ledger_entries
from ..vat import VAT_BEARING_RATES, reverse_charge_vat, round_cents, split_inclusive

_logger = get_logger("boekhouding.reports.btw")

_QUARTER_START_MONTH = {1: 1, 2: 4, 3: 7, 4: 10}


def _check_year(year: int) -> None:
    if not isinstance(year, int) or not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise ValueError(f"year must be {dt.MINYEAR}-{dt.MAXYEAR}, got {year!r}")


def year_date_range(year: int) -> tuple[dt.date, dt.date]:
    """Inclusive first and last day of a calendar year."""

    _check_year(year)
    return dt.date(year, 1, 1), dt.date(year, 12, 31)


def quarter_date_range(year: int, quarter: int) -> tuple[dt.date, dt.date]:
    """Inclusive first and last day of a calendar quarter."""

    _check_year(year)
    if quarter not in _QUARTER_START_MONTH:
        raise ValueError(f"quarter must be 1-4, got {quarter!r}")
    start = dt.date(year, _QUARTER_START_MONTH[quarter], 1)
    if quarter == 4:
        end = dt.date(year, 12, 31)
    else:
        end = dt.date(year, _QUARTER_START_MONTH[quarter + 1], 1) - dt.timedelta(days=1)
    return start, end


@dataclass(slots=True)
class _Accumulator:
    sales_excl_21: Decimal = ZERO
    vat_21: Decimal = ZERO
    sales_excl_9: Decimal = ZERO
    vat_9: Decimal = ZERO
    rc_non_eu_base: Decimal = ZERO
    rc_non_eu_vat: Decimal = ZERO
    rc_eu_base: Decimal = ZERO
    rc_eu_vat: Decimal = ZERO
    rc_incomplete: int = 0
    input_vat: Decimal = ZERO
    count: int = 0

    def add(self, tx: LedgerEntry) -> None:
        self.count += 1
        if tx.transaction_type == "INCOME":
            if tx.vat_rate in VAT_BEARING_RATES:
                excl, vat = split_inclusive(tx.amount, tx.vat_rate)
                if tx.vat_rate == 21:
                    self.sales_excl_21 += excl
                    self.vat_21 += vat
                else:
                    self.sales_excl_9 += excl
                    self.vat_9 += vat
            return

        if tx.vat_treatment == REVERSE_CHARGE:
            vat = reverse_charge_vat(tx.amount)
            if tx.eu_location == "EU":
                self.rc_eu_base += tx.amount
                self.rc_eu_vat += vat
            elif tx.eu_location == "NON_EU":
                self.rc_non_eu_base += tx.amount
                self.rc_non_eu_vat += vat
            else:
                self.rc_incomplete += 1
            return

        if tx.vat_rate in VAT_BEARING_RATES:
            self.input_vat += split_inclusive(tx.amount, tx.vat_rate)[1]

    def summary(self) -> VatSummary:
        net = (
            self.vat_21 + self.vat_9 + self.rc_eu_vat + self.rc_non_eu_vat - self.input_vat
        )
        return VatSummary(
            sales_excl_vat_21=round_cents(self.sales_excl_21),
            vat_collected_21=round_cents(self.vat_21),
            sales_excl_vat_9=round_cents(self.sales_excl_9),
            vat_collected_9=round_cents(self.vat_9),
            reverse_charge_non_eu=RubricAmounts(
                turnover=round_cents(self.rc_non_eu_base), vat=round_cents(self.rc_non_eu_vat)
            ),
            reverse_charge_eu=RubricAmounts(
                turnover=round_cents(self.rc_eu_base), vat=round_cents(self.rc_eu_vat)
            ),
            incomplete_reverse_charge_count=self.rc_incomplete,
            domestic_input_vat_deductible=round_cents(self.input_vat),
            net_vat_payable=round_cents(net),
            transaction_count=self.count,
        )


def compute_vat_summary(transactions: Iterable[LedgerEntry]) -> VatSummary:
    """Fold transactions of one period into a :class:`VatSummary`."""

    acc = _Accumulator()
    for tx in transactions:
        acc.add(tx)
    return acc.summary()


def get_vat_summary(
    owner_id: str, year: int, quarter: int, *, database_url: str | None = None
) -> VatSummary:
    """Load the owner's transactions for the quarter and summarize them.

    An invalid year or quarter raises ``ValueError`` before anything is
    loaded. Store errors are logged and yield an all-zero summary.
    """

    start, end = quarter_date_range(year, quarter)
    try:
        with session_scope(database_url=database_url) as session:
            entries = fetch_ledger_entries(session, owner_id=owner_id, start=start, end=end)
    except Exception as e:  # noqa: BLE001 - report degrades to zeros
        _logger.error(
            "btw:load_failed owner_id=%s year=%d quarter=%d error=%s",
            owner_id,
            year,
            quarter,
            e.__class__.__name__,
        )
        return VatSummary()

    summary = compute_vat_summary(entries)
    _logger.info(
        "btw:done owner_id=%s year=%d quarter=%d transactions=%d",
        owner_id,
        year,
        quarter,
        summary.transaction_count,
    )
    return summary


__all__ = ["year_date_range", "quarter_date_range", "compute_vat_summary", "get_vat_summary"]
