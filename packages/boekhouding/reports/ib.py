"""Annual IB (income tax) overview.

All figures are VAT-exclusive: domestic amounts at 21 % or 9 % are divided by
1.21 or 1.09, reverse-charge amounts are already exclusive and pass through,
and 0 % amounts pass through. Expense categories are split into fully and
limited deductible; limited costs (meals, entertainment) are 80 % deductible.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from db.client import session_scope

from ..logging_setup import get_logger
from ..models import (
    FALLBACK_CATEGORY,
    ZERO,
    CategoryAmount,
    CategoryBreakdown,
    Deductibility,
    IbCounts,
    IbSummary,
    IbTotals,
    LedgerEntry,
    MonthlyAmounts,
)
from ..persistence import fetch_ledger_entries
from ..vat import exclusive_amount, round_cents
from .btw import year_date_range

_logger = get_logger("boekhouding.reports.ib")

MONTH_NAMES: tuple[str, ...] = (
    "jan", "feb", "mrt", "apr", "mei", "jun", "jul", "aug", "sep", "okt", "nov", "dec",
)

FULLY_DEDUCTIBLE: frozenset[str] = frozenset(
    {"Purchases", "Travel", "Office", "Software", "Sales", "Other"}
)
LIMITED_DEDUCTIBLE: frozenset[str] = frozenset({"Lunch", "Meals", "Entertainment"})

_LIMITED_SHARE = Decimal("0.80")
_DISALLOWED_SHARE = Decimal("0.20")


def _sorted_breakdown(amounts: dict[str, Decimal]) -> list[CategoryAmount]:
    ordered = sorted(amounts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [CategoryAmount(category=c, amount=round_cents(a)) for c, a in ordered]


def compute_ib_summary(year: int, transactions: Iterable[LedgerEntry]) -> IbSummary:
    revenue = ZERO
    expenses = ZERO
    monthly_rev = [ZERO] * 12
    monthly_exp = [ZERO] * 12
    rev_by_cat: dict[str, Decimal] = defaultdict(lambda: ZERO)
    exp_by_cat: dict[str, Decimal] = defaultdict(lambda: ZERO)
    fully = ZERO
    limited = ZERO
    n_rev = 0
    n_exp = 0

    for tx in transactions:
        excl = exclusive_amount(tx.amount, tx.vat_rate, tx.vat_treatment)
        month = tx.date.month - 1
        category = tx.category or FALLBACK_CATEGORY
        if tx.transaction_type == "INCOME":
            n_rev += 1
            revenue += excl
            monthly_rev[month] += excl
            rev_by_cat[category] += excl
        else:
            n_exp += 1
            expenses += excl
            monthly_exp[month] += excl
            exp_by_cat[category] += excl
            # Unknown categories count as fully deductible.
            if category in LIMITED_DEDUCTIBLE:
                limited += excl
            else:
                fully += excl

    return IbSummary(
        year=year,
        totals=IbTotals(
            revenue=round_cents(revenue),
            expenses=round_cents(expenses),
            profit=round_cents(revenue - expenses),
        ),
        monthly=[
            MonthlyAmounts(
                month=i + 1,
                month_name=MONTH_NAMES[i],
                revenue=round_cents(monthly_rev[i]),
                expenses=round_cents(monthly_exp[i]),
            )
            for i in range(12)
        ],
        categories=CategoryBreakdown(
            revenue=_sorted_breakdown(rev_by_cat),
            expenses=_sorted_breakdown(exp_by_cat),
        ),
        deductibility=Deductibility(
            fully_deductible=round_cents(fully),
            limited_deductible=round_cents(limited),
            limited_at_80_pct=round_cents(limited * _LIMITED_SHARE),
            limited_at_20_pct_disallowed=round_cents(limited * _DISALLOWED_SHARE),
        ),
        counts=IbCounts(
            transaction_count=n_rev + n_exp, revenue_count=n_rev, expense_count=n_exp
        ),
    )


def get_ib_summary(owner_id: str, year: int, *, database_url: str | None = None) -> IbSummary:
    """Summarize the owner's calendar year.

    A year outside the calendar range raises ``ValueError``; store errors yield
    an all-zero summary.
    """

    start, end = year_date_range(year)
    try:
        with session_scope(database_url=database_url) as session:
            entries = fetch_ledger_entries(session, owner_id=owner_id, start=start, end=end)
    except Exception as e:  # noqa: BLE001 - report degrades to zeros
        _logger.error(
            "ib:load_failed owner_id=%s year=%d error=%s", owner_id, year, e.__class__.__name__
        )
        return compute_ib_summary(year, [])

    summary = compute_ib_summary(year, entries)
    _logger.info(
        "ib:done owner_id=%s year=%d transactions=%d",
        owner_id,
        year,
        summary.counts.transaction_count,
    )
    return summary


__all__ = [
    "MONTH_NAMES",
    "FULLY_DEDUCTIBLE",
    "LIMITED_DEDUCTIBLE",
    "compute_ib_summary",
    "get_ib_summary",
]
