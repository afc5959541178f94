"""Duplicate detection against already-imported transactions.

Two rows are duplicates when their key matches::

    "<YYYY-MM-DD>_<amount with 2 decimals>_<description, trimmed, lowercased>"

Only stored rows of the same owner inside the candidate batch's own date
window (inclusive min/max) are considered. The check is advisory: a row
imported concurrently between the check and the commit is not caught.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from .persistence import fetch_transactions

_CENTS = Decimal("0.01")


def duplicate_key(date: dt.date, amount: Decimal, description: str) -> str:
    amt = abs(Decimal(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{date.isoformat()}_{amt}_{description.strip().lower()}"


def date_window(dates: Sequence[dt.date]) -> tuple[dt.date, dt.date] | None:
    if not dates:
        return None
    return min(dates), max(dates)


def load_existing_keys(
    session: Session, *, owner_id: str, start: dt.date, end: dt.date
) -> set[str]:
    return {
        duplicate_key(tx.date, Decimal(tx.amount), tx.description)
        for tx in fetch_transactions(session, owner_id=owner_id, start=start, end=end)
    }


__all__ = ["duplicate_key", "date_window", "load_existing_keys"]
