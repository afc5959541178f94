"""Reads and writes against the ``transactions`` table.

Every function takes an explicit ``owner_id``; rows of other owners are never
returned or touched. Callers own the session (see ``db.client.session_scope``).
"""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal

from db.models.ledger import Transaction
from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import CategorizedTransaction, LedgerEntry

_CENTS = Decimal("0.01")


def fetch_transactions(
    session: Session, *, owner_id: str, start: dt.date, end: dt.date
) -> list[Transaction]:
    """Return the owner's transactions with ``start <= date <= end``, oldest first."""

    stmt = (
        select(Transaction)
        .where(Transaction.owner_id == owner_id)
        .where(Transaction.date >= start)
        .where(Transaction.date <= end)
        .order_by(Transaction.date, Transaction.id)
    )
    return list(session.scalars(stmt))


def fetch_ledger_entries(
    session: Session, *, owner_id: str, start: dt.date, end: dt.date
) -> list[LedgerEntry]:
    return [
        LedgerEntry(
            date=tx.date,
            amount=Decimal(tx.amount),
            transaction_type=tx.transaction_type,
            vat_rate=tx.vat_rate,
            category=tx.category,
            vat_treatment=tx.vat_treatment,
            eu_location=tx.eu_location,
        )
        for tx in fetch_transactions(session, owner_id=owner_id, start=start, end=end)
    ]


def insert_transaction(
    session: Session, *, owner_id: str, tx: CategorizedTransaction
) -> Transaction:
    """Add one reviewed row as a domestic transaction and flush it."""

    row = Transaction(
        owner_id=owner_id,
        date=tx.date,
        amount=tx.amount.quantize(_CENTS, rounding=ROUND_HALF_UP),
        description=tx.description,
        transaction_type=tx.transaction_type,
        category=tx.category,
        vat_rate=tx.vat_rate,
        vat_treatment="domestic",
    )
    session.add(row)
    session.flush()
    return row


__all__ = ["fetch_transactions", "fetch_ledger_entries", "insert_transaction"]
