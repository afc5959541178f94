"""DB helpers for tests: bootstrap a temporary SQLite DB and seed transactions."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

from db.client import create_schema, session_scope
from db.models.ledger import Transaction
from sqlalchemy import text as sql_text


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    A file-backed database (rather than ``:memory:``) lets every session the
    code under test opens see the same state.
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    create_schema(database_url=url)
    _assert_transactions_schema_in_sync(url)
    return url


def seed_transactions(
    *, database_url: str, owner_id: str, rows: Iterable[Mapping[str, Any]]
) -> None:
    """Insert stored transactions; ``date`` may be ISO text, ``amount`` any number-ish."""

    with session_scope(database_url=database_url) as session:
        for row in rows:
            d = row["date"]
            session.add(
                Transaction(
                    owner_id=owner_id,
                    date=dt.date.fromisoformat(d) if isinstance(d, str) else d,
                    amount=Decimal(str(row["amount"])),
                    description=row.get("description", "seeded"),
                    transaction_type=row.get("transaction_type", "EXPENSE"),
                    category=row.get("category", "Other"),
                    vat_rate=row.get("vat_rate", 21),
                    vat_treatment=row.get("vat_treatment", "domestic"),
                    eu_location=row.get("eu_location"),
                )
            )


def count_transactions(*, database_url: str, owner_id: str | None = None) -> int:
    with session_scope(database_url=database_url) as session:
        q = session.query(Transaction)
        if owner_id is not None:
            q = q.filter(Transaction.owner_id == owner_id)
        return q.count()


def _assert_transactions_schema_in_sync(database_url: str) -> None:
    """ORM column set matches the created SQLite table column set."""

    expected = {c.name for c in Transaction.__table__.columns}
    with session_scope(database_url=database_url) as session:
        rows = session.execute(sql_text("PRAGMA table_info('transactions')")).fetchall()
        got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
    missing = expected - got
    extra = got - expected
    assert not missing and not extra, (
        f"transactions schema drift: missing={missing or '∅'}, extra={extra or '∅'}"
    )
