"""Commit reviewed transactions to the store.

Each row is inserted in its own short session so a failing row (constraint
violation, store error) is rolled back alone, counted as skipped, and does
not block the rows after it. Selection is the caller's job: pass only the
rows the user kept.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from db.client import session_scope

from .logging_setup import get_logger
from .models import CategorizedTransaction
from .persistence import insert_transaction

_logger = get_logger("boekhouding.importer")


class ImportResult(NamedTuple):
    imported: int
    skipped: int


def import_transactions(
    rows: Iterable[CategorizedTransaction],
    *,
    owner_id: str,
    database_url: str | None = None,
) -> ImportResult:
    imported = 0
    skipped = 0
    for pos, tx in enumerate(rows):
        try:
            with session_scope(database_url=database_url) as session:
                insert_transaction(session, owner_id=owner_id, tx=tx)
        except Exception as e:  # noqa: BLE001 - per-row failure is counted, not raised
            skipped += 1
            _logger.warning(
                "import:skip_row pos=%d date=%s error=%s",
                pos,
                tx.date.isoformat(),
                e.__class__.__name__,
            )
            continue
        imported += 1

    _logger.info(
        "import:done owner_id=%s imported=%d skipped=%d", owner_id, imported, skipped
    )
    return ImportResult(imported=imported, skipped=skipped)


__all__ = ["ImportResult", "import_transactions"]
