"""Categorization and duplicate flagging of parsed bank rows.

Public API:
    - :func:`categorize_bank_rows`

Rows are sent to the oracle in batches of at most :data:`BATCH_SIZE`. Oracle
trouble (timeouts, HTTP errors, unparseable answers) never aborts the run:
the affected rows get the low-confidence fallback ``(Other, 21, low)``.
Database errors during the duplicate check do propagate.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from decimal import Decimal
from typing import NamedTuple

from db.client import session_scope

from . import prompting
from .categorization import FALLBACK_DECISION, Decision, apply_type_policy, parse_oracle_response
from .config import OracleSettings
from .duplicates import date_window, duplicate_key, load_existing_keys
from .logging_setup import get_logger
from .models import CategorizedTransaction, ParsedRow
from .oracle import CategorizationOracle, OpenAIOracle
from .pmap import p_map

BATCH_SIZE: int = 100

_logger = get_logger("boekhouding.categorize")


class _Prepared(NamedTuple):
    row: ParsedRow
    transaction_type: str
    amount_abs: Decimal


def _prepare(row: ParsedRow) -> _Prepared:
    tx_type = "INCOME" if row.signed_amount >= 0 else "EXPENSE"
    return _Prepared(row, tx_type, abs(row.signed_amount))


def _batches(n_total: int, size: int) -> list[tuple[int, int, int]]:
    """Half-open ``(batch_index, start, end)`` ranges covering ``n_total`` rows."""

    starts = range(0, n_total, size)
    return [(k, base, min(base + size, n_total)) for k, base in enumerate(starts)]


def _build_user_content(prepared: Sequence[_Prepared]) -> str:
    items = [
        {
            "index": i,
            "date": p.row.date.isoformat(),
            "description": p.row.description,
            "amount": str(p.amount_abs),
            "type": p.transaction_type,
            "counterparty": p.row.counterparty_name,
        }
        for i, p in enumerate(prepared)
    ]
    return prompting.build_user_content(prompting.serialize_items_to_json(items))


def _categorize_batch(
    batch_index: int,
    prepared: Sequence[_Prepared],
    *,
    oracle: CategorizationOracle,
    instructions: str,
) -> list[Decision]:
    count = len(prepared)
    t0 = time.perf_counter()
    try:
        text = oracle.categorize(_build_user_content(prepared), instructions=instructions)
        decisions = parse_oracle_response(text, num_items=count)
    except Exception as e:  # noqa: BLE001 - any oracle or answer failure degrades to fallback
        _logger.error(
            "categorize:batch_fallback batch_index=%d count=%d error=%s",
            batch_index,
            count,
            e.__class__.__name__,
        )
        return [FALLBACK_DECISION] * count

    _logger.info(
        "categorize:batch_done batch_index=%d count=%d latency_ms=%.2f",
        batch_index,
        count,
        (time.perf_counter() - t0) * 1000.0,
    )
    return decisions


def categorize_bank_rows(
    rows: Sequence[ParsedRow],
    *,
    owner_id: str,
    database_url: str | None = None,
    oracle: CategorizationOracle | None = None,
    settings: OracleSettings | None = None,
) -> list[CategorizedTransaction]:
    """Derive type and amount, categorize, and flag duplicates.

    The output has one entry per input row, in input order. Rows whose key
    matches a stored transaction of ``owner_id`` (same date, amount and
    case-insensitive trimmed description) come back with ``is_duplicate=True``
    and ``selected=False``.
    """

    if not rows:
        return []

    settings = settings or OracleSettings.from_env()
    oracle = oracle or OpenAIOracle(settings)
    instructions = prompting.build_instructions()

    prepared = [_prepare(r) for r in rows]

    def _map_batch(span: tuple[int, int, int]) -> list[Decision]:
        batch_index, start, end = span
        return _categorize_batch(
            batch_index, prepared[start:end], oracle=oracle, instructions=instructions
        )

    per_batch = p_map(
        _batches(len(prepared), BATCH_SIZE), _map_batch, concurrency=settings.concurrency
    )
    decisions = [d for batch in per_batch for d in batch]

    window = date_window([p.row.date for p in prepared])
    assert window is not None  # rows is non-empty
    with session_scope(database_url=database_url) as session:
        existing = load_existing_keys(session, owner_id=owner_id, start=window[0], end=window[1])

    out: list[CategorizedTransaction] = []
    for p, decision in zip(prepared, decisions, strict=True):
        decision = apply_type_policy(decision, p.transaction_type)
        is_dup = duplicate_key(p.row.date, p.amount_abs, p.row.description) in existing
        out.append(
            CategorizedTransaction(
                date=p.row.date,
                description=p.row.description,
                amount=p.amount_abs,
                transaction_type=p.transaction_type,
                category=decision.category,
                vat_rate=decision.vat_rate,
                is_duplicate=is_dup,
                categorization_confidence=decision.confidence,
                selected=not is_dup,
            )
        )

    _logger.info(
        "categorize:done owner_id=%s rows=%d duplicates=%d",
        owner_id,
        len(out),
        sum(1 for t in out if t.is_duplicate),
    )
    return out


__all__ = ["BATCH_SIZE", "categorize_bank_rows"]
