"""Adapter for Bunq ``.csv`` exports (comma-delimited, quoted, UTF-8).

Columns after the header row:

0. ``Date`` (``YYYY-MM-DD``)
1. ``Amount`` (signed, dot decimal)
2. ``Account`` (own IBAN)
3. ``Counterparty`` (IBAN)
4. ``Name``
5. ``Description``

Bunq is the only dialect whose text is only correct when decoded as UTF-8.
"""

from __future__ import annotations

from ...logging_setup import get_logger
from ...models import ParsedRow
from ..utils import cell, first_line, iter_records, join_nonempty, parse_dot_decimal, to_date

FORMAT = "BUNQ"
ENCODING = "utf-8"
MIN_COLUMNS = 5

_logger = get_logger("boekhouding.ingest.bunq")


def detect(text: str) -> bool:
    line = first_line(text)
    return '"Date"' in line and '"Counterparty"' in line


def parse(text: str) -> list[ParsedRow]:
    rows: list[ParsedRow] = []
    records = iter_records(text, ",")
    next(records, None)  # header
    for lineno, record in enumerate(records, start=2):
        if len(record) < MIN_COLUMNS:
            continue
        raw_date = cell(record, 0)
        if not raw_date:
            continue
        booked = to_date(raw_date)
        if booked is None:
            _logger.warning("bunq:skip_row line=%d reason=bad_date", lineno)
            continue

        name = cell(record, 4)
        rows.append(
            ParsedRow(
                date=booked,
                description=join_nonempty([name, cell(record, 5)]),
                signed_amount=parse_dot_decimal(cell(record, 1)),
                counterparty_iban=cell(record, 3) or None,
                counterparty_name=name or None,
            )
        )
    return rows


__all__ = ["FORMAT", "ENCODING", "detect", "parse"]
