"""Adapter for ABN AMRO ``.TAB`` exports.

Tab-delimited, no header row, eight columns:

0. own account number
1. currency (``EUR``)
2. transaction date (``YYYYMMDD``)
3. opening balance
4. closing balance
5. value date (``YYYYMMDD``)
6. amount (signed, comma decimal)
7. description: a ``/TAG/value/TAG2/value2/...`` string (``/TRTP/``,
   ``/IBAN/``, ``/NAME/``, ``/REMI/``, ...)

The description shown to the user is ``NAME - REMI``; when there is no
remittance info the transaction type (``TRTP``) takes its place.
"""

from __future__ import annotations

from ...logging_setup import get_logger
from ...models import ParsedRow
from ..utils import (
    cell,
    first_line,
    is_date8,
    iter_records,
    join_nonempty,
    parse_comma_decimal,
    to_date,
)

FORMAT = "ABN_AMRO"
ENCODING = "latin-1"
MIN_COLUMNS = 7

_logger = get_logger("boekhouding.ingest.abn_amro")


def detect(text: str) -> bool:
    cols = first_line(text).split("\t")
    return len(cols) >= MIN_COLUMNS and is_date8(cols[2])


def extract_tag(desc: str, tag: str) -> str | None:
    """Return the value following ``tag`` up to the next ``/``, or ``None``."""

    idx = desc.find(tag)
    if idx == -1:
        return None
    start = idx + len(tag)
    end = desc.find("/", start)
    value = desc[start:] if end == -1 else desc[start:end]
    return value.strip()


def parse(text: str) -> list[ParsedRow]:
    rows: list[ParsedRow] = []
    for lineno, record in enumerate(iter_records(text, "\t", quoted=False), start=1):
        if len(record) < MIN_COLUMNS:
            continue
        booked = to_date(cell(record, 2))
        if booked is None:
            _logger.warning("abn_amro:skip_row line=%d reason=bad_date", lineno)
            continue

        raw_desc = cell(record, 7)
        name = extract_tag(raw_desc, "/NAME/") or ""
        remi = extract_tag(raw_desc, "/REMI/") or ""
        trtp = extract_tag(raw_desc, "/TRTP/") or ""
        iban = extract_tag(raw_desc, "/IBAN/") or None

        rows.append(
            ParsedRow(
                date=booked,
                description=join_nonempty([name, remi or trtp]) or raw_desc,
                signed_amount=parse_comma_decimal(cell(record, 6)),
                counterparty_iban=iban,
                counterparty_name=name or None,
            )
        )
    return rows


__all__ = ["FORMAT", "ENCODING", "detect", "parse", "extract_tag"]
