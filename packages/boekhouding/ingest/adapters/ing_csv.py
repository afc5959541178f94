"""Adapter for ING ``.csv`` exports (semicolon-delimited, all fields quoted).

Columns after the header row:

0. ``Datum`` (``YYYYMMDD``)
1. ``Naam / Omschrijving``
2. ``Rekening`` (own IBAN)
3. ``Tegenrekening`` (counterparty IBAN)
4. ``Code``
5. ``Af Bij`` (``Af`` = debit, ``Bij`` = credit)
6. ``Bedrag (EUR)``: always positive, comma decimal
7. ``Mutatiesoort``
8. ``Mededelingen``
9. ``Saldo na mutatie``
10. ``Tag``
"""

from __future__ import annotations

from ...logging_setup import get_logger
from ...models import ParsedRow
from ..utils import cell, first_line, iter_records, join_nonempty, parse_comma_decimal, to_date

FORMAT = "ING"
ENCODING = "latin-1"
MIN_COLUMNS = 7

_logger = get_logger("boekhouding.ingest.ing")


def detect(text: str) -> bool:
    line = first_line(text)
    return "Datum" in line and ";" in line


def parse(text: str) -> list[ParsedRow]:
    rows: list[ParsedRow] = []
    records = iter_records(text, ";")
    next(records, None)  # header
    for lineno, record in enumerate(records, start=2):
        if len(record) < MIN_COLUMNS:
            continue
        booked = to_date(cell(record, 0))
        if booked is None:
            _logger.warning("ing:skip_row line=%d reason=bad_date", lineno)
            continue

        name = cell(record, 1)
        amount = parse_comma_decimal(cell(record, 6))
        if cell(record, 5).lower() == "af":
            amount = -amount

        rows.append(
            ParsedRow(
                date=booked,
                description=join_nonempty([name, cell(record, 8)]),
                signed_amount=amount,
                counterparty_iban=cell(record, 3) or None,
                counterparty_name=name or None,
            )
        )
    return rows


__all__ = ["FORMAT", "ENCODING", "detect", "parse"]
