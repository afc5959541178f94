"""Adapter for Rabobank ``.csv`` exports (comma-delimited, quoted, 26 columns).

Key columns after the header row (which starts with ``"IBAN/BBAN"``):

- 0: own IBAN/BBAN
- 4: ``Datum`` (``YYYY-MM-DD``)
- 6: ``Bedrag`` (signed, comma decimal, e.g. ``"-12,50"``)
- 8: ``Tegenrekening IBAN/BBAN``
- 9: ``Naam tegenpartij``
- 19..21: ``Omschrijving-1`` .. ``Omschrijving-3``
"""

from __future__ import annotations

from ...logging_setup import get_logger
from ...models import ParsedRow
from ..utils import cell, first_line, iter_records, join_nonempty, parse_comma_decimal, to_date

FORMAT = "RABOBANK"
ENCODING = "latin-1"
MIN_COLUMNS = 20

_REMARK_COLUMNS = (19, 20, 21)

_logger = get_logger("boekhouding.ingest.rabobank")


def detect(text: str) -> bool:
    return "IBAN/BBAN" in first_line(text)


def parse(text: str) -> list[ParsedRow]:
    rows: list[ParsedRow] = []
    records = iter_records(text, ",")
    next(records, None)  # header
    for lineno, record in enumerate(records, start=2):
        if len(record) < MIN_COLUMNS:
            continue
        raw_date = cell(record, 4)
        if not raw_date:
            continue
        booked = to_date(raw_date)
        if booked is None:
            _logger.warning("rabobank:skip_row line=%d reason=bad_date", lineno)
            continue

        name = cell(record, 9)
        remarks = [cell(record, i) for i in _REMARK_COLUMNS]
        rows.append(
            ParsedRow(
                date=booked,
                description=join_nonempty([name, *remarks]),
                signed_amount=parse_comma_decimal(cell(record, 6)),
                counterparty_iban=cell(record, 8) or None,
                counterparty_name=name or None,
            )
        )
    return rows


__all__ = ["FORMAT", "ENCODING", "detect", "parse"]
