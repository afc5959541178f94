"""Text and number normalization shared by the bank dialect adapters.

Dutch exports use a comma as decimal separator and a dot for thousands
(``"1.234,56"``) and often encode dates as ``YYYYMMDD``. The helpers here
never raise on malformed input: amounts degrade to ``0`` and dates to
``None`` so a single bad line cannot abort a whole statement.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import re
from collections.abc import Iterator
from decimal import Decimal, InvalidOperation

_DATE8_RE = re.compile(r"^\d{8}$")
_ZERO = Decimal("0")


def _to_decimal(s: str) -> Decimal:
    try:
        d = Decimal(s)
    except (InvalidOperation, ValueError):
        return _ZERO
    # Decimal accepts "NaN"/"Infinity"; an amount never may be either.
    return d if d.is_finite() else _ZERO


def parse_comma_decimal(raw: str | None) -> Decimal:
    """Parse a comma-decimal amount: ``"1.234,56"`` → ``Decimal("1234.56")``.

    Thousands separators are removed before the decimal comma is converted.
    Malformed input returns ``Decimal("0")``.
    """

    if raw is None:
        return _ZERO
    s = raw.strip().replace(" ", "")
    if not s:
        return _ZERO
    s = s.replace(".", "").replace(",", ".", 1)
    return _to_decimal(s)


def parse_dot_decimal(raw: str | None) -> Decimal:
    """Parse a dot-decimal amount such as ``"-12.50"``; malformed → ``0``."""

    if raw is None:
        return _ZERO
    s = raw.strip().replace(" ", "")
    if not s:
        return _ZERO
    return _to_decimal(s)


def format_date8(raw: str) -> str:
    """Reformat ``YYYYMMDD`` to ``YYYY-MM-DD``; other input is returned trimmed."""

    s = raw.strip()
    if not _DATE8_RE.match(s):
        return s
    return f"{s[0:4]}-{s[4:6]}-{s[6:8]}"


def to_date(raw: str | None) -> dt.date | None:
    """Return a calendar date for ``YYYY-MM-DD`` or ``YYYYMMDD`` input, else ``None``."""

    if raw is None:
        return None
    s = format_date8(raw)
    if not s:
        return None
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        return None


def is_date8(raw: str | None) -> bool:
    return bool(raw) and bool(_DATE8_RE.match(raw.strip()))


def first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()


def iter_records(text: str, delimiter: str, *, quoted: bool = True) -> Iterator[list[str]]:
    """Yield the non-blank records of ``text`` split on ``delimiter``.

    Quoted fields may contain the delimiter (and, for quoted dialects, line
    breaks). ``quoted=False`` treats quote characters as ordinary text, which
    the tab-separated export needs because its free-text column is unquoted.
    """

    # Only \n and \r end a record; U+0085 (Latin-1 byte 0x85) is ordinary text.
    lines = io.StringIO(text, newline="")
    if quoted:
        reader = csv.reader(lines, delimiter=delimiter, quotechar='"')
    else:
        reader = csv.reader(lines, delimiter=delimiter, quoting=csv.QUOTE_NONE)
    for record in reader:
        if not record or not any(cell.strip() for cell in record):
            continue
        yield record


def cell(record: list[str], index: int) -> str:
    """Return the trimmed cell at ``index`` or ``""`` when the record is short."""

    if index < len(record):
        return record[index].strip()
    return ""


def join_nonempty(parts: list[str], sep: str = " - ") -> str:
    return sep.join(p for p in parts if p)


__all__ = [
    "parse_comma_decimal",
    "parse_dot_decimal",
    "format_date8",
    "to_date",
    "is_date8",
    "first_line",
    "iter_records",
    "cell",
    "join_nonempty",
]
