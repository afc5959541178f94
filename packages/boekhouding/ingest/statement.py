"""Single entry point for "raw export bytes → normalized rows".

Bank export tools disagree on encodings: ING, Rabobank and ABN AMRO write
ISO-8859-1, Bunq writes UTF-8. Detection therefore runs on a Latin-1 decode
first (which never fails), retries on a UTF-8 decode, and finally re-decodes
as UTF-8 when the detected dialect is UTF-8 only. The declared file name or
MIME type is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import NoTransactionsError, UnrecognizedFormatError
from ..logging_setup import get_logger
from ..models import ParsedRow
from .formats import BankFormat, detect_bank_format, get_dialect, supported_labels

_logger = get_logger("boekhouding.ingest.statement")

_UTF8_BOM = b"\xef\xbb\xbf"


@dataclass(frozen=True, slots=True)
class ParseResult:
    bank: BankFormat
    rows: list[ParsedRow]


def _decode(data: bytes, encoding: str) -> str:
    return data.removeprefix(_UTF8_BOM).decode(encoding, errors="replace")


def decode_and_detect(data: bytes) -> tuple[BankFormat, str]:
    """Return the detected dialect and the text decoded the way it needs.

    Raises :class:`~boekhouding.errors.UnrecognizedFormatError` when neither
    decoding yields a known dialect.
    """

    text = _decode(data, "latin-1")
    bank = detect_bank_format(text)
    if bank is None:
        text = _decode(data, "utf-8")
        bank = detect_bank_format(text)
    if bank is None:
        raise UnrecognizedFormatError(supported_labels())

    dialect = get_dialect(bank)
    if dialect.encoding == "utf-8":
        text = _decode(data, "utf-8")
    return bank, text


def parse_bank_file(data: bytes) -> ParseResult:
    """Parse a bank statement export into :class:`ParsedRow` entries.

    Raises :class:`~boekhouding.errors.UnrecognizedFormatError` for
    unsupported exports and :class:`~boekhouding.errors.NoTransactionsError`
    when a recognized file holds no usable rows.
    """

    bank, text = decode_and_detect(data)
    dialect = get_dialect(bank)
    rows = dialect.parse(text)
    if not rows:
        raise NoTransactionsError(dialect.label)

    _logger.info("parse:done bank=%s rows=%d bytes=%d", bank.value, len(rows), len(data))
    return ParseResult(bank=bank, rows=rows)


__all__ = ["ParseResult", "decode_and_detect", "parse_bank_file"]
