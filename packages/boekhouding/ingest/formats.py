"""Registry of supported bank export dialects and content-based detection.

Detection only looks at the first line of the decoded text and walks the
registry in order; the first dialect whose ``detect`` matches wins. Order
matters because signatures overlap (an ING header also contains words a
looser check could match), so new dialects are appended with care.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..models import ParsedRow
from .adapters import abn_amro_tab, bunq_csv, ing_csv, rabobank_csv


class BankFormat(StrEnum):
    ABN_AMRO = abn_amro_tab.FORMAT
    ING = ing_csv.FORMAT
    BUNQ = bunq_csv.FORMAT
    RABOBANK = rabobank_csv.FORMAT


@dataclass(frozen=True, slots=True)
class BankDialect:
    format: BankFormat
    label: str
    encoding: str
    detect: Callable[[str], bool]
    parse: Callable[[str], list[ParsedRow]]


DIALECTS: tuple[BankDialect, ...] = (
    BankDialect(
        BankFormat.ABN_AMRO,
        "ABN AMRO",
        abn_amro_tab.ENCODING,
        abn_amro_tab.detect,
        abn_amro_tab.parse,
    ),
    BankDialect(BankFormat.ING, "ING", ing_csv.ENCODING, ing_csv.detect, ing_csv.parse),
    BankDialect(BankFormat.BUNQ, "Bunq", bunq_csv.ENCODING, bunq_csv.detect, bunq_csv.parse),
    BankDialect(
        BankFormat.RABOBANK,
        "Rabobank",
        rabobank_csv.ENCODING,
        rabobank_csv.detect,
        rabobank_csv.parse,
    ),
)

_BY_FORMAT: dict[BankFormat, BankDialect] = {d.format: d for d in DIALECTS}


def detect_bank_format(text: str) -> BankFormat | None:
    """Return the dialect of ``text`` or ``None`` when no signature matches."""

    for dialect in DIALECTS:
        if dialect.detect(text):
            return dialect.format
    return None


def get_dialect(fmt: BankFormat | str) -> BankDialect:
    return _BY_FORMAT[BankFormat(fmt)]


def supported_labels() -> tuple[str, ...]:
    return tuple(d.label for d in DIALECTS)


__all__ = [
    "BankFormat",
    "BankDialect",
    "DIALECTS",
    "detect_bank_format",
    "get_dialect",
    "supported_labels",
]
