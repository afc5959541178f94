from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from boekhouding.ingest import parse_bank_file
from boekhouding.ingest.adapters import abn_amro_tab, bunq_csv, ing_csv, rabobank_csv
from boekhouding.ingest.formats import BankFormat, detect_bank_format, supported_labels
from boekhouding.ingest.utils import (
    format_date8,
    iter_records,
    parse_comma_decimal,
    parse_dot_decimal,
    to_date,
)

from tests.helpers.statements import (
    ABN_TEXT,
    BUNQ_TEXT,
    ING_HEADER,
    ING_TEXT,
    RABO_TEXT,
    RENDERERS,
)


# ---- Numeric and date helpers --------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1.234,56", Decimal("1234.56")),
        ("0,00", Decimal("0.00")),
        ("-12,50", Decimal("-12.50")),
        ("+2.000,00", Decimal("2000.00")),
        (" 1 234,56 ", Decimal("1234.56")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        (None, Decimal("0")),
        ("NaN", Decimal("0")),
    ],
)
def test_parse_comma_decimal(raw: str | None, expected: Decimal) -> None:
    assert parse_comma_decimal(raw) == expected


def test_parse_dot_decimal_handles_sign_and_garbage() -> None:
    assert parse_dot_decimal("-9.99") == Decimal("-9.99")
    assert parse_dot_decimal("12,5") == Decimal("0")
    assert parse_dot_decimal("Infinity") == Decimal("0")


def test_format_date8_and_to_date() -> None:
    assert format_date8("20250131") == "2025-01-31"
    assert format_date8(" 2025-01-31 ") == "2025-01-31"
    assert to_date("20250131") == dt.date(2025, 1, 31)
    assert to_date("2025-02-30") is None
    assert to_date("20251332") is None
    assert to_date("") is None


def test_iter_records_keeps_quoted_delimiters_and_skips_blank_lines() -> None:
    text = '"a";"b; c";"d"\n\n"e";"f";"g"\n'
    assert list(iter_records(text, ";")) == [["a", "b; c", "d"], ["e", "f", "g"]]


# ---- Format detection --------------------------------------------------------------


def test_detect_bank_format_for_each_dialect() -> None:
    assert detect_bank_format(ABN_TEXT) is BankFormat.ABN_AMRO
    assert detect_bank_format(ING_TEXT) is BankFormat.ING
    assert detect_bank_format(BUNQ_TEXT) is BankFormat.BUNQ
    assert detect_bank_format(RABO_TEXT) is BankFormat.RABOBANK


def test_detect_bank_format_unknown_returns_none() -> None:
    assert detect_bank_format("Date,Amount,Payee\n2025-01-01,1.00,X\n") is None
    assert detect_bank_format("") is None


def test_detect_only_inspects_first_line() -> None:
    text = "some preamble\n" + ING_TEXT
    assert detect_bank_format(text) is None


def test_tab_line_without_date_in_column_two_is_not_abn() -> None:
    line = "a\tb\tnot-a-date\td\te\tf\tg\th\n"
    assert detect_bank_format(line) is None


def test_supported_labels_in_detection_order() -> None:
    assert supported_labels() == ("ABN AMRO", "ING", "Bunq", "Rabobank")


# ---- Per-dialect parsing ---------------------------------------------------------


def test_abn_amro_parse_extracts_tags() -> None:
    rows = abn_amro_tab.parse(ABN_TEXT)
    assert len(rows) == 3

    first = rows[0]
    assert first.date == dt.date(2025, 1, 15)
    assert first.signed_amount == Decimal("-12.50")
    assert first.description == "Albert Heijn - Boodschappen"
    assert first.counterparty_iban == "NL91ABNA0417164300"
    assert first.counterparty_name == "Albert Heijn"

    # No /REMI/: the transaction type stands in
    assert rows[1].description == "Klant BV - iDEAL"
    assert rows[1].signed_amount == Decimal("1500.00")

    # No tags at all: raw description is kept
    assert rows[2].description == "BEA   NR:12345 KIOSK AMSTERDAM"
    assert rows[2].counterparty_iban is None
    assert rows[2].counterparty_name is None


def test_abn_amro_skips_short_lines_and_bad_dates() -> None:
    text = "123\tEUR\t20250115\n" + ABN_TEXT.replace("20250116\t987", "20250231\t987")
    rows = abn_amro_tab.parse(text)
    assert [r.date for r in rows] == [dt.date(2025, 1, 15), dt.date(2025, 1, 17)]


def test_extract_tag_returns_value_up_to_next_slash() -> None:
    desc = "/TRTP/SEPA/IBAN/NL91ABNA0417164300/NAME/Foo Bar"
    assert abn_amro_tab.extract_tag(desc, "/IBAN/") == "NL91ABNA0417164300"
    assert abn_amro_tab.extract_tag(desc, "/NAME/") == "Foo Bar"
    assert abn_amro_tab.extract_tag(desc, "/REMI/") is None


def test_ing_parse_signs_by_debit_credit_column() -> None:
    rows = ing_csv.parse(ING_TEXT)
    assert len(rows) == 2

    debit, credit = rows
    assert debit.date == dt.date(2025, 2, 3)
    assert debit.signed_amount == Decimal("-1234.56")
    assert debit.description == "Café de Zon - Pasvolgnr: 001; terminal 7"
    assert debit.counterparty_iban == "NL22RABO0002345678"

    assert credit.signed_amount == Decimal("250.00")
    # Empty remarks: name only
    assert credit.description == "Klant BV"


def test_ing_skips_rows_below_minimum_columns() -> None:
    text = ING_HEADER + '"20250203";"Kort";"NL11"\n'
    assert ing_csv.parse(text) == []


def test_bunq_parse_uses_dot_decimals_and_skips_empty_dates() -> None:
    rows = bunq_csv.parse(BUNQ_TEXT)
    assert len(rows) == 2
    assert rows[0].signed_amount == Decimal("-9.99")
    assert rows[0].description == "Spotify - Premium € plan"
    assert rows[0].counterparty_iban == "NL44INGB0004567890"
    # Quoted comma inside the name stays in one field
    assert rows[1].counterparty_name == "Klant, BV"
    assert rows[1].description == "Klant, BV - Factuur 2025-007"


def test_rabobank_parse_joins_name_and_remarks() -> None:
    rows = rabobank_csv.parse(RABO_TEXT)
    assert len(rows) == 2
    assert rows[0].date == dt.date(2025, 4, 10)
    assert rows[0].signed_amount == Decimal("-45.00")
    assert rows[0].description == "NS Reizigers - OV-chipkaart"
    assert rows[0].counterparty_iban == "NL77INGB0007654321"
    assert rows[1].signed_amount == Decimal("2000.00")
    assert rows[1].description == "Klant BV - Factuur 12 - Q1"


def test_abn_amro_keeps_latin1_ellipsis_inside_description() -> None:
    line = (
        "123456789\tEUR\t20250115\t0,00\t0,00\t20250115\t-19,95\t"
        "/TRTP/iDEAL/IBAN/NL91ABNA0417164300/NAME/Shop/REMI/Order 12\x85 thanks/EREF/X\n"
    )
    result = parse_bank_file(line.encode("latin-1"))
    assert len(result.rows) == 1
    assert result.rows[0].description == "Shop - Order 12\x85 thanks"
    assert result.rows[0].signed_amount == Decimal("-19.95")


def test_iter_records_splits_on_newlines_only() -> None:
    text = "a\tb\x85c\x0bd\x1ce\r\nf\tg\rh\ti\n"
    assert list(iter_records(text, "\t", quoted=False)) == [
        ["a", "b\x85c\x0bd\x1ce"],
        ["f", "g"],
        ["h", "i"],
    ]


# ---- Render then parse, per dialect ------------------------------------------------


@pytest.mark.parametrize("bank", sorted(RENDERERS))
@pytest.mark.parametrize(
    ("date", "amount"),
    [
        (dt.date(2025, 1, 31), Decimal("-1234.56")),
        (dt.date(2024, 2, 29), Decimal("2500.00")),
        (dt.date(2025, 12, 1), Decimal("0.01")),
    ],
)
def test_rendered_row_parses_back(bank: str, date: dt.date, amount: Decimal) -> None:
    text = RENDERERS[bank](date, amount, "Klant BV", "Factuur 7", "NL02RABO0123456789")
    encoding = "utf-8" if bank == "BUNQ" else "latin-1"

    result = parse_bank_file(text.encode(encoding))

    assert result.bank == bank
    assert len(result.rows) == 1
    row = result.rows[0]
    assert row.date == date
    assert row.signed_amount == amount
    assert row.description == "Klant BV - Factuur 7"
    assert row.counterparty_iban == "NL02RABO0123456789"
    assert row.counterparty_name == "Klant BV"
