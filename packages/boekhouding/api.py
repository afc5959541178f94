"""Public API for the ``boekhouding`` package.

Each pipeline step (parse → categorize → import) is a stateless call whose
result the caller carries to the next step. The step functions here never
raise: failures come back as an outcome with ``success=False`` and a
user-facing ``error`` string. The report functions are re-exported from
:mod:`boekhouding.reports`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from .categorize import categorize_bank_rows
from .config import OracleSettings
from .errors import StatementParseError
from .importer import import_transactions
from .ingest import parse_bank_file
from .logging_setup import get_logger
from .models import CategorizedTransaction, ParsedRow
from .oracle import CategorizationOracle
from .reports import get_ib_summary, get_vat_summary

_logger = get_logger("boekhouding.api")


class ParseOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    bank: str | None = None
    transactions: list[ParsedRow] = []
    error: str | None = None


class CategorizeOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    categorized: list[CategorizedTransaction] = []
    error: str | None = None


class ImportOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    imported: int = 0
    skipped: int = 0
    error: str | None = None


def parse_bank_statement(data: bytes) -> ParseOutcome:
    try:
        result = parse_bank_file(data)
    except StatementParseError as e:
        return ParseOutcome(success=False, error=str(e))
    except Exception as e:  # noqa: BLE001 - surfaced as a generic user message
        _logger.exception("api:parse_failed error=%s", e.__class__.__name__)
        return ParseOutcome(success=False, error="Could not read this file")
    return ParseOutcome(success=True, bank=result.bank.value, transactions=result.rows)


def categorize_bank_transactions(
    rows: Sequence[ParsedRow],
    owner_id: str,
    *,
    database_url: str | None = None,
    oracle: CategorizationOracle | None = None,
    settings: OracleSettings | None = None,
) -> CategorizeOutcome:
    try:
        categorized = categorize_bank_rows(
            rows,
            owner_id=owner_id,
            database_url=database_url,
            oracle=oracle,
            settings=settings,
        )
    except Exception as e:  # noqa: BLE001
        _logger.exception("api:categorize_failed error=%s", e.__class__.__name__)
        return CategorizeOutcome(success=False, error="Categorization failed")
    return CategorizeOutcome(success=True, categorized=categorized)


def import_bank_transactions(
    rows: Iterable[CategorizedTransaction],
    owner_id: str,
    *,
    database_url: str | None = None,
) -> ImportOutcome:
    try:
        result = import_transactions(rows, owner_id=owner_id, database_url=database_url)
    except Exception as e:  # noqa: BLE001
        _logger.exception("api:import_failed error=%s", e.__class__.__name__)
        return ImportOutcome(success=False, error="Import failed")
    return ImportOutcome(success=True, imported=result.imported, skipped=result.skipped)


__all__ = [
    "ParseOutcome",
    "CategorizeOutcome",
    "ImportOutcome",
    "parse_bank_statement",
    "categorize_bank_transactions",
    "import_bank_transactions",
    "get_vat_summary",
    "get_ib_summary",
]
