"""Prompt construction for bank transaction categorization.

The instructions carry the closed vocabularies (categories, VAT rates,
confidence levels) and the per-type constraints. The batch itself is embedded
in the user content as a JSON array between ``BEGIN_TRANSACTIONS_JSON`` and
``END_TRANSACTIONS_JSON`` markers, with a batch-relative ``index`` per item
for alignment of the answer.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from .models import CATEGORIES, CONFIDENCES, VAT_RATES

BEGIN_MARKER = "BEGIN_TRANSACTIONS_JSON"
END_MARKER = "END_TRANSACTIONS_JSON"

ITEM_FIELD_ORDER: tuple[str, ...] = (
    "index",
    "date",
    "description",
    "amount",
    "type",
    "counterparty",
)

_CATEGORY_HINTS: dict[str, str] = {
    "Purchases": "goods and materials bought for the business",
    "Sales": "payments received from customers (income only)",
    "Travel": "public transport, fuel, parking, taxis, flights",
    "Office": "rent, software subscriptions, telecom, office supplies",
    "Other": "anything that does not clearly fit the categories above",
}


def serialize_items_to_json(items: Sequence[Mapping[str, Any]]) -> str:
    """Serialize batch items to a JSON array with a fixed key order."""

    arr = [{key: item.get(key) for key in ITEM_FIELD_ORDER} for item in items]
    return json.dumps(arr, ensure_ascii=False)


def build_instructions() -> str:
    category_lines = "\n".join(f"- {c}: {_CATEGORY_HINTS[c]}" for c in CATEGORIES)
    rates = ", ".join(str(r) for r in VAT_RATES)
    confidences = ", ".join(CONFIDENCES)
    return (
        "You categorize Dutch business bank transactions for a freelancer's "
        "bookkeeping (VAT return and income tax).\n"
        "For every transaction choose exactly one category:\n"
        f"{category_lines}\n"
        f"Choose the Dutch VAT rate that applies: one of {rates}. Use 21 for most "
        "goods and services, 9 for food, books and public transport, 0 for bank "
        "fees, insurance, taxes and salaries.\n"
        "Constraints: INCOME transactions are Sales or Other. EXPENSE transactions "
        "are never Sales.\n"
        f"Set confidence to one of {confidences}.\n"
        "Answer with a JSON array only, one object per transaction: "
        '[{"index": <int>, "category": <string>, "vat_rate": <int>, '
        '"confidence": <string>}]. No prose, no markdown.'
    )


def build_user_content(items_json: str) -> str:
    return (
        "Categorize the following transactions. Keep the index of each item.\n"
        f"{BEGIN_MARKER}\n{items_json}\n{END_MARKER}"
    )


__all__ = [
    "BEGIN_MARKER",
    "END_MARKER",
    "ITEM_FIELD_ORDER",
    "serialize_items_to_json",
    "build_instructions",
    "build_user_content",
]
