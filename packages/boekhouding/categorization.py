"""Parsing and sanitizing of categorization oracle output.

The oracle's answer is untrusted text. Nothing in this module raises on bad
model output: unparseable responses, unknown values and missing indices all
degrade to the fallback decision ``(Other, 21, low)``. No I/O happens here.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .logging_setup import get_logger
from .models import (
    CATEGORIES,
    CONFIDENCES,
    FALLBACK_CATEGORY,
    FALLBACK_CONFIDENCE,
    FALLBACK_VAT_RATE,
    VAT_RATES,
)

_logger = get_logger("boekhouding.categorization")

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)

_CATEGORY_BY_LOWER: dict[str, str] = {c.lower(): c for c in CATEGORIES}

# Categories allowed per transaction type; anything else becomes the fallback.
_ALLOWED_BY_TYPE: dict[str, frozenset[str]] = {
    "INCOME": frozenset({"Sales", "Other"}),
    "EXPENSE": frozenset(c for c in CATEGORIES if c != "Sales"),
}


class Decision(NamedTuple):
    category: str
    vat_rate: int
    confidence: str


FALLBACK_DECISION = Decision(FALLBACK_CATEGORY, FALLBACK_VAT_RATE, FALLBACK_CONFIDENCE)


class OracleDecision(BaseModel):
    """One element of the oracle's JSON array, sanitized on validation."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    index: int = Field(validation_alias=AliasChoices("index", "idx"))
    category: str = Field(
        default=FALLBACK_CATEGORY, validation_alias=AliasChoices("category", "categorie")
    )
    vat_rate: int = Field(
        default=FALLBACK_VAT_RATE,
        validation_alias=AliasChoices("vat_rate", "vatRate", "btw_tarief"),
    )
    confidence: str = FALLBACK_CONFIDENCE

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, v: Any) -> str:
        if isinstance(v, str):
            return _CATEGORY_BY_LOWER.get(v.strip().lower(), FALLBACK_CATEGORY)
        return FALLBACK_CATEGORY

    @field_validator("vat_rate", mode="before")
    @classmethod
    def _known_vat_rate(cls, v: Any) -> int:
        if isinstance(v, bool):
            return FALLBACK_VAT_RATE
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v.strip())
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return v if isinstance(v, int) and v in VAT_RATES else FALLBACK_VAT_RATE

    @field_validator("confidence", mode="before")
    @classmethod
    def _known_confidence(cls, v: Any) -> str:
        s = v.strip().lower() if isinstance(v, str) else ""
        return s if s in CONFIDENCES else FALLBACK_CONFIDENCE

    def to_decision(self) -> Decision:
        return Decision(self.category, self.vat_rate, self.confidence)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```), if any."""

    s = text.strip()
    m = _FENCE_RE.match(s)
    return m.group(1).strip() if m else s


def _decode_array(text: str) -> list[Any] | None:
    try:
        decoded = json.loads(strip_code_fences(text))
    except (ValueError, TypeError, RecursionError):
        # Oversized integers and deeply nested arrays raise besides JSONDecodeError
        return None
    if isinstance(decoded, Mapping):
        decoded = decoded.get("results")
    return decoded if isinstance(decoded, list) else None


def parse_oracle_response(text: str | None, *, num_items: int) -> list[Decision]:
    """Parse an oracle answer into exactly ``num_items`` decisions by index.

    Elements are aligned by their batch-relative ``index``; out-of-range and
    repeated indices are ignored (first one wins). Missing indices, and the
    whole batch when the text is not a JSON array, get :data:`FALLBACK_DECISION`.
    """

    out: list[Decision | None] = [None] * num_items
    items = _decode_array(text) if text else None
    if items is None:
        _logger.warning("categorization:unparseable_response num_items=%d", num_items)
        return [FALLBACK_DECISION] * num_items

    for raw in items:
        if not isinstance(raw, Mapping):
            continue
        try:
            parsed = OracleDecision.model_validate(raw)
        except ValidationError:
            continue
        if 0 <= parsed.index < num_items and out[parsed.index] is None:
            out[parsed.index] = parsed.to_decision()

    missing = sum(1 for d in out if d is None)
    if missing:
        _logger.warning(
            "categorization:missing_indices num_items=%d missing=%d", num_items, missing
        )
    return [d if d is not None else FALLBACK_DECISION for d in out]


def apply_type_policy(decision: Decision, transaction_type: str) -> Decision:
    """Coerce categories that are not valid for the transaction type to ``Other``."""

    allowed = _ALLOWED_BY_TYPE.get(transaction_type)
    if allowed is None or decision.category in allowed:
        return decision
    return decision._replace(category=FALLBACK_CATEGORY)


__all__ = [
    "Decision",
    "FALLBACK_DECISION",
    "OracleDecision",
    "strip_code_fences",
    "parse_oracle_response",
    "apply_type_policy",
]
