"""Dutch VAT arithmetic shared by the BTW and IB reports.

Amounts stored for domestic treatment include VAT; reverse-charge amounts are
the VAT-exclusive base. Intermediate values are never rounded; call
:func:`round_cents` on output only.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .models import REVERSE_CHARGE, ZERO

REVERSE_CHARGE_RATE = Decimal("0.21")
VAT_BEARING_RATES: frozenset[int] = frozenset({9, 21})

_CENTS = Decimal("0.01")
_HUNDRED = Decimal("100")


def round_cents(amount: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""

    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def split_inclusive(amount: Decimal, vat_rate: int) -> tuple[Decimal, Decimal]:
    """Split a VAT-inclusive amount into ``(exclusive, vat)``.

    Rates without VAT arithmetic (0) return ``(amount, 0)``.
    """

    if vat_rate not in VAT_BEARING_RATES:
        return amount, ZERO
    exclusive = amount / (1 + Decimal(vat_rate) / _HUNDRED)
    return exclusive, amount - exclusive


def exclusive_amount(amount: Decimal, vat_rate: int, vat_treatment: str = "domestic") -> Decimal:
    if vat_treatment == REVERSE_CHARGE:
        return amount
    return split_inclusive(amount, vat_rate)[0]


def reverse_charge_vat(base: Decimal) -> Decimal:
    return base * REVERSE_CHARGE_RATE


__all__ = [
    "REVERSE_CHARGE_RATE",
    "VAT_BEARING_RATES",
    "round_cents",
    "split_inclusive",
    "exclusive_amount",
    "reverse_charge_vat",
]
