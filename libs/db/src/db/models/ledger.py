from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: transactions
# ---------------------------


class Transaction(Base):
    """A booked income or expense line owned by exactly one user.

    ``amount`` is never negative; direction is carried by ``transaction_type``.
    For domestic treatment the amount includes VAT at ``vat_rate``. For
    ``foreign_service_reverse_charge`` the amount is the VAT-exclusive base and
    ``eu_location`` decides the BTW rubric (4a non-EU, 4b EU).
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    owner_id: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    vat_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=21)
    vat_treatment: Mapped[str] = mapped_column(String, nullable=False, default="domestic")
    # Only meaningful for reverse-charge rows; NULL for domestic ones.
    eu_location: Mapped[str | None] = mapped_column(String, nullable=True)
    attachment_ref: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_tx_amount_non_negative"),
        CheckConstraint(
            "transaction_type in ('INCOME','EXPENSE')",
            name="ck_tx_transaction_type",
        ),
        CheckConstraint(
            "category IS NULL OR category in ('Purchases','Sales','Travel','Office','Other')",
            name="ck_tx_category",
        ),
        CheckConstraint("vat_rate in (0, 9, 21)", name="ck_tx_vat_rate"),
        CheckConstraint(
            "vat_treatment in ('domestic','foreign_service_reverse_charge')",
            name="ck_tx_vat_treatment",
        ),
        CheckConstraint(
            "eu_location IS NULL OR eu_location in ('EU','NON_EU','UNKNOWN')",
            name="ck_tx_eu_location",
        ),
        Index("ix_tx_owner_date", "owner_id", "date"),
    )


__all__ = [
    "Base",
    "Transaction",
]
