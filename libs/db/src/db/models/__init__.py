"""SQLAlchemy models for the bookkeeping database."""

from .ledger import Base, Transaction

__all__ = [
    "Base",
    "Transaction",
]
