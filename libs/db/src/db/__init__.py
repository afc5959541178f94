"""db: shared database library for the bookkeeping packages.

Public exports
--------------
- ``Base`` and ``metadata`` (``db.client.create_schema`` creates the tables)
- ORM models in ``db.models.ledger`` (re-exported for convenience)
- Engine/session helpers in ``db.client``
"""

from __future__ import annotations

from .models.ledger import Base, Transaction

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "Transaction",
]
