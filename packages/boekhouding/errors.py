"""Exception hierarchy for the ``boekhouding`` package.

Messages on :class:`StatementParseError` subclasses are user-facing: the API
layer and the CLI surface ``str(exc)`` verbatim so the user knows to upload a
different file.
"""

from __future__ import annotations


class BoekhoudingError(Exception):
    """Base class for all errors raised by this package."""


class StatementParseError(BoekhoudingError, ValueError):
    """A bank export could not be turned into transaction rows."""


class UnrecognizedFormatError(StatementParseError):
    def __init__(self, supported: tuple[str, ...] = ()) -> None:
        msg = "Bank format not recognized."
        if supported:
            msg += " Supported banks: " + ", ".join(supported)
        super().__init__(msg)
        self.supported = supported


class NoTransactionsError(StatementParseError):
    def __init__(self, bank: str) -> None:
        super().__init__(f"No transactions found in this {bank} file")
        self.bank = bank


class OracleError(BoekhoudingError):
    """The categorization oracle failed or could not be reached.

    Never propagated out of the categorization engine: affected rows fall back
    to a low-confidence default instead.
    """


__all__ = [
    "BoekhoudingError",
    "StatementParseError",
    "UnrecognizedFormatError",
    "NoTransactionsError",
    "OracleError",
]
