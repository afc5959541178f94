"""Bank statement ingest: dialect detection, per-bank adapters, façade."""

from .formats import BankFormat, detect_bank_format
from .statement import ParseResult, parse_bank_file

__all__ = ["BankFormat", "detect_bank_format", "ParseResult", "parse_bank_file"]
