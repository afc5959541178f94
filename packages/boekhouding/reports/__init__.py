"""BTW (quarterly VAT) and IB (annual income tax) summaries over stored transactions."""

from .btw import compute_vat_summary, get_vat_summary, quarter_date_range, year_date_range
from .ib import MONTH_NAMES, compute_ib_summary, get_ib_summary

__all__ = [
    "year_date_range",
    "quarter_date_range",
    "compute_vat_summary",
    "get_vat_summary",
    "MONTH_NAMES",
    "compute_ib_summary",
    "get_ib_summary",
]
