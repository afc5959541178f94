"""Terminal tables for the BTW and IB summaries (``--table`` in the CLI)."""

from __future__ import annotations

from decimal import Decimal

from rich.table import Table

from .models import IbSummary, VatSummary


def _eur(amount: Decimal) -> str:
    return f"€ {amount:,.2f}"


def vat_summary_table(summary: VatSummary, *, title: str = "BTW-aangifte") -> Table:
    table = Table(title=title)
    table.add_column("Rubriek")
    table.add_column("Omschrijving")
    table.add_column("Omzet", justify="right")
    table.add_column("BTW", justify="right")

    table.add_row(
        "1a", "Leveringen/diensten hoog (21%)",
        _eur(summary.sales_excl_vat_21), _eur(summary.vat_collected_21),
    )
    table.add_row(
        "1b", "Leveringen/diensten laag (9%)",
        _eur(summary.sales_excl_vat_9), _eur(summary.vat_collected_9),
    )
    table.add_row(
        "4a", "Diensten van buiten de EU",
        _eur(summary.reverse_charge_non_eu.turnover), _eur(summary.reverse_charge_non_eu.vat),
    )
    table.add_row(
        "4b", "Diensten uit EU-landen",
        _eur(summary.reverse_charge_eu.turnover), _eur(summary.reverse_charge_eu.vat),
    )
    table.add_row("5b", "Voorbelasting", "", _eur(summary.domestic_input_vat_deductible))
    table.add_section()
    table.add_row("", "Te betalen", "", _eur(summary.net_vat_payable), style="bold")
    if summary.incomplete_reverse_charge_count:
        table.caption = (
            f"{summary.incomplete_reverse_charge_count} verlegde transactie(s) zonder "
            "EU/niet-EU locatie; controleer handmatig."
        )
    return table


def ib_summary_table(summary: IbSummary) -> Table:
    table = Table(title=f"Inkomstenbelasting {summary.year} (excl. BTW)")
    table.add_column("Maand")
    table.add_column("Omzet", justify="right")
    table.add_column("Kosten", justify="right")
    for m in summary.monthly:
        table.add_row(m.month_name, _eur(m.revenue), _eur(m.expenses))
    table.add_section()
    table.add_row(
        "Totaal", _eur(summary.totals.revenue), _eur(summary.totals.expenses), style="bold"
    )
    table.add_row("Winst", _eur(summary.totals.profit), "", style="bold")
    d = summary.deductibility
    table.caption = (
        f"Volledig aftrekbaar {_eur(d.fully_deductible)}; beperkt aftrekbaar "
        f"{_eur(d.limited_deductible)} (80% {_eur(d.limited_at_80_pct)}, "
        f"niet aftrekbaar {_eur(d.limited_at_20_pct_disallowed)})"
    )
    return table


__all__ = ["vat_summary_table", "ib_summary_table"]
