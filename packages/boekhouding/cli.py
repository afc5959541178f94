"""CLI for the ``boekhouding`` package.

The import pipeline is split into stateless steps that hand JSON files to
each other::

    boekhouding parse export.csv --out parsed.json
    boekhouding categorize parsed.json --owner-id me --out review.json
    # edit review.json: fix categories, toggle "selected"
    boekhouding import review.json --owner-id me

Reports print JSON to stdout (``btw`` per quarter, ``ib`` per year), or a
table with ``--table``.
Environment variables are loaded from ``.env`` in the working directory via
``python-dotenv`` without overriding variables that are already set.
"""

from __future__ import annotations

import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError
from rich.console import Console
from typer.models import ArgumentInfo

from . import api
from .config import OracleSettings
from .logging_setup import configure_logging
from .render import ib_summary_table, vat_summary_table

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Bank statement import and BTW/IB reports for Dutch freelancers.",
)

# Module-level argument object to satisfy ruff B008 (no calls in defaults).
INPUT_FILE_ARG: ArgumentInfo = typer.Argument(
    ...,
    help="Input file",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)


def _read_bytes(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {path}", file=sys.stderr)
    except OSError as e:
        print(f"Error: Unexpected failure reading '{path}': {e}", file=sys.stderr)
    return None


def _emit(model: BaseModel, out: Path | None) -> None:
    payload = model.model_dump_json(indent=2)
    if out is None:
        typer.echo(payload)
        return
    out.write_text(payload + "\n", encoding="utf-8")


# ---- Command handlers (return process exit codes) ----------------------------


def cmd_init_db(*, database_url: str | None) -> int:
    from db.client import create_schema

    try:
        create_schema(database_url=database_url)
    except Exception as e:
        print(f"Error: failed to create schema: {e}", file=sys.stderr)
        return 1
    typer.echo("Database schema is up to date.")
    return 0


def cmd_parse(path: Path, *, out: Path | None) -> int:
    data = _read_bytes(path)
    if data is None:
        return 1
    outcome = api.parse_bank_statement(data)
    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    _emit(outcome, out)
    if out is not None:
        typer.echo(f"Parsed {len(outcome.transactions)} transactions ({outcome.bank}) -> {out}")
    return 0


def cmd_categorize(
    path: Path,
    *,
    owner_id: str,
    out: Path | None,
    database_url: str | None,
    model: str | None,
    concurrency: int | None,
) -> int:
    if not os.getenv("OPENAI_API_KEY"):
        print("Error: OPENAI_API_KEY is not set in the environment.", file=sys.stderr)
        return 1

    data = _read_bytes(path)
    if data is None:
        return 1
    try:
        parsed = api.ParseOutcome.model_validate_json(data)
    except ValidationError as e:
        print(f"Error: '{path}' is not a parse result: {e}", file=sys.stderr)
        return 1

    settings = OracleSettings.from_env()
    if model:
        settings = replace(settings, model=model)
    if concurrency:
        settings = replace(settings, concurrency=concurrency)

    outcome = api.categorize_bank_transactions(
        parsed.transactions, owner_id, database_url=database_url, settings=settings
    )
    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    _emit(outcome, out)
    if out is not None:
        dups = sum(1 for t in outcome.categorized if t.is_duplicate)
        typer.echo(
            f"Categorized {len(outcome.categorized)} transactions "
            f"({dups} possible duplicates) -> {out}"
        )
    return 0


def cmd_import(
    path: Path,
    *,
    owner_id: str,
    database_url: str | None,
    include_unselected: bool,
) -> int:
    data = _read_bytes(path)
    if data is None:
        return 1
    try:
        reviewed = api.CategorizeOutcome.model_validate_json(data)
    except ValidationError as e:
        print(f"Error: '{path}' is not a categorize result: {e}", file=sys.stderr)
        return 1

    rows = [t for t in reviewed.categorized if include_unselected or t.selected]
    outcome = api.import_bank_transactions(rows, owner_id, database_url=database_url)
    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    typer.echo(f"Imported {outcome.imported} transactions, skipped {outcome.skipped}.")
    return 0


# ---- Typer commands ----------------------------------------------------------


@app.command("init-db")
def init_db_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Create the database tables."""

    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.command("parse")
def parse_cmd(
    path: Annotated[Path, INPUT_FILE_ARG],
    out: Path | None = typer.Option(None, "--out", help="Write JSON here instead of stdout."),
) -> None:
    """Parse a bank export (ABN AMRO, ING, Bunq, Rabobank)."""

    raise typer.Exit(cmd_parse(path, out=out))


@app.command("categorize")
def categorize_cmd(
    path: Annotated[Path, INPUT_FILE_ARG],
    owner_id: str = typer.Option(..., "--owner-id", help="Owner of the transactions."),
    out: Path | None = typer.Option(None, "--out", help="Write JSON here instead of stdout."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    model: str | None = typer.Option(None, help="Override BOEKHOUDING_OPENAI_MODEL."),
    concurrency: int | None = typer.Option(
        None, min=1, max=8, help="Override BOEKHOUDING_ORACLE_CONCURRENCY."
    ),
) -> None:
    """Categorize parsed rows and flag possible duplicates."""

    raise typer.Exit(
        cmd_categorize(
            path,
            owner_id=owner_id,
            out=out,
            database_url=database_url,
            model=model,
            concurrency=concurrency,
        )
    )


@app.command("import")
def import_cmd(
    path: Annotated[Path, INPUT_FILE_ARG],
    owner_id: str = typer.Option(..., "--owner-id", help="Owner of the transactions."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    include_unselected: bool = typer.Option(
        False, help="Also import rows with selected=false (e.g. flagged duplicates)."
    ),
) -> None:
    """Import reviewed rows; only rows with selected=true by default."""

    raise typer.Exit(
        cmd_import(
            path,
            owner_id=owner_id,
            database_url=database_url,
            include_unselected=include_unselected,
        )
    )


@app.command("btw")
def btw_cmd(
    owner_id: str = typer.Option(..., "--owner-id"),
    year: int = typer.Option(..., "--year", min=1, max=9999),
    quarter: int = typer.Option(..., "--quarter", min=1, max=4),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    table: bool = typer.Option(False, "--table", help="Render a table instead of JSON."),
) -> None:
    """Print the quarterly BTW summary as JSON."""

    summary = api.get_vat_summary(owner_id, year, quarter, database_url=database_url)
    if table:
        Console().print(vat_summary_table(summary, title=f"BTW-aangifte {year} Q{quarter}"))
        return
    typer.echo(summary.model_dump_json(indent=2))


@app.command("ib")
def ib_cmd(
    owner_id: str = typer.Option(..., "--owner-id"),
    year: int = typer.Option(..., "--year", min=1, max=9999),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    table: bool = typer.Option(False, "--table", help="Render a table instead of JSON."),
) -> None:
    """Print the annual IB summary as JSON."""

    summary = api.get_ib_summary(owner_id, year, database_url=database_url)
    if table:
        Console().print(ib_summary_table(summary))
        return
    typer.echo(summary.model_dump_json(indent=2))


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
