"""
Stored analysis query commands for Futuna CLI
"""

import json
from datetime import date

import click

from futuna.domain.exceptions import PersistenceError
from futuna.infrastructure.database import ResultStore

from ..utils import error_exit, open_database, print_table, validate_date


@click.group()
@click.pass_context
def analyses(ctx):
    """Query stored analyses

    Examples:
        futuna analyses dates
        futuna analyses list --date 2024-01-15 --format json
    """
    pass


@analyses.command("list")
@click.option("--date", "analysis_date", callback=validate_date, help="Analysis date YYYY-MM-DD (default: today)")
@click.option("--format", "-f", "fmt", type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.pass_context
def list_analyses(ctx, analysis_date, fmt):
    """List analyses stored for one day, ordered by ticker"""
    analysis_date = analysis_date or date.today()
    with open_database(ctx) as database:
        try:
            rows = ResultStore(database).list_analyses(analysis_date)
        except PersistenceError as e:
            error_exit(str(e))

    if fmt == "json":
        click.echo(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
        return

    if not rows:
        click.echo(f"No analyses for {analysis_date.isoformat()}")
        return
    print_table(
        ["TICKER", "SHORT", "LONG", "OVERALL"],
        [
            [r.ticker, r.short_term.split(" - ")[0], r.long_term.split(" - ")[0], r.overall.split(" - ")[0]]
            for r in rows
        ],
    )


@analyses.command("dates")
@click.pass_context
def list_dates(ctx):
    """List dates that have stored analyses, newest first"""
    with open_database(ctx) as database:
        try:
            dates = ResultStore(database).list_analysis_dates()
        except PersistenceError as e:
            error_exit(str(e))

    for d in dates:
        click.echo(d.isoformat())
