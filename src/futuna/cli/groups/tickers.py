"""
Ticker catalog commands for Futuna CLI
"""

import json

import click

from futuna.domain.exceptions import PersistenceError
from futuna.infrastructure.database import ResultStore, TickerCatalog

from ..utils import error_exit, open_database, print_table, validate_symbols


@click.group()
@click.pass_context
def tickers(ctx):
    """Manage the ticker universe

    Examples:
        futuna tickers list
        futuna tickers add FPT VNM HPG
    """
    pass


@tickers.command("list")
@click.option("--format", "-f", "fmt", type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.pass_context
def list_tickers(ctx, fmt):
    """List all tickers"""
    with open_database(ctx) as database:
        try:
            rows = ResultStore(database).list_tickers()
        except PersistenceError as e:
            error_exit(str(e))

    if fmt == "json":
        click.echo(json.dumps([t.to_dict() for t in rows], ensure_ascii=False, indent=2))
        return

    if not rows:
        click.echo("No tickers found")
        return
    print_table(["SYMBOL", "NAME"], [[t.symbol, t.name or ""] for t in rows])


@tickers.command("add")
@click.argument("symbols", nargs=-1, required=True, callback=validate_symbols)
@click.pass_context
def add_tickers(ctx, symbols):
    """Add tickers to the catalog (existing symbols are left alone)"""
    with open_database(ctx) as database:
        try:
            added = TickerCatalog(database).add_tickers(symbols)
        except PersistenceError as e:
            error_exit(str(e))
    click.echo(f"Added {added} tickers")
