"""
Database management commands for Futuna CLI
"""

import click

from futuna.domain.exceptions import PersistenceError

from ..utils import error_exit, open_database, status_icon


@click.group()
@click.pass_context
def db(ctx):
    """Database schema and connectivity

    Examples:
        futuna db init
        futuna db check
    """
    pass


@db.command("init")
@click.pass_context
def init(ctx):
    """Create the tickers, analyses and request_logs tables"""
    with open_database(ctx) as database:
        try:
            database.create_tables()
        except PersistenceError as e:
            error_exit(str(e))
    click.echo("Database tables created")


@db.command("check")
@click.pass_context
def check(ctx):
    """Verify the database is reachable"""
    with open_database(ctx) as database:
        ok = database.test_connection()
    click.echo(f"Database: {status_icon(ok)}")
    if not ok:
        error_exit("Database connection failed")
