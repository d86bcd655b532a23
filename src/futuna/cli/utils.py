"""
Shared CLI utilities for Futuna
"""

import logging
import sys
from typing import List, Optional, Sequence

import click
from dateutil import parser as date_parser

from futuna.config import FutunaConfig
from futuna.infrastructure.database import DatabaseManager
from futuna.infrastructure.database.ticker_catalog import normalize_symbol

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("asyncio", "aiohttp", "sqlalchemy.engine")


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Route pipeline logs to stdout and, optionally, a log file"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def validate_date(ctx, param, value):
    """Click callback: analysis day as YYYY-MM-DD"""
    if not value:
        return None
    try:
        return date_parser.isoparse(value).date()
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date")


def validate_symbols(ctx, param, value) -> List[str]:
    """Click callback: accepts 'FPT VNM' as well as 'FPT,VNM'"""
    symbols = []
    for token in value or ():
        symbols.extend(normalize_symbol(part) for part in token.split(",") if part.strip())
    if not symbols:
        raise click.BadParameter("at least one ticker symbol is required")
    return symbols


def get_config(ctx) -> FutunaConfig:
    return ctx.obj["config"]


def open_database(ctx) -> DatabaseManager:
    """Database handle for one command; use it as a context manager"""
    return DatabaseManager(get_config(ctx).database)


def print_table(headers: Sequence[str], rows: Sequence[Sequence]):
    """Left-aligned columns sized to their widest cell"""
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(str(cell))) for w, cell in zip(widths, row)]

    def line(cells):
        return "  ".join(str(cell).ljust(w) for cell, w in zip(cells, widths)).rstrip()

    click.echo(line(headers))
    click.echo("  ".join("-" * w for w in widths))
    for row in rows:
        click.echo(line(row))


def status_icon(value: bool) -> str:
    return click.style("OK", fg="green") if value else click.style("FAIL", fg="red")


def error_exit(message: str, code: int = 1):
    """Print to stderr and leave with ``code``"""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)
