#!/usr/bin/env python3
"""
Futuna CLI - Main Entry Point

Runs the batch ticker analysis and queries its stored results.

Usage:
    futuna [OPTIONS] COMMAND [ARGS]...

Examples:
    futuna db init
    futuna tickers add FPT VNM HPG
    futuna analyze --timeout 1800
    futuna analyses list --date 2024-01-15
"""

import sys

import click
from dotenv import load_dotenv

from futuna.config import get_config

from .groups import analyses, analyze, db, startup, tickers
from .utils import setup_logging

CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config", "-c",
    default="config.yaml",
    envvar="FUTUNA_CONFIG",
    help="Configuration file path"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    envvar="FUTUNA_LOG_LEVEL",
    help="Logging level"
)
@click.option(
    "--log-file",
    type=click.Path(),
    envvar="FUTUNA_LOG_FILE",
    help="Log file path"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (same as --log-level DEBUG)"
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress non-essential output"
)
@click.version_option(
    version="0.1.0",
    prog_name="futuna"
)
@click.pass_context
def cli(ctx, config, log_level, log_file, verbose, quiet):
    """Futuna - AI ticker analysis pipeline

    Batches the ticker universe, asks a language model for short-term,
    long-term and strategy verdicts, and stores one analysis per ticker
    and day.

    \b
    COMMANDS:
      analyze   One-shot analysis run (exit 1 on failure)
      startup   Boot-time analysis run (never fails the process)
      tickers   Ticker universe management
      analyses  Stored analysis queries
      db        Schema and connectivity
    """
    effective_level = "DEBUG" if verbose else log_level
    if quiet:
        effective_level = "WARNING"

    setup_logging(effective_level, log_file)
    load_dotenv(override=False)

    ctx.ensure_object(dict)
    ctx.obj["config"] = get_config(config)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


cli.add_command(analyze)
cli.add_command(startup)
cli.add_command(tickers)
cli.add_command(analyses)
cli.add_command(db)


def main():
    """Main entry point for the CLI"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
