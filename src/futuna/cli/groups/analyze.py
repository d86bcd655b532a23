"""
Analysis run commands for Futuna CLI
"""

import asyncio
import logging

import click

from futuna.application import DispatchReport, build_service
from futuna.domain.exceptions import FutunaError

from ..utils import error_exit, get_config, open_database

logger = logging.getLogger(__name__)


def _echo_report(report: DispatchReport):
    click.echo(
        f"Batches: {len(report.completed)} completed, {len(report.failed)} failed, "
        f"{len(report.cancelled)} cancelled | analyses stored: {report.rows_written}"
    )


@click.command("analyze")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Overall run deadline in seconds")
@click.option("--batch-size", type=click.IntRange(min=1), help="Tickers per model call")
@click.option("--concurrency", type=click.IntRange(min=1), help="Maximum model calls in flight")
@click.pass_context
def analyze(ctx, timeout, batch_size, concurrency):
    """Analyze every ticker in the catalog and store the results

    Exits with status 1 when any batch failed. Batches that completed
    before the failure stay stored.

    Examples:
        futuna analyze
        futuna analyze --batch-size 3 --concurrency 2 --timeout 600
    """
    config = get_config(ctx)

    async def run_analysis():
        with open_database(ctx) as db:
            service = build_service(config, db)
            try:
                return await service.analyze_all_and_store(
                    timeout=timeout, batch_size=batch_size, max_concurrency=concurrency
                )
            finally:
                await service.adapter.close()

    try:
        report = asyncio.run(run_analysis())
    except FutunaError as e:
        logger.error(f"Analysis could not start: {e}")
        error_exit(str(e))

    _echo_report(report)
    if not report.ok:
        error_exit(f"Analysis failed: {report.error}")
    click.echo("Analysis completed")


@click.command("startup")
@click.pass_context
def startup(ctx):
    """Boot-time analysis honoring analyzer.analyze_on_start

    Failures are logged but never turn into a non-zero exit status.
    """
    config = get_config(ctx)

    async def run_startup():
        with open_database(ctx) as db:
            service = build_service(config, db)
            try:
                return await service.analyze_on_start()
            finally:
                await service.adapter.close()

    report = asyncio.run(run_startup())
    if report is None:
        click.echo("Initial analysis skipped")
        return
    _echo_report(report)
