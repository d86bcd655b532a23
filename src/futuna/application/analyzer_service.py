"""
Analyzer Service

Wires catalog, batcher and dispatcher into one analysis run.
"""

import logging
from typing import Optional

from futuna.application.batcher import make_batches
from futuna.application.dispatcher import AnalysisDispatcher, DispatchReport
from futuna.application.processors import PayloadValidator
from futuna.config import AnalyzerSettings, FutunaConfig
from futuna.infrastructure.database import AnalysisPersister, DatabaseManager, TickerCatalog
from futuna.infrastructure.llm import ModelAdapter, OpenAIChatAdapter, RateLimitRetryAdapter

logger = logging.getLogger(__name__)


class AnalyzerService:
    """
    Runs ticker analysis end to end.

    Responsibilities:
    - Read the ticker universe
    - Split it into batches
    - Dispatch the batches and report the joined outcome
    """

    def __init__(
        self,
        catalog: TickerCatalog,
        adapter: ModelAdapter,
        persister: AnalysisPersister,
        validator: Optional[PayloadValidator] = None,
        settings: Optional[AnalyzerSettings] = None,
    ):
        self.settings = settings or AnalyzerSettings()
        self.catalog = catalog
        self.adapter = adapter
        self.persister = persister
        self.validator = validator or PayloadValidator(strict_enums=self.settings.strict_enums)

    async def analyze_all_and_store(
        self,
        timeout: Optional[float] = None,
        batch_size: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ) -> DispatchReport:
        """
        Analyze every ticker in the catalog and persist the results.

        The report's ``error`` holds the first failure; batches that finished
        before it stay committed.
        """
        tickers = self.catalog.list_tickers()
        batches = make_batches([t.symbol for t in tickers], batch_size or self.settings.batch_size)

        dispatcher = AnalysisDispatcher(
            adapter=self.adapter,
            persister=self.persister,
            validator=self.validator,
            max_concurrency=max_concurrency or self.settings.max_concurrency,
        )
        logger.info(f"Analyzing {len(tickers)} tickers in {len(batches)} batches")
        return await dispatcher.run(batches, timeout=timeout or self.settings.run_timeout_seconds)

    async def analyze_on_start(self, timeout: Optional[float] = None) -> Optional[DispatchReport]:
        """
        Boot-time run: records failures without raising so the hosting
        process keeps serving. Returns None when disabled in settings.
        """
        if not self.settings.analyze_on_start:
            logger.info("analyze_on_start disabled, skipping initial analysis")
            return None

        logger.info("Starting initial analysis")
        try:
            report = await self.analyze_all_and_store(timeout=timeout)
        except Exception as e:
            logger.exception(f"Initial analysis could not start: {e}")
            return None

        if report.ok:
            logger.info("Initial analysis completed")
        else:
            logger.error(f"Initial analysis finished with errors: {report.error}")
        return report


def build_service(config: FutunaConfig, db: DatabaseManager, adapter: Optional[ModelAdapter] = None) -> AnalyzerService:
    """Assemble the default service graph for a configuration and database"""
    if adapter is None:
        adapter = RateLimitRetryAdapter(
            OpenAIChatAdapter.from_settings(config.openai),
            attempts=config.openai.rate_limit_attempts,
            delay_seconds=config.openai.rate_limit_delay_seconds,
        )
    return AnalyzerService(
        catalog=TickerCatalog(db),
        adapter=adapter,
        persister=AnalysisPersister(db),
        validator=PayloadValidator(strict_enums=config.analyzer.strict_enums),
        settings=config.analyzer,
    )
