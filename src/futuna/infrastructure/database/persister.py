"""
Analysis Persister

Sole writer of tickers, analyses and request_logs. Every ticker in a batch
payload is committed in its own transaction: the ticker row is inserted if
absent, then the (ticker, analyzed_at) analysis row is inserted or, on
conflict, overwritten with the fresh values.
"""

import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from futuna.domain.exceptions import PersistenceError
from futuna.domain.models import AnalysisBatchPayload, TickerAnalysis
from futuna.infrastructure.database.db import AnalysisRow, DatabaseManager, RequestLogRow, TickerRow
from futuna.infrastructure.llm.llm_interfaces import ModelExchange
from futuna.infrastructure.utils import json_document

logger = logging.getLogger(__name__)

MIN_EXPECTED_STRATEGIES = 5

UPDATABLE_COLUMNS = (
    "short_term",
    "short_confidence",
    "long_term",
    "long_confidence",
    "strategies",
    "overall",
    "overall_confidence",
    "sources",
)


class AnalysisPersister:
    """Writes audit rows and idempotent per-ticker analysis rows"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def log_exchange(self, exchange: ModelExchange) -> None:
        """Append the raw request/response of one model call to request_logs"""
        try:
            with self.db.get_session() as session:
                session.add(
                    RequestLogRow(
                        request=json_document(exchange.raw_request),
                        response=json_document(exchange.raw_response),
                    )
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write request log: {e}", batch=exchange.batch) from e

        logger.debug("Logged model exchange for %s", ",".join(exchange.batch))

    def commit(self, payload: AnalysisBatchPayload, analysis_date: date) -> int:
        """
        Upsert every ticker analysis of a batch payload.

        Args:
            payload: validated batch payload
            analysis_date: day key shared by all rows of the batch

        Returns:
            Number of analysis rows written

        Raises:
            PersistenceError: on connectivity loss or constraint violation
        """
        written = 0
        for item in payload.tickers:
            self._commit_one(item, payload.sources, analysis_date)
            written += 1

        logger.info(f"Stored {written} analyses for {analysis_date.isoformat()}")
        return written

    def _commit_one(self, item: TickerAnalysis, sources, analysis_date: date) -> None:
        if len(item.strategies) < MIN_EXPECTED_STRATEGIES:
            logger.warning(
                "Ticker %s has %d strategies, expected at least %d",
                item.ticker,
                len(item.strategies),
                MIN_EXPECTED_STRATEGIES,
            )

        ticker_stmt = (
            self.db.insert(TickerRow.__table__)
            .values(symbol=item.ticker, name=item.ticker)
            .on_conflict_do_nothing(index_elements=["symbol"])
        )

        values = {
            "ticker": item.ticker,
            "analyzed_at": analysis_date,
            "short_term": item.short_term.summary(),
            "short_confidence": item.short_term.confidence,
            "long_term": item.long_term.summary(),
            "long_confidence": item.long_term.confidence,
            "strategies": [strategy.model_dump() for strategy in item.strategies],
            "overall": item.overall.summary(),
            "overall_confidence": item.overall.confidence,
            "sources": list(sources),
        }
        analysis_stmt = self.db.insert(AnalysisRow.__table__).values(**values)
        update = {column: analysis_stmt.excluded[column] for column in UPDATABLE_COLUMNS}
        update["created_at"] = func.now()
        analysis_stmt = analysis_stmt.on_conflict_do_update(
            index_elements=["ticker", "analyzed_at"],
            set_=update,
        )

        try:
            with self.db.get_session() as session:
                session.execute(ticker_stmt)
                session.execute(analysis_stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to store analysis for {item.ticker}: {e}", batch=[item.ticker]) from e
