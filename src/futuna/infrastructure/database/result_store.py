"""
Result Store - read side consumed by the serving layer.
"""

import logging
from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from futuna.domain.exceptions import PersistenceError
from futuna.domain.models import AnalysisRecord, Ticker
from futuna.infrastructure.database.db import AnalysisRow, DatabaseManager, TickerRow
from futuna.infrastructure.utils import safe_json_loads

logger = logging.getLogger(__name__)


def _json_list(value) -> list:
    if value is None:
        return []
    try:
        decoded = safe_json_loads(value)
    except (TypeError, ValueError):
        return []
    return decoded if isinstance(decoded, list) else []


class ResultStore:
    """Pure reads over stored analyses and tickers"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def list_analyses(self, analysis_date: date) -> List[AnalysisRecord]:
        """Analyses stored for one day, ordered by ticker"""
        stmt = select(AnalysisRow).where(AnalysisRow.analyzed_at == analysis_date).order_by(AnalysisRow.ticker)
        try:
            with self.db.get_session() as session:
                rows = session.execute(stmt).scalars().all()
                return [
                    AnalysisRecord(
                        id=row.id,
                        ticker=row.ticker,
                        analyzed_at=row.analyzed_at,
                        short_term=row.short_term or "",
                        short_confidence=row.short_confidence,
                        long_term=row.long_term or "",
                        long_confidence=row.long_confidence,
                        strategies=_json_list(row.strategies),
                        overall=row.overall or "",
                        overall_confidence=row.overall_confidence,
                        sources=_json_list(row.sources),
                        created_at=row.created_at,
                    )
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list analyses for {analysis_date}: {e}") from e

    def list_tickers(self) -> List[Ticker]:
        """All tickers ordered by symbol"""
        try:
            with self.db.get_session() as session:
                rows = session.execute(select(TickerRow).order_by(TickerRow.symbol)).scalars().all()
                return [Ticker(symbol=row.symbol, name=row.name) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list tickers: {e}") from e

    def list_analysis_dates(self) -> List[date]:
        """Distinct analysis dates, newest first"""
        stmt = select(AnalysisRow.analyzed_at).distinct().order_by(AnalysisRow.analyzed_at.desc())
        try:
            with self.db.get_session() as session:
                return [row[0] for row in session.execute(stmt).all()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list analysis dates: {e}") from e
