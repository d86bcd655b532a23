"""
Ticker Catalog - the symbol universe an analysis run covers.

Usage:
    from futuna.infrastructure.database.ticker_catalog import TickerCatalog

    catalog = TickerCatalog(db)
    symbols = [t.symbol for t in catalog.list_tickers()]
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from futuna.domain.exceptions import PersistenceError
from futuna.domain.models import Ticker
from futuna.infrastructure.database.db import DatabaseManager, TickerRow

logger = logging.getLogger(__name__)


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


class TickerCatalog:
    """Read access to the ticker universe, plus seeding for fresh databases."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def list_tickers(self) -> List[Ticker]:
        """
        Get every ticker ordered by symbol.

        Returns:
            List of Ticker, no filtering applied

        Raises:
            PersistenceError: storage is unavailable
        """
        try:
            with self.db.get_session() as session:
                rows = session.execute(select(TickerRow).order_by(TickerRow.symbol)).scalars().all()
                tickers = [Ticker(symbol=row.symbol, name=row.name) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list tickers: {e}") from e

        logger.info(f"Found {len(tickers)} tickers in catalog")
        return tickers

    def add_tickers(self, symbols: Iterable[str], names: Optional[Dict[str, str]] = None) -> int:
        """
        Insert symbols that are not in the catalog yet.

        Args:
            symbols: ticker symbols, normalized to upper case
            names: optional display names keyed by symbol

        Returns:
            Number of newly inserted tickers
        """
        names = {normalize_symbol(k): v for k, v in (names or {}).items()}
        wanted = []
        for symbol in symbols:
            normalized = normalize_symbol(symbol)
            if normalized and normalized not in wanted:
                wanted.append(normalized)
        if not wanted:
            return 0

        table = TickerRow.__table__
        values = [{"symbol": s, "name": names.get(s, s)} for s in wanted]
        stmt = self.db.insert(table).values(values).on_conflict_do_nothing(index_elements=["symbol"])

        try:
            with self.db.get_session() as session:
                result = session.execute(stmt)
                inserted = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(wanted)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to add tickers: {e}") from e

        logger.info(f"Added {inserted} of {len(wanted)} tickers to catalog")
        return inserted
