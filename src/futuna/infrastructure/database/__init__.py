"""
Database Infrastructure

Table definitions, connection management, writers and readers.
"""

from futuna.infrastructure.database.db import AnalysisRow, Base, DatabaseManager, RequestLogRow, TickerRow
from futuna.infrastructure.database.persister import AnalysisPersister
from futuna.infrastructure.database.result_store import ResultStore
from futuna.infrastructure.database.ticker_catalog import TickerCatalog

__all__ = [
    "Base",
    "TickerRow",
    "AnalysisRow",
    "RequestLogRow",
    "DatabaseManager",
    "TickerCatalog",
    "AnalysisPersister",
    "ResultStore",
]
