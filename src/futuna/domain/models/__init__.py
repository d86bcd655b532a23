"""
Domain Models

Core data structures for tickers, batches, stored analyses and model payloads.
"""

from futuna.domain.models.analysis import (
    AnalysisRecord,
    Batch,
    BatchStatus,
    Recommendation,
    Stance,
    Ticker,
)
from futuna.domain.models.payload import AnalysisBatchPayload, Assessment, Strategy, TickerAnalysis

__all__ = [
    "Recommendation",
    "Stance",
    "BatchStatus",
    "Ticker",
    "Batch",
    "AnalysisRecord",
    "Assessment",
    "Strategy",
    "TickerAnalysis",
    "AnalysisBatchPayload",
]
