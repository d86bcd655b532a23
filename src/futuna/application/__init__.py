"""
Application Layer

Batching, dispatch and the analyzer service.
"""

from futuna.application.analyzer_service import AnalyzerService, build_service
from futuna.application.batcher import make_batches
from futuna.application.dispatcher import AnalysisDispatcher, BatchOutcome, DispatchReport

__all__ = [
    "make_batches",
    "AnalysisDispatcher",
    "BatchOutcome",
    "DispatchReport",
    "AnalyzerService",
    "build_service",
]
