"""
Domain models for tickers, batches and stored analyses
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Recommendation(Enum):
    """Recommendation values the analysis prompt asks for"""

    ACCUMULATE = "ACCUMULATE"
    HOLD = "HOLD"
    AVOID = "AVOID"


class Stance(Enum):
    """Stance of a trading strategy towards a ticker"""

    FAVORABLE = "FAVORABLE"
    NEUTRAL = "NEUTRAL"
    UNFAVORABLE = "UNFAVORABLE"


class BatchStatus(Enum):
    """Outcome of one batch within a run"""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Ticker:
    """A tradable symbol in the analysis universe"""

    symbol: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "name": self.name}


@dataclass(frozen=True)
class Batch:
    """Group of symbols submitted together in one model call"""

    index: int
    symbols: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.symbols)

    @property
    def label(self) -> str:
        return f"batch-{self.index}"


@dataclass
class AnalysisRecord:
    """One stored analysis row, keyed by (ticker, analyzed_at)"""

    id: int
    ticker: str
    analyzed_at: date
    short_term: str
    short_confidence: Optional[int]
    long_term: str
    long_confidence: Optional[int]
    strategies: List[Dict[str, Any]] = field(default_factory=list)
    overall: str = ""
    overall_confidence: Optional[int] = None
    sources: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output"""
        return {
            "id": self.id,
            "ticker": self.ticker,
            "date": self.analyzed_at.isoformat(),
            "short_term": self.short_term,
            "short_confidence": self.short_confidence,
            "long_term": self.long_term,
            "long_confidence": self.long_confidence,
            "strategies": self.strategies,
            "overall": self.overall,
            "overall_confidence": self.overall_confidence,
            "sources": self.sources,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
