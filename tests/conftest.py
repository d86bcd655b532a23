"""Test configuration helpers and fixtures."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for candidate in (SRC, ROOT):
    candidate_str = str(candidate)
    if candidate.exists() and candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from futuna.infrastructure.database import DatabaseManager  # noqa: E402
from futuna.infrastructure.llm import ModelAdapter, ModelExchange  # noqa: E402


def ticker_entry(symbol: str, recommendation: str = "ACCUMULATE", confidence: Any = 80) -> Dict[str, Any]:
    return {
        "ticker": symbol,
        "short_term": {"recommendation": recommendation, "confidence": confidence, "reason": f"{symbol} momentum"},
        "long_term": {"recommendation": "HOLD", "confidence": 65, "reason": f"{symbol} fundamentals"},
        "strategies": [
            {"name": name, "stance": "FAVORABLE", "note": f"{name} note"}
            for name in ("Value", "Growth", "Momentum", "Dividend", "Swing")
        ],
        "overall": {"recommendation": recommendation, "confidence": 75, "reason": f"{symbol} overall"},
    }


def payload_text(symbols: List[str], as_of: str = "2024-01-15T08:00:00+07:00", **entry_kwargs) -> str:
    """Model-style output: JSON wrapped in prose and a code fence"""
    body = {
        "as_of": as_of,
        "tickers": [ticker_entry(s, **entry_kwargs) for s in symbols],
        "sources": ["https://example.com/a", "https://example.com/b"],
    }
    return "Here is the analysis:\n```json\n" + json.dumps(body) + "\n```\nNot investment advice."


class FakeAdapter(ModelAdapter):
    """
    Scripted model adapter.

    ``script`` maps the first symbol of a batch to either output text, an
    exception instance, or a list of those consumed one per call.
    """

    def __init__(self, script: Optional[Dict[str, Any]] = None, delay: float = 0.0):
        self.script = script or {}
        self.delay = delay
        self.calls: List[List[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def analyze(self, batch, is_cancelled=None):
        symbols = list(batch)
        self.calls.append(symbols)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            step = self.script.get(symbols[0], None)
            if isinstance(step, list):
                step = step.pop(0)
            if isinstance(step, Exception):
                raise step
            output = step if step is not None else payload_text(symbols)
            return ModelExchange(
                raw_request=json.dumps({"tickers": symbols}),
                raw_response=json.dumps({"content": output}),
                output=output,
                batch=symbols,
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def db(tmp_path: Path):
    manager = DatabaseManager(url=f"sqlite:///{tmp_path / 'futuna.db'}")
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def make_payload_text():
    return payload_text


@pytest.fixture
def fake_adapter_cls():
    return FakeAdapter
