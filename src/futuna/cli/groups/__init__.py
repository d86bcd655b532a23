"""
CLI command groups for Futuna
"""

from .analyses import analyses
from .analyze import analyze, startup
from .db import db
from .tickers import tickers

__all__ = ["analyses", "analyze", "startup", "db", "tickers"]
