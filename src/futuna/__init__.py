"""
Futuna - batch AI analysis of stock tickers with idempotent storage.
"""

__version__ = "0.1.0"
