# backend/depotview/services/market_data/__init__.py
"""
Market data services package.

This package contains:
- Abstract interface for quote providers (base.py)
- Yahoo Finance implementation (yahoo.py)
- Normalization of raw quote payloads (normalize.py)

Usage:
    from depotview.services.market_data import (
        QuoteProvider,
        QuoteResult,
        YahooQuoteProvider,
        normalize_quotes,
    )

Architecture:
    QuoteProvider (ABC)
    └── YahooQuoteProvider (concrete)
"""

from depotview.services.market_data.base import (
    QuoteProvider,
    QuoteResult,
    unique_tickers,
)
from depotview.services.market_data.normalize import normalize_quotes
from depotview.services.market_data.yahoo import YahooQuoteProvider

__all__ = [
    # Abstract interface
    "QuoteProvider",
    "QuoteResult",
    "unique_tickers",
    # Payload normalization
    "normalize_quotes",
    # Concrete implementations
    "YahooQuoteProvider",
]
