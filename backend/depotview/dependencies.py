# backend/depotview/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. The HTTP client of the transaction source keeps its
connection pool this way, and the quote provider is configured once.

Services are lazily initialized on first use to avoid import-time side effects.
Tests replace them via app.dependency_overrides.

Usage in routers:
    from depotview.dependencies import get_portfolio_service

    @router.get("/clients/{client_id}/portfolio")
    def get_portfolio(
        client_id: str,
        service: PortfolioService = Depends(get_portfolio_service),
    ):
        ...
"""

import logging
from functools import lru_cache

from depotview.config import settings
from depotview.services.constants import QUOTE_LOOKBACK_PERIOD
from depotview.services.market_data import QuoteProvider, YahooQuoteProvider
from depotview.services.portfolio import PortfolioService
from depotview.services.transactions import HttpTransactionSource, TransactionSource

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_quote_provider (no deps)
# 2. get_transaction_source (no deps)
# 3. get_portfolio_service (depends on both)


@lru_cache(maxsize=1)
def get_quote_provider() -> QuoteProvider:
    """Get the singleton quote provider instance."""
    logger.debug("Initializing singleton YahooQuoteProvider")
    return YahooQuoteProvider(
        timeout=settings.quote_provider_timeout,
        lookback=QUOTE_LOOKBACK_PERIOD,
    )


@lru_cache(maxsize=1)
def get_transaction_source() -> TransactionSource:
    """Get the singleton statement backend client."""
    logger.debug("Initializing singleton HttpTransactionSource")
    return HttpTransactionSource(
        base_url=settings.transactions_api_url,
        timeout=settings.transactions_api_timeout,
    )


@lru_cache(maxsize=1)
def get_portfolio_service() -> PortfolioService:
    """
    Get the singleton PortfolioService instance.

    The service itself is stateless; sharing it shares its collaborators.
    """
    logger.debug("Initializing singleton PortfolioService")
    return PortfolioService(
        transaction_source=get_transaction_source(),
        quote_provider=get_quote_provider(),
    )
