# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Transaction record factory
- Mock quote provider and mock transaction source
- Portfolio service wired to the mocks
- API test client with dependency overrides
"""

import os

# Set environment BEFORE importing depotview modules (settings load on import)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_NAME", "Test App")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from decimal import Decimal
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from depotview.services.exceptions import ClientNotFoundError
from depotview.services.market_data.base import QuoteProvider, QuoteResult, unique_tickers
from depotview.services.portfolio import PortfolioService
from depotview.services.portfolio.types import TransactionRecord
from depotview.services.transactions.source import TransactionSource


# =============================================================================
# TRANSACTION FACTORY
# =============================================================================

def build_transaction(
        asset: str = "Apple Inc.",
        isin: str = "US0378331005",
        ticker: str = "AAPL",
        asset_type: str = "Stock",
        quantity: Any = "10",
        unit_price: Any = "150",
        total_value: Any = None,
        client_id: str = "C1",
        transaction_id: str = "T1",
        date: str = "2024-01-15",
) -> TransactionRecord:
    """
    Build a TransactionRecord with sensible defaults.

    total_value defaults to quantity × unit_price.
    """
    quantity = Decimal(str(quantity))
    unit_price = Decimal(str(unit_price))
    total_value = quantity * unit_price if total_value is None else Decimal(str(total_value))

    return TransactionRecord(
        client_id=client_id,
        transaction_id=transaction_id,
        date=date,
        asset=asset,
        isin=isin,
        ticker=ticker,
        asset_type=asset_type,
        quantity=quantity,
        unit_price=unit_price,
        total_value=total_value,
    )


@pytest.fixture
def make_transaction() -> Callable[..., TransactionRecord]:
    """Factory fixture for TransactionRecords."""
    return build_transaction


@pytest.fixture
def sample_transactions() -> list[TransactionRecord]:
    """
    A small mixed depot:
    - Apple bought twice (10 @ 150, 5 @ 160)
    - An MSCI World ETF
    - A bond without ticker
    """
    return [
        build_transaction(transaction_id="T1", date="2024-01-15", quantity="10", unit_price="150"),
        build_transaction(
            asset="iShares Core MSCI World", isin="IE00B4L5Y983", ticker="EUNL",
            asset_type="ETF", quantity="20", unit_price="80", transaction_id="T2",
            date="2024-02-01",
        ),
        build_transaction(transaction_id="T3", date="2024-03-10", quantity="5", unit_price="160"),
        build_transaction(
            asset="Bund 2030", isin="DE0001102507", ticker="", asset_type="Bond",
            quantity="1000", unit_price="0.98", transaction_id="T4", date="2024-04-02",
        ),
    ]


# =============================================================================
# MOCK QUOTE PROVIDER
# =============================================================================

class MockQuoteProvider(QuoteProvider):
    """
    Mock implementation of QuoteProvider for testing.

    Allows configuring prices per ticker and simulating errors.
    """

    def __init__(self):
        self._prices: dict[str, Decimal] = {}
        self._error: Exception | None = None
        self._available = True
        self.call_count = 0
        self.requested: list[list[str]] = []

    @property
    def name(self) -> str:
        return "mock"

    def set_price(self, ticker: str, price: Any) -> None:
        """Configure a price for a ticker."""
        self._prices[ticker.upper()] = Decimal(str(price))

    def set_error(self, error: Exception | None) -> None:
        """Make every get_quotes call raise error (None to stop)."""
        self._error = error

    def set_available(self, available: bool) -> None:
        self._available = available

    def is_available(self) -> bool:
        return self._available

    def get_quotes(self, tickers: list[str]) -> QuoteResult:
        self.call_count += 1
        symbols = unique_tickers(tickers)
        self.requested.append(symbols)

        if self._error is not None:
            raise self._error

        result = QuoteResult()
        for symbol in symbols:
            if symbol in self._prices:
                result.quotes[symbol] = self._prices[symbol]
            else:
                result.missing.append(symbol)
        return result


# =============================================================================
# MOCK TRANSACTION SOURCE
# =============================================================================

class MockTransactionSource(TransactionSource):
    """In-memory transaction source; unknown clients raise ClientNotFoundError."""

    def __init__(self):
        self._transactions: dict[str, list[TransactionRecord]] = {}
        self._error: Exception | None = None
        self.call_count = 0

    def add(self, client_id: str, transactions: list[TransactionRecord]) -> None:
        self._transactions[client_id] = list(transactions)

    def set_error(self, error: Exception | None) -> None:
        self._error = error

    def get_transactions(self, client_id: str) -> list[TransactionRecord]:
        self.call_count += 1

        if self._error is not None:
            raise self._error

        if client_id not in self._transactions:
            raise ClientNotFoundError(client_id)

        return list(self._transactions[client_id])


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def mock_provider() -> MockQuoteProvider:
    """Quote provider with Apple and the MSCI World ETF priced."""
    provider = MockQuoteProvider()
    provider.set_price("AAPL", "170")
    provider.set_price("EUNL", "90")
    return provider


@pytest.fixture
def mock_source(sample_transactions) -> MockTransactionSource:
    """Transaction source knowing client C1."""
    source = MockTransactionSource()
    source.add("C1", sample_transactions)
    return source


@pytest.fixture
def portfolio_service(mock_source, mock_provider) -> PortfolioService:
    return PortfolioService(transaction_source=mock_source, quote_provider=mock_provider)


# =============================================================================
# API FIXTURES
# =============================================================================

@pytest.fixture
def client(portfolio_service, mock_provider) -> Iterator[TestClient]:
    """TestClient with the service dependencies replaced by mocks."""
    from depotview.dependencies import get_portfolio_service, get_quote_provider
    from depotview.main import app

    app.dependency_overrides[get_portfolio_service] = lambda: portfolio_service
    app.dependency_overrides[get_quote_provider] = lambda: mock_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
