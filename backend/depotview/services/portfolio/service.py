# backend/depotview/services/portfolio/service.py
"""
Portfolio Service - Main orchestrator for the portfolio view.

This is the single entry point for portfolio operations:
- value_transactions(): Pure valuation of given records and quotes
- get_portfolio(): Load a client's records, fetch quotes, value them
- get_transactions(): A client's transaction history, sorted

Design Principles:
- Dependency Injection: transaction source and quote provider injected
  via constructor
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
- Composable: Uses the stateless calculators for each step
- Degrade, don't fail: an unreachable quote provider yields a portfolio
  valued at cost basis plus a warning

Usage:
    from depotview.services.portfolio import PortfolioService

    service = PortfolioService(transaction_source=source, quote_provider=provider)

    snapshot = service.get_portfolio("C1", asset_type="ETF", sort_by="total_value", direction="desc")
    snapshot.totals.profit_loss.amount

    # No I/O
    snapshot = service.value_transactions(records, {"AAPL": Decimal("170")})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from depotview.services.exceptions import MarketDataError, ServiceError
from depotview.services.market_data.base import unique_tickers
from depotview.services.portfolio.calculators import HoldingsAggregator, HoldingValuator
from depotview.services.portfolio.types import (
    Holding,
    PortfolioSnapshot,
    TransactionRecord,
)
from depotview.services.portfolio.views import (
    HOLDING_SORT_FIELDS,
    SORT_ASCENDING,
    SORT_DESCENDING,
    HoldingsView,
    normalize_direction,
    resolve_sort_field,
    sort_transactions,
)
from depotview.utils.numbers import ZERO

if TYPE_CHECKING:
    from depotview.services.market_data.base import QuoteProvider
    from depotview.services.transactions.source import TransactionSource

logger = logging.getLogger(__name__)


class PortfolioService:
    """
    Main service for portfolio operations.

    Attributes:
        _source: Where transaction records come from
        _provider: Where quotes come from
        _aggregator: Transactions -> holdings
        _valuator: Holdings + quotes -> enriched holdings and totals
        _view: Filter and sort for display
    """

    def __init__(
            self,
            transaction_source: TransactionSource | None = None,
            quote_provider: QuoteProvider | None = None,
            aggregator: HoldingsAggregator | None = None,
            valuator: HoldingValuator | None = None,
            view: HoldingsView | None = None,
    ) -> None:
        self._source = transaction_source
        self._provider = quote_provider
        self._aggregator = aggregator or HoldingsAggregator()
        self._valuator = valuator or HoldingValuator()
        self._view = view or HoldingsView()

        logger.info("PortfolioService initialized")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def value_transactions(
            self,
            transactions: Sequence[TransactionRecord],
            quotes: Mapping[str, Any] | None = None,
            asset_type: str | None = None,
            sort_by: str | None = None,
            direction: str | None = SORT_ASCENDING,
    ) -> PortfolioSnapshot:
        """
        Value transaction records against a quote map (no I/O).

        Args:
            transactions: Statement lines
            quotes: Ticker -> last price (None or {} means "no quotes")
            asset_type: Type filter for the view ("All"/None for none)
            sort_by: Sort field for the view (None keeps aggregation order)
            direction: 'asc' or 'desc'

        Returns:
            PortfolioSnapshot; totals cover all holdings, not just the view

        Raises:
            InvalidSortFieldError: Unknown sort field
            InvalidSortDirectionError: Unknown direction
        """
        self._validate_view_params(sort_by, direction)

        holdings = self._aggregator.aggregate(transactions)
        return self._build_snapshot(holdings, quotes or {}, asset_type, sort_by, direction)

    def get_portfolio(
            self,
            client_id: str,
            asset_type: str | None = None,
            sort_by: str | None = None,
            direction: str | None = SORT_ASCENDING,
    ) -> PortfolioSnapshot:
        """
        Load, price and project a client's portfolio.

        View parameters are validated before any upstream call.

        Raises:
            InvalidSortFieldError / InvalidSortDirectionError: Bad view parameters
            ClientNotFoundError: Unknown client
            TransactionSourceError: Statement backend failed
        """
        self._validate_view_params(sort_by, direction)

        transactions = self._require_source().get_transactions(client_id)
        holdings = self._aggregator.aggregate(transactions)

        quotes, fetch_warnings = self._fetch_quotes(holdings)
        snapshot = self._build_snapshot(holdings, quotes, asset_type, sort_by, direction)
        snapshot.warnings[:0] = fetch_warnings

        logger.info(
            f"Portfolio for client {client_id}: {snapshot.totals.total_holdings} holdings, "
            f"{snapshot.totals.quoted_holdings} quoted, value {snapshot.totals.current_value}"
        )
        return snapshot

    def get_transactions(
            self,
            client_id: str,
            sort_by: str | None = "date",
            direction: str | None = SORT_DESCENDING,
    ) -> list[TransactionRecord]:
        """
        A client's transaction history (newest first by default).

        Raises:
            InvalidSortFieldError / InvalidSortDirectionError: Bad view parameters
            ClientNotFoundError: Unknown client
            TransactionSourceError: Statement backend failed
        """
        # Fail fast on bad parameters, before the upstream call
        sort_transactions([], sort_by, direction)

        transactions = self._require_source().get_transactions(client_id)
        return sort_transactions(transactions, sort_by, direction)

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _build_snapshot(
            self,
            holdings: list[Holding],
            quotes: Mapping[str, Any],
            asset_type: str | None,
            sort_by: str | None,
            direction: str | None,
    ) -> PortfolioSnapshot:
        enriched = self._valuator.enrich(holdings, quotes)
        totals = self._valuator.totals(enriched)

        return PortfolioSnapshot(
            holdings=enriched,
            view=self._view.project(enriched, asset_type, sort_by, direction),
            asset_types=self._view.unique_types(enriched),
            totals=totals,
            weights={
                h.identity_key: self._valuator.weight(h, totals.current_value)
                for h in enriched
            },
            warnings=self._collect_warnings(enriched),
        )

    def _fetch_quotes(self, holdings: Sequence[Holding]) -> tuple[dict[str, Decimal], list[str]]:
        """
        Fetch quotes for all tickers in one call.

        A provider failure is not fatal: it is logged, reported as a
        warning and the portfolio is valued without quotes.
        """
        tickers = unique_tickers(h.ticker for h in holdings)
        if not tickers or self._provider is None:
            return {}, []

        try:
            result = self._provider.get_quotes(tickers)
        except MarketDataError as e:
            logger.warning(f"Quote fetch failed, valuing at cost basis: {e}")
            return {}, [f"Market data unavailable ({e.message}); holdings are shown at cost basis"]

        return result.quotes, []

    @staticmethod
    def _collect_warnings(holdings: Sequence[Holding]) -> list[str]:
        warnings = []

        for holding in holdings:
            if not holding.ticker:
                warnings.append(f"No ticker for {holding.name}; shown at cost basis")
            elif not holding.is_quoted:
                warnings.append(f"No quote for {holding.ticker} ({holding.name}); shown at cost basis")

            if holding.quantity == ZERO:
                warnings.append(f"Position {holding.name} has quantity 0")

        return warnings

    def _require_source(self) -> TransactionSource:
        if self._source is None:
            raise ServiceError("No transaction source configured")
        return self._source

    @staticmethod
    def _validate_view_params(sort_by: str | None, direction: str | None) -> None:
        normalize_direction(direction)
        if sort_by:
            resolve_sort_field(sort_by, HOLDING_SORT_FIELDS)
