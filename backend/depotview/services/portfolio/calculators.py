# backend/depotview/services/portfolio/calculators.py
"""
Point-in-time portfolio calculators.

Each calculator does one thing:
- HoldingsAggregator: Folds transaction records into holdings
- HoldingValuator: Merges live quotes into holdings and computes totals

Design Principles:
- Stateless (no instance state, pure functions over explicit inputs)
- Never mutate inputs; every call returns fresh Holding objects
- Never raise on data problems; degrade to a displayable result
- Decimal for ALL financial calculations

Usage:
    aggregator = HoldingsAggregator()
    holdings = aggregator.aggregate(transactions)

    valuator = HoldingValuator()
    enriched = valuator.enrich(holdings, {"AAPL": Decimal("170")})
    totals = valuator.totals(enriched)
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from depotview.services.portfolio.types import (
    Holding,
    PortfolioTotals,
    ProfitLoss,
    TransactionRecord,
)
from depotview.utils.numbers import ZERO, to_decimal_or_zero, to_positive_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


# =============================================================================
# HOLDINGS AGGREGATOR
# =============================================================================

class HoldingsAggregator:
    """
    Aggregates transaction records into holdings.

    Records sharing an identity key (ISIN, else instrument name) contribute
    to one holding:
    - quantity    = Σ record.quantity
    - total_value = Σ record.total_value (not recomputed, keeps the
                    rounding of the statement lines)
    - unit_price  = total_value ÷ quantity, recomputed after every record

    Note:
        Quantities are added as supplied. A sell that arrives with a
        positive quantity increases the position; netting is left to the
        statement backend.

        When the running quantity reaches zero the weighted average is
        undefined, so the last price computed from a nonzero quantity is
        kept.
    """

    def aggregate(self, transactions: Iterable[TransactionRecord]) -> list[Holding]:
        """
        Aggregate records into holdings.

        Args:
            transactions: Records in any order (empty is fine)

        Returns:
            Holdings in order of first occurrence of each key
        """
        holdings_state: dict[str, dict[str, Any]] = {}

        for transaction in transactions:
            self.apply_transaction(holdings_state, transaction)

        holdings = self.state_to_holdings(holdings_state)
        logger.debug(f"Aggregated {len(holdings)} holdings")
        return holdings

    def apply_transaction(
            self,
            holdings_state: dict[str, dict[str, Any]],
            transaction: TransactionRecord,
    ) -> None:
        """
        Apply a single record to the running state (mutates holdings_state).

        holdings_state[key] contains:
            {
                'name': str, 'isin': str, 'ticker': str, 'asset_type': str,
                'quantity': Decimal, 'unit_price': Decimal, 'total_value': Decimal,
            }
        """
        key = transaction.identity_key
        quantity = to_decimal_or_zero(transaction.quantity)
        total_value = to_decimal_or_zero(transaction.total_value)

        if key not in holdings_state:
            holdings_state[key] = {
                "name": transaction.asset or "",
                "isin": transaction.isin or "",
                "ticker": transaction.ticker or "",
                "asset_type": transaction.asset_type or "",
                "quantity": quantity,
                "unit_price": to_decimal_or_zero(transaction.unit_price),
                "total_value": total_value,
            }
            return

        state = holdings_state[key]
        state["quantity"] += quantity
        state["total_value"] += total_value

        # First non-blank value wins; later records only fill gaps
        for attr, value in (
                ("ticker", transaction.ticker),
                ("asset_type", transaction.asset_type),
                ("name", transaction.asset),
        ):
            if not state[attr] and value:
                state[attr] = value

        if state["quantity"] != ZERO:
            state["unit_price"] = state["total_value"] / state["quantity"]
        else:
            logger.debug(
                f"Position {key} closed (quantity 0), keeping unit price {state['unit_price']}"
            )

    def state_to_holdings(self, holdings_state: dict[str, dict[str, Any]]) -> list[Holding]:
        """Convert running state into Holding objects (insertion order)."""
        return [
            Holding(
                name=state["name"],
                isin=state["isin"],
                ticker=state["ticker"],
                asset_type=state["asset_type"],
                quantity=state["quantity"],
                unit_price=state["unit_price"],
                total_value=state["total_value"],
            )
            for state in holdings_state.values()
        ]


# =============================================================================
# HOLDING VALUATOR
# =============================================================================

class HoldingValuator:
    """
    Combines holdings with a quote map and computes portfolio figures.

    Formula (per quoted holding):
        current_total_value = quantity × current_price
        price_change        = current_price − unit_price
        percent_change      = price_change ÷ unit_price × 100

    A quote is usable only if it is a finite number > 0. Anything else
    means "no quote": the holding passes through without market fields and
    counts at cost basis in the portfolio totals.
    """

    def enrich(
            self,
            holdings: Sequence[Holding],
            quotes: Mapping[str, Any],
    ) -> list[Holding]:
        """
        Merge quotes into holdings.

        Args:
            holdings: Holdings from the aggregator (not modified)
            quotes: Ticker -> last price

        Returns:
            New holdings, same order. The result depends only on the
            holdings' cost-basis fields and the quote map, so calling this
            again with a fresh map replaces earlier market data.
        """
        return [
            self.enrich_holding(holding, self._lookup_quote(holding.ticker, quotes))
            for holding in holdings
        ]

    def enrich_holding(self, holding: Holding, price: Decimal | None) -> Holding:
        """Return a copy of holding with market fields set from price (or cleared)."""
        if price is None:
            return dataclasses.replace(
                holding,
                current_price=None,
                current_total_value=None,
                price_change=None,
                percent_change=None,
            )

        price_change = price - holding.unit_price

        # Guard against division by zero (free asset)
        if holding.unit_price == ZERO:
            percent_change = None
        else:
            percent_change = price_change / holding.unit_price * HUNDRED

        return dataclasses.replace(
            holding,
            current_price=price,
            current_total_value=holding.quantity * price,
            price_change=price_change,
            percent_change=percent_change,
        )

    @staticmethod
    def _lookup_quote(ticker: str, quotes: Mapping[str, Any]) -> Decimal | None:
        """Find a usable quote for ticker (exact, then normalized symbol)."""
        if not ticker:
            return None

        raw = quotes.get(ticker)
        if raw is None:
            raw = quotes.get(ticker.strip().upper())

        return to_positive_decimal(raw)

    # =========================================================================
    # PORTFOLIO FIGURES
    # =========================================================================

    def cost_basis(self, holdings: Iterable[Holding]) -> Decimal:
        """Sum of holding total values."""
        return sum((h.total_value for h in holdings), ZERO)

    def current_value(self, holdings: Iterable[Holding]) -> Decimal:
        """
        Sum of market values.

        Unquoted holdings count at cost basis, so a failed or partial quote
        fetch never zeroes out the portfolio.
        """
        return sum((h.market_value for h in holdings), ZERO)

    def profit_loss(self, cost_basis: Any, current_value: Any) -> ProfitLoss:
        """
        Calculate profit/loss.

        Returns:
            ProfitLoss with amount = current − cost and percentage relative
            to cost. Percentage is an explicit 0 when cost basis is not
            positive.
        """
        cost_basis = to_decimal_or_zero(cost_basis)
        current_value = to_decimal_or_zero(current_value)

        amount = current_value - cost_basis
        if cost_basis > ZERO:
            percentage = amount / cost_basis * HUNDRED
        else:
            percentage = ZERO

        return ProfitLoss(amount=amount, percentage=percentage)

    def totals(self, holdings: Sequence[Holding]) -> PortfolioTotals:
        """Portfolio-level cost basis, current value and P&L."""
        cost_basis = self.cost_basis(holdings)
        current_value = self.current_value(holdings)

        return PortfolioTotals(
            cost_basis=cost_basis,
            current_value=current_value,
            profit_loss=self.profit_loss(cost_basis, current_value),
            quoted_holdings=sum(1 for h in holdings if h.is_quoted),
            total_holdings=len(holdings),
        )

    def weight(self, holding: Holding, portfolio_value: Decimal) -> Decimal:
        """Share of the portfolio in percent (0 if the portfolio value is not positive)."""
        if portfolio_value <= ZERO:
            return ZERO
        return holding.market_value / portfolio_value * HUNDRED
