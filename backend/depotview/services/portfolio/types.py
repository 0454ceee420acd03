# backend/depotview/services/portfolio/types.py
"""
Internal data types for the portfolio engine.

These dataclasses are used by the calculators and the service.
They are NOT Pydantic schemas - those live in depotview/schemas/ for
API serialization.

Design Principles:
- Immutable (frozen=True): the engine never mutates its inputs and every
  pass produces fresh objects
- Decimal for ALL financial values (never float)
- Optional market fields use None, never zero

Type Hierarchy:
    TransactionRecord  - One buy/sell line from a statement
    Holding            - Aggregated position in one instrument
    ProfitLoss         - Absolute and relative gain/loss
    PortfolioTotals    - Cost basis, current value and P&L of all holdings
    PortfolioSnapshot  - Everything one valuation pass produces
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


def identity_key(isin: str, name: str) -> str:
    """Holdings are keyed by ISIN when present, else by instrument name."""
    isin = (isin or "").strip()
    return isin if isin else (name or "").strip()


# =============================================================================
# TRANSACTIONS
# =============================================================================

@dataclass(frozen=True)
class TransactionRecord:
    """
    One buy/sell line as delivered by the statement backend.

    Attributes:
        client_id: Depot / client identifier
        transaction_id: Identifier, unique within the client
        date: Trade date as delivered (ISO or statement format)
        asset: Instrument display name
        isin: ISIN, may be empty
        ticker: Ticker symbol, may be empty
        asset_type: Instrument type label (e.g. "Stock", "ETF")
        quantity: Units traded
        unit_price: Price per unit in the currency of record
        total_value: Amount of the line; supplied independently and never
                     recomputed from quantity × unit_price
    """

    client_id: str
    transaction_id: str
    date: str
    asset: str
    isin: str
    ticker: str
    asset_type: str
    quantity: Decimal
    unit_price: Decimal
    total_value: Decimal

    @property
    def identity_key(self) -> str:
        return identity_key(self.isin, self.asset)


# =============================================================================
# HOLDINGS
# =============================================================================

@dataclass(frozen=True)
class Holding:
    """
    Aggregated position in one instrument.

    Cost-basis fields are produced by HoldingsAggregator. Market fields are
    produced by HoldingValuator.enrich and are either all set or all None
    (percent_change alone may stay None when unit_price is zero, since the
    change relative to a zero price is undefined).

    Attributes:
        name: Instrument display name (first seen)
        isin: ISIN, may be empty
        ticker: Ticker used for quote lookup, may be empty
        asset_type: Instrument type label
        quantity: Sum of contributing quantities
        unit_price: Weighted average price (total_value ÷ quantity)
        total_value: Sum of contributing total values (cost basis)
        current_price: Latest market price
        current_total_value: quantity × current_price
        price_change: current_price − unit_price
        percent_change: price_change ÷ unit_price × 100
    """

    name: str
    isin: str
    ticker: str
    asset_type: str
    quantity: Decimal
    unit_price: Decimal
    total_value: Decimal
    current_price: Decimal | None = None
    current_total_value: Decimal | None = None
    price_change: Decimal | None = None
    percent_change: Decimal | None = None

    @property
    def identity_key(self) -> str:
        return identity_key(self.isin, self.name)

    @property
    def is_quoted(self) -> bool:
        """True if a market price has been merged in."""
        return self.current_price is not None

    @property
    def market_value(self) -> Decimal:
        """Current total value, falling back to cost basis when unquoted."""
        if self.current_total_value is not None:
            return self.current_total_value
        return self.total_value


# =============================================================================
# PORTFOLIO RESULTS
# =============================================================================

@dataclass(frozen=True)
class ProfitLoss:
    """
    Gain or loss of current value over cost basis.

    Attributes:
        amount: current_value − cost_basis
        percentage: amount ÷ cost_basis × 100, or 0 when cost basis is not positive
    """

    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class PortfolioTotals:
    """
    Portfolio-level figures for the summary display.

    Attributes:
        cost_basis: Sum of holding total values
        current_value: Sum of market values (cost basis fallback per holding)
        profit_loss: current_value vs cost_basis
        quoted_holdings: Holdings with a market price
        total_holdings: All holdings
    """

    cost_basis: Decimal
    current_value: Decimal
    profit_loss: ProfitLoss
    quoted_holdings: int
    total_holdings: int

    @property
    def has_complete_quotes(self) -> bool:
        return self.quoted_holdings == self.total_holdings


@dataclass
class PortfolioSnapshot:
    """
    Result of one valuation pass.

    Attributes:
        holdings: All enriched holdings in aggregation order (totals are
                  computed over these, not over the filtered view)
        view: Holdings after type filter and sort
        asset_types: Filter options ("All" first)
        totals: Portfolio totals
        weights: Share of the portfolio current value per holding in
                 percent, keyed by identity key
        warnings: Data quality notes (missing quotes, closed positions, ...)
    """

    holdings: list[Holding]
    view: list[Holding]
    asset_types: list[str]
    totals: PortfolioTotals
    weights: dict[str, Decimal] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
