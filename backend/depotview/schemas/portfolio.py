# backend/depotview/schemas/portfolio.py
"""
Pydantic schemas for the portfolio view.

These schemas handle:
- Holdings with live market data and display strings
- Portfolio totals (cost basis, current value, P&L)
- The stateless valuation request (POST /portfolio/valuation)

Market fields of a holding are null when no quote was available; the
frontend shows a placeholder instead of a zero.
"""

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from depotview.schemas.transactions import TransactionRecordIn


# =============================================================================
# HOLDING SCHEMAS
# =============================================================================

class HoldingDisplay(BaseModel):
    """Formatted values for one holding (null where the value is missing)."""

    quantity: str
    unit_price: str
    total_value: str
    current_price: str | None = None
    current_total_value: str | None = None
    price_change: str | None = None
    percent_change: str | None = None
    weight: str


class HoldingResponse(BaseModel):
    """One aggregated position."""

    name: str = Field(..., description="Instrument display name")
    isin: str = Field(..., description="ISIN (may be empty)")
    ticker: str = Field(..., description="Ticker used for quotes (may be empty)")
    asset_type: str = Field(..., description="Instrument type label")
    quantity: Decimal = Field(..., description="Units held")
    unit_price: Decimal = Field(..., description="Weighted average purchase price")
    total_value: Decimal = Field(..., description="Cost basis")
    current_price: Decimal | None = Field(
        default=None,
        description="Latest market price (null if no quote)"
    )
    current_total_value: Decimal | None = Field(
        default=None,
        description="quantity × current_price (null if no quote)"
    )
    price_change: Decimal | None = Field(
        default=None,
        description="current_price − unit_price (null if no quote)"
    )
    percent_change: Decimal | None = Field(
        default=None,
        description="price_change relative to unit_price in percent (null if no quote or unit_price is 0)"
    )
    weight: Decimal = Field(
        ...,
        description="Share of portfolio current value in percent"
    )
    display: HoldingDisplay


# =============================================================================
# TOTALS SCHEMAS
# =============================================================================

class ProfitLossResponse(BaseModel):
    """Absolute and relative gain or loss."""

    amount: Decimal
    percentage: Decimal


class TotalsDisplay(BaseModel):
    """Formatted portfolio totals."""

    cost_basis: str
    current_value: str
    profit_loss_amount: str
    profit_loss_percentage: str


class PortfolioTotalsResponse(BaseModel):
    """Portfolio-level figures (over all holdings, not only the filtered view)."""

    cost_basis: Decimal = Field(..., description="Sum of holding cost bases")
    current_value: Decimal = Field(
        ...,
        description="Sum of current values; unquoted holdings count at cost basis"
    )
    profit_loss: ProfitLossResponse
    quoted_holdings: int = Field(..., description="Holdings with a market price")
    total_holdings: int = Field(..., description="All holdings")
    has_complete_quotes: bool
    display: TotalsDisplay


# =============================================================================
# PORTFOLIO SCHEMAS
# =============================================================================

class PortfolioResponse(BaseModel):
    """Complete portfolio view."""

    client_id: str | None = Field(
        default=None,
        description="Client the portfolio belongs to (null for ad-hoc valuations)"
    )
    currency: str
    locale: str
    asset_type: str = Field(..., description="Active type filter ('All' for none)")
    asset_types: list[str] = Field(..., description="Filter options, 'All' first")
    sort_by: str | None = None
    direction: str
    holdings: list[HoldingResponse] = Field(..., description="Filtered and sorted holdings")
    totals: PortfolioTotalsResponse
    warnings: list[str] = Field(
        default_factory=list,
        description="Data quality notes (missing quotes, closed positions, ...)"
    )


class ValuationRequest(BaseModel):
    """
    Stateless valuation of posted transactions.

    `quotes` accepts a flat {ticker: price} mapping, a mapping of quote
    objects or a list of quote objects (see normalize_quotes).
    """

    model_config = ConfigDict(populate_by_name=True)

    transactions: list[TransactionRecordIn] = Field(
        default_factory=list,
        description="Statement lines to aggregate"
    )
    quotes: Any = Field(
        default=None,
        description="Market quotes by ticker",
        examples=[{"AAPL": 170.5}],
    )
    asset_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("assetType", "asset_type"),
        description="Type filter ('All' or omitted for none)"
    )
    sort_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("sortBy", "sort_by"),
        description="Sort field (snake_case or camelCase)"
    )
    direction: str = Field(
        default="asc",
        description="Sort direction: asc or desc"
    )
    currency: str | None = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="Display currency (ISO 4217); defaults to the configured one",
        examples=["EUR", "USD"],
    )

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v
