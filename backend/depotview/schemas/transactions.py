# backend/depotview/schemas/transactions.py
"""
Pydantic schemas for transaction records.

Input (TransactionRecordIn):
    Statement lines as delivered by the statement backend or posted to
    /portfolio/valuation. Field names are camelCase on the wire
    (clientId, unitPrice, ...); snake_case is accepted too.

    Parsing is lenient: a missing or malformed number becomes 0 and a
    missing text field becomes "", so one broken line never prevents the
    rest of the portfolio from rendering.

Output (TransactionResponse):
    One line of the transaction history view.

IMPORTANT: All financial values use Decimal for precision.
Never use float for money!
"""

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from depotview.services.portfolio.types import TransactionRecord
from depotview.utils.numbers import to_decimal_or_zero


# =============================================================================
# INPUT SCHEMA
# =============================================================================

class TransactionRecordIn(BaseModel):
    """One statement line (camelCase or snake_case keys)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client_id: str = Field(
        default="",
        validation_alias=AliasChoices("clientId", "client_id"),
        description="Depot / client identifier",
    )
    transaction_id: str = Field(
        default="",
        validation_alias=AliasChoices("transactionId", "transaction_id"),
        description="Transaction identifier, unique per client",
    )
    date: str = Field(
        default="",
        description="Trade date as delivered",
        examples=["2024-01-15", "15.01.2024"],
    )
    asset: str = Field(
        default="",
        validation_alias=AliasChoices("asset", "name"),
        description="Instrument display name",
        examples=["Apple Inc."],
    )
    isin: str = Field(
        default="",
        description="ISIN (may be empty)",
        examples=["US0378331005"],
    )
    ticker: str = Field(
        default="",
        validation_alias=AliasChoices("ticker", "symbol"),
        description="Ticker symbol used for quotes (may be empty)",
        examples=["AAPL"],
    )
    asset_type: str = Field(
        default="",
        validation_alias=AliasChoices("assetType", "asset_type", "type"),
        description="Instrument type label",
        examples=["Stock", "ETF"],
    )
    quantity: Decimal = Field(
        default=Decimal("0"),
        description="Units traded",
    )
    unit_price: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("unitPrice", "unit_price"),
        description="Price per unit",
    )
    total_value: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("totalValue", "total_value"),
        description="Amount of the line (not recomputed)",
    )

    # =========================================================================
    # FIELD VALIDATORS (Normalization)
    # =========================================================================

    @field_validator(
        "client_id", "transaction_id", "date", "asset", "isin", "ticker", "asset_type",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """None becomes "", numbers (e.g. numeric client ids) become text."""
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("date", "asset", "isin", "ticker", "asset_type", "client_id", "transaction_id")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("isin")
    @classmethod
    def uppercase_isin(cls, v: str) -> str:
        return v.upper()

    @field_validator("quantity", "unit_price", "total_value", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Decimal:
        """Malformed or missing numbers count as zero."""
        return to_decimal_or_zero(v)

    def to_record(self) -> TransactionRecord:
        """Convert to the engine's internal type."""
        return TransactionRecord(
            client_id=self.client_id,
            transaction_id=self.transaction_id,
            date=self.date,
            asset=self.asset,
            isin=self.isin,
            ticker=self.ticker,
            asset_type=self.asset_type,
            quantity=self.quantity,
            unit_price=self.unit_price,
            total_value=self.total_value,
        )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TransactionResponse(BaseModel):
    """One line of the transaction history."""

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
    unit_price_display: str = Field(
        ...,
        description="Formatted unit price (e.g. '150,00 €')",
    )
    total_value_display: str = Field(
        ...,
        description="Formatted line amount",
    )


class TransactionListResponse(BaseModel):
    """Transaction history of one client."""

    client_id: str
    sort_by: str
    direction: str
    count: int
    transactions: list[TransactionResponse]
