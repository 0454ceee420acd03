# backend/depotview/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

This package contains all Pydantic schemas organized by domain:
- errors: Error response formats
- portfolio: Holdings, totals and the valuation request
- transactions: Statement lines (input) and the transaction history (output)

Usage:
    from depotview.schemas import PortfolioResponse, ValuationRequest
    from depotview.schemas import TransactionRecordIn, TransactionListResponse
    from depotview.schemas import ErrorDetail
"""

from depotview.schemas.errors import (
    ErrorDetail,
    ValidationErrorDetail,
)
from depotview.schemas.portfolio import (
    HoldingDisplay,
    HoldingResponse,
    ProfitLossResponse,
    TotalsDisplay,
    PortfolioTotalsResponse,
    PortfolioResponse,
    ValuationRequest,
)
from depotview.schemas.transactions import (
    TransactionRecordIn,
    TransactionResponse,
    TransactionListResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Portfolio
    "HoldingDisplay",
    "HoldingResponse",
    "ProfitLossResponse",
    "TotalsDisplay",
    "PortfolioTotalsResponse",
    "PortfolioResponse",
    "ValuationRequest",
    # Transactions
    "TransactionRecordIn",
    "TransactionResponse",
    "TransactionListResponse",
]
