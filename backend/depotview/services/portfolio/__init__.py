# backend/depotview/services/portfolio/__init__.py
"""
Portfolio Service Package.

This package turns a client's transaction records into the portfolio view:
- Aggregation of records into holdings (weighted average cost)
- Valuation with live quotes (current value, profit/loss)
- Filtering and sorting for display
- Currency and percentage formatting

Usage:
    from depotview.services.portfolio import PortfolioService

    service = PortfolioService(transaction_source=source, quote_provider=provider)
    snapshot = service.get_portfolio("C1", sort_by="total_value", direction="desc")

Architecture:
    portfolio/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Internal data classes
    ├── calculators.py           # HoldingsAggregator, HoldingValuator
    ├── views.py                 # HoldingsView, sort_transactions
    ├── formatting.py            # format_currency, format_percentage
    └── service.py               # PortfolioService (orchestrator)

Data Flow:
    Transactions → HoldingsAggregator → Holdings
    Holdings + Quotes → HoldingValuator → Enriched holdings, totals
    Enriched holdings → HoldingsView → Filtered, sorted view
    All Above → PortfolioSnapshot
"""

# Calculators (for testing / direct usage)
from depotview.services.portfolio.calculators import (
    HoldingsAggregator,
    HoldingValuator,
)
from depotview.services.portfolio.formatting import (
    format_currency,
    format_percentage,
    format_quantity,
)
# Main service
from depotview.services.portfolio.service import PortfolioService
# Types
from depotview.services.portfolio.types import (
    TransactionRecord,
    Holding,
    ProfitLoss,
    PortfolioTotals,
    PortfolioSnapshot,
)
from depotview.services.portfolio.views import (
    ALL_TYPES,
    HoldingsView,
    sort_transactions,
)

__all__ = [
    # Main service
    "PortfolioService",
    # Calculators
    "HoldingsAggregator",
    "HoldingValuator",
    "HoldingsView",
    "sort_transactions",
    "ALL_TYPES",
    # Formatting
    "format_currency",
    "format_percentage",
    "format_quantity",
    # Types
    "TransactionRecord",
    "Holding",
    "ProfitLoss",
    "PortfolioTotals",
    "PortfolioSnapshot",
]
