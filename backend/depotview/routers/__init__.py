# backend/depotview/routers/__init__.py
"""
API routers for the portfolio viewer.

Each router handles a specific domain:
- portfolio: Holdings view of a client and ad-hoc valuation
- transactions: Transaction history of a client
"""

from depotview.routers.portfolio import router as portfolio_router
from depotview.routers.transactions import router as transactions_router

__all__ = [
    "portfolio_router",
    "transactions_router",
]
