# backend/depotview/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive their collaborators (transaction source, quote provider) via
  constructor injection
- Are easily testable with mock collaborators

Architecture:
    services/
    ├── __init__.py              # This file
    ├── exceptions.py            # Domain exceptions
    ├── constants.py             # Rate limits and other tunables
    ├── portfolio/               # Aggregation, valuation, views, formatting
    ├── market_data/             # Quote providers
    └── transactions/            # Statement backend client

Usage:
    from depotview.services.portfolio import PortfolioService
    from depotview.services.exceptions import ClientNotFoundError
"""
