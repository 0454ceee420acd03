# backend/depotview/middleware/__init__.py
"""
Middleware components for the portfolio viewer.

This package contains ASGI middleware for:
- Correlation ID tracking for request tracing
- Rate limiting for API protection

Usage:
    from depotview.middleware import CorrelationIdMiddleware, limiter

    app.add_middleware(CorrelationIdMiddleware)
    app.state.limiter = limiter
"""

from depotview.middleware.correlation import CorrelationIdMiddleware
from depotview.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_PORTFOLIO,
    RATE_LIMIT_VALUATION,
    RATE_LIMIT_HEALTH,
)

__all__ = [
    "CorrelationIdMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_PORTFOLIO",
    "RATE_LIMIT_VALUATION",
    "RATE_LIMIT_HEALTH",
]
