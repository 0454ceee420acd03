# backend/depotview/middleware/rate_limit.py
"""
Rate limiting for API protection.

This module provides rate limiting using slowapi to:
- Protect the statement backend and the Yahoo Finance quota
- Ensure fair resource distribution among clients

Limits are defined in depotview/services/constants.py. The portfolio
endpoint gets the tightest one because every call fans out upstream.

Key by: Client IP address (X-Forwarded-For only from trusted proxies)
Storage: In-memory (single instance)

Usage:
    from depotview.middleware.rate_limit import limiter, RATE_LIMIT_PORTFOLIO

    @router.get("/clients/{client_id}/portfolio")
    @limiter.limit(RATE_LIMIT_PORTFOLIO)
    def get_portfolio(request: Request, client_id: str):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from depotview.config import settings
from depotview.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_PORTFOLIO,
    RATE_LIMIT_VALUATION,
    RATE_LIMIT_HEALTH,
)

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def _is_trusted_proxy(request: Request) -> bool:
    """True if forwarded headers of this request may be trusted."""
    if settings.trust_proxy_headers:
        return True

    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Extract the client IP address used as rate limit key.

    X-Forwarded-For / X-Real-IP are only honoured when the immediate peer
    is a trusted proxy; otherwise clients could pick their own key.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Render a 429 in the standard ErrorDetail format with a Retry-After header.
    """
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {
                "retry_after": DEFAULT_RETRY_AFTER_SECONDS,
            },
        },
        headers={
            "Retry-After": str(DEFAULT_RETRY_AFTER_SECONDS),
        },
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_PORTFOLIO",
    "RATE_LIMIT_VALUATION",
    "RATE_LIMIT_HEALTH",
]
