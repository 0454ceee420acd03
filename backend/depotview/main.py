# backend/depotview/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from depotview import __version__
from depotview.config import settings
from depotview.dependencies import get_quote_provider
from depotview.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from depotview.routers import portfolio_router, transactions_router
from depotview.schemas.errors import ErrorDetail, ValidationErrorDetail
from depotview.services.exceptions import (
    ServiceError,
    ValidationError,
    NotFoundError,
    TransactionSourceError,
)
from depotview.services.market_data import QuoteProvider
from depotview.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Depot portfolio view: holdings, live valuation and transaction history",
    version=__version__,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================
# Origins are configured via CORS_ORIGINS environment variable

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions are converted to ErrorDetail responses here.
# Starlette picks the handler of the most specific class in the MRO, so
# the generic ServiceError handler only sees what nothing else matched.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle invalid request parameters, e.g. sort field or direction (400)."""
    logger.warning(f"Validation error: {exc}")
    details = {"field": exc.field} if exc.field else None
    valid_fields = getattr(exc, "valid_fields", None)
    if details is not None and valid_fields:
        details["valid_options"] = valid_fields

    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details=details,
        ).model_dump(),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle unknown clients and other missing resources (404)."""
    logger.warning(f"Not found: {exc.resource_type} {exc.resource_id}")
    return JSONResponse(
        status_code=404,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details={
                "resource_type": exc.resource_type,
                "resource_id": exc.resource_id,
            },
        ).model_dump(),
    )


@app.exception_handler(TransactionSourceError)
async def transaction_source_error_handler(
    request: Request, exc: TransactionSourceError
) -> JSONResponse:
    """Handle statement backend failures (502)."""
    logger.error(f"Transaction source error: {exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorDetail(
            error="TransactionSourceError",
            message=str(exc),
            details={"client_id": exc.client_id},
        ).model_dump(),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="ServiceError",
            message=str(exc),
            details=None,
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts FastAPI's default {"detail": "..."} format to ErrorDetail.
    """
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        502: "BadGatewayError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_type,
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert the default 422 body to ValidationErrorDetail."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            error="ValidationError",
            message="Request validation failed",
            details=errors,
        ).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(portfolio_router)  # /clients/{id}/portfolio, /portfolio/valuation
app.include_router(transactions_router)  # /clients/{id}/transactions


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(
        request: Request,
        provider: QuoteProvider = Depends(get_quote_provider),
):
    """
    Health check endpoint.

    The quote provider is NON-CRITICAL: without it portfolios are shown at
    cost basis, so an unavailable provider reports "degraded" with HTTP 200.
    """
    checks = {}
    overall_status = "healthy"

    try:
        available = provider.is_available()
        checks["quote_provider"] = {
            "status": "healthy" if available else "unhealthy",
            "critical": False,
            "provider": provider.name,
        }
        if not available:
            overall_status = "degraded"
    except Exception as e:
        logger.warning(f"Quote provider health check failed: {e}")
        checks["quote_provider"] = {
            "status": "unknown",
            "critical": False,
            "error": str(e),
        }
        overall_status = "degraded"

    checks["transactions_api"] = {
        "status": "configured",
        "critical": True,
        "url": settings.transactions_api_url,
    }

    return {
        "status": overall_status,
        "environment": settings.environment,
        "checks": checks,
    }


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness probe endpoint.

    Returns HTTP 200 if the application is running. Does NOT check
    dependencies.
    """
    return {"status": "alive"}
