# backend/depotview/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

Every request gets an ID that shows up in each log line written while it
is handled and in the X-Correlation-ID response header. A caller (the
frontend or a gateway) may supply its own ID:

1. X-Correlation-ID header
2. X-Request-ID header
3. Generated UUID if neither header is present

Usage:
    from fastapi import FastAPI
    from depotview.middleware import CorrelationIdMiddleware

    app = FastAPI()
    app.add_middleware(CorrelationIdMiddleware)
"""

import logging
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from depotview.utils.context import set_correlation_id, clear_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Longer incoming IDs are replaced to keep log lines bounded
MAX_CORRELATION_ID_LENGTH = 128


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Manages correlation IDs for request tracing.

    The ID is stored in a context variable for the duration of the request
    (see depotview.utils.context) and cleared afterwards.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()

    def _get_correlation_id(self, request: Request) -> str:
        """Incoming header value if usable, else a new UUID."""
        for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
            value = (request.headers.get(header) or "").strip()
            if value and len(value) <= MAX_CORRELATION_ID_LENGTH:
                return value
            if value:
                logger.debug(f"Ignoring oversized {header} header ({len(value)} chars)")

        return str(uuid.uuid4())
