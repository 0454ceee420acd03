# backend/depotview/utils/context.py
"""
Request-scoped context for log correlation.

Uses contextvars so the value follows the request through sync and async
code without being shared between concurrent requests.

Usage:
    from depotview.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")   # middleware
    get_correlation_id()            # anywhere else -> "abc-123"
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Unbind the correlation ID (end of request)."""
    _correlation_id_var.set(None)
