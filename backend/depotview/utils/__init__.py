# backend/depotview/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging setup with correlation ID support
- context: Request context (correlation ID)

Usage:
    from depotview.utils import setup_logging, get_logger
    from depotview.utils import get_correlation_id, set_correlation_id
"""

from depotview.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from depotview.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
