# backend/depotview/services/market_data/base.py
"""
Abstract interface for quote providers.

The valuation engine only needs "last price per ticker". Providers fetch
that in ONE batched request for the whole portfolio so the request count
does not grow with the number of holdings.

Design Principles:
- Services depend on QuoteProvider, not on a concrete data vendor
- Common retry logic implemented once in the base class
- Partial results are normal: tickers without a price are reported in
  QuoteResult.missing, not raised
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from depotview.services.exceptions import (
    ProviderUnavailableError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class QuoteResult:
    """
    Result of a batched quote fetch.

    Attributes:
        quotes: Normalized ticker -> positive last price
        missing: Requested tickers that returned no usable price
    """

    quotes: dict[str, Decimal] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    @property
    def quoted_count(self) -> int:
        return len(self.quotes)

    @property
    def all_quoted(self) -> bool:
        return not self.missing


def unique_tickers(tickers: Iterable[str]) -> list[str]:
    """Strip, uppercase and de-duplicate tickers, dropping blanks (order kept)."""
    seen: dict[str, None] = {}
    for ticker in tickers:
        normalized = (ticker or "").strip().upper()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class QuoteProvider(ABC):
    """
    Abstract base class for quote providers.

    Retry Behavior:
        `_execute_with_retry` retries ProviderUnavailableError and
        RateLimitError with exponential backoff. Subclasses can tune it:

        - MAX_RETRY_ATTEMPTS: Total attempts (default: 3)
        - RETRY_MIN_WAIT: Minimum wait in seconds (default: 1)
        - RETRY_MAX_WAIT: Maximum wait in seconds (default: 10)
        - RETRY_MULTIPLIER: Exponential multiplier (default: 1)
    """

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10
    RETRY_MULTIPLIER: int = 1

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier used in logs and errors (e.g. "yahoo")."""
        pass

    @abstractmethod
    def get_quotes(self, tickers: list[str]) -> QuoteResult:
        """
        Fetch the last price for every ticker in one request.

        Args:
            tickers: Ticker symbols (blank and duplicate entries are ignored)

        Returns:
            QuoteResult; tickers without a price are listed in `missing`

        Raises:
            ProviderUnavailableError: Network or API error (after retries)
            RateLimitError: Rate limit exceeded (after retries)
        """
        pass

    def is_available(self) -> bool:
        """Health check hook; providers may override."""
        return True

    def _execute_with_retry(
            self,
            func: Callable[..., T],
            *args: Any,
            **kwargs: Any,
    ) -> T:
        """
        Execute func, retrying transient provider failures.

        Raises:
            The last exception if all attempts fail
        """

        @retry(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type((ProviderUnavailableError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner() -> T:
            return func(*args, **kwargs)

        return _inner()
