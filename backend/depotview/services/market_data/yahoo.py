# backend/depotview/services/market_data/yahoo.py
"""
Yahoo Finance quote provider.

Implements QuoteProvider with the yfinance library. The whole portfolio is
priced with a single yf.download() call over the last few trading days;
the last non-NaN close per ticker is taken as the current price. Using a
short window instead of a single day covers weekends, holidays and
instruments that did not trade today.

Limitations:
- Rate limits (not officially documented, but exist)
- Data may be delayed (15-20 minutes for some markets)
"""

import logging
from decimal import Decimal

import pandas as pd
import yfinance as yf

from depotview.services.exceptions import (
    ProviderUnavailableError,
    RateLimitError,
)
from depotview.services.market_data.base import (
    QuoteProvider,
    QuoteResult,
    unique_tickers,
)
from depotview.utils.numbers import to_positive_decimal

logger = logging.getLogger(__name__)


class YahooQuoteProvider(QuoteProvider):
    """
    Yahoo Finance implementation of QuoteProvider.

    Configuration:
        timeout: API request timeout in seconds (default: 10)
        lookback: yfinance period string for the price window (default: "5d")

    Retry Behavior (inherited from QuoteProvider):
        - Retries on ProviderUnavailableError and RateLimitError
        - Unknown tickers are NOT errors; they end up in QuoteResult.missing

    Example:
        provider = YahooQuoteProvider(timeout=15)
        result = provider.get_quotes(["AAPL", "MSFT"])
        result.quotes    # {"AAPL": Decimal("170.5"), "MSFT": Decimal("410.2")}
        result.missing   # []
    """

    def __init__(self, timeout: int = 10, lookback: str = "5d") -> None:
        self._timeout = timeout
        self._lookback = lookback
        logger.info(f"YahooQuoteProvider initialized (timeout={timeout}s, lookback={lookback})")

    @property
    def name(self) -> str:
        return "yahoo"

    def get_quotes(self, tickers: list[str]) -> QuoteResult:
        symbols = unique_tickers(tickers)
        if not symbols:
            return QuoteResult()

        return self._execute_with_retry(self._fetch_quotes, symbols)

    def _fetch_quotes(self, symbols: list[str]) -> QuoteResult:
        """Internal method to fetch quotes (called by retry wrapper)."""
        logger.debug(f"Fetching quotes for {len(symbols)} tickers: {', '.join(symbols)}")

        try:
            df = yf.download(
                tickers=symbols,
                period=self._lookback,
                interval="1d",
                group_by="ticker",
                auto_adjust=False,
                progress=False,
                threads=False,
                timeout=self._timeout,
            )
        except Exception as e:
            error_str = str(e).lower()

            if "rate limit" in error_str or "too many requests" in error_str:
                raise RateLimitError(provider=self.name)

            logger.error(f"Yahoo Finance error for {', '.join(symbols)}: {e}")
            raise ProviderUnavailableError(
                provider=self.name,
                reason=str(e),
            )

        result = QuoteResult()

        for symbol in symbols:
            price = self._last_close(df, symbol, single=len(symbols) == 1)
            if price is None:
                result.missing.append(symbol)
            else:
                result.quotes[symbol] = price

        if result.missing:
            logger.warning(f"No quote for: {', '.join(result.missing)}")

        logger.debug(f"Fetched {result.quoted_count}/{len(symbols)} quotes")
        return result

    @staticmethod
    def _last_close(df: pd.DataFrame | None, symbol: str, single: bool) -> Decimal | None:
        """
        Last non-NaN close for symbol.

        yf.download returns (ticker, field) MultiIndex columns when grouped
        by ticker, (field, ticker) when grouped by column, and flat columns
        for a single ticker on older yfinance releases.
        """
        if df is None or df.empty:
            return None

        columns = df.columns
        if isinstance(columns, pd.MultiIndex):
            if (symbol, "Close") in columns:
                closes = df[(symbol, "Close")]
            elif ("Close", symbol) in columns:
                closes = df[("Close", symbol)]
            else:
                return None
        elif single and "Close" in columns:
            closes = df["Close"]
        else:
            return None

        closes = closes.dropna()
        if closes.empty:
            return None

        return to_positive_decimal(float(closes.iloc[-1]))
