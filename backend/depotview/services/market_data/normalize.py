# backend/depotview/services/market_data/normalize.py
"""
Translate raw market data payloads into the engine's quote map.

The engine accepts only {ticker: Decimal price}. Market data APIs answer
in different shapes; this module understands the common ones:

    {"AAPL": 170.5}                                  flat mapping
    {"AAPL": {"close": "170.5", ...}}                mapping of quote objects
    [{"symbol": "AAPL", "close": 170.5}, ...]        list of quote objects
    {"symbol": "AAPL", "close": 170.5}               single quote object

Price keys are tried in order: close, price, last, regularMarketPrice.
Entries without a positive finite price are dropped (logged at DEBUG).
Tickers are uppercased.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from depotview.utils.numbers import to_positive_decimal

logger = logging.getLogger(__name__)

PRICE_KEYS = ("close", "price", "last", "regularMarketPrice")
SYMBOL_KEYS = ("symbol", "ticker")


def _price_from(entry: Any) -> Decimal | None:
    """Extract a positive price from a number or a quote object."""
    if isinstance(entry, Mapping):
        for key in PRICE_KEYS:
            if key in entry:
                return to_positive_decimal(entry[key])
        return None
    return to_positive_decimal(entry)


def _symbol_from(entry: Mapping) -> str:
    for key in SYMBOL_KEYS:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
    return ""


def _is_quote_object(payload: Mapping) -> bool:
    return any(key in payload for key in SYMBOL_KEYS) and any(key in payload for key in PRICE_KEYS)


def normalize_quotes(raw: Any) -> dict[str, Decimal]:
    """
    Normalize a raw provider payload to {TICKER: price}.

    Args:
        raw: Provider payload (see module docstring); None gives {}

    Returns:
        Mapping of uppercase ticker to positive Decimal price. When a
        ticker appears more than once the last usable price wins.
    """
    quotes: dict[str, Decimal] = {}

    if raw is None:
        return quotes

    if isinstance(raw, Mapping) and _is_quote_object(raw):
        raw = [raw]

    if isinstance(raw, Mapping):
        items = [(str(symbol).strip().upper(), entry) for symbol, entry in raw.items()]
    elif isinstance(raw, (list, tuple)):
        items = [
            (_symbol_from(entry), entry)
            for entry in raw
            if isinstance(entry, Mapping)
        ]
    else:
        logger.debug(f"Ignoring quote payload of type {type(raw).__name__}")
        return quotes

    for symbol, entry in items:
        if not symbol:
            continue
        price = _price_from(entry)
        if price is None:
            logger.debug(f"Dropping quote for {symbol}: no usable price in {entry!r}")
            continue
        quotes[symbol] = price

    return quotes
