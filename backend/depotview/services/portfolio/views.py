# backend/depotview/services/portfolio/views.py
"""
Presentation projections over holdings and transactions.

HoldingsView filters by instrument type and sorts by any known field.
Nothing here mutates its input: every method returns a new list.

Sort fields are resolved through explicit accessor tables rather than
attribute lookups by name, so an unknown field is a clear ValidationError
instead of an AttributeError deep inside sorted().

Comparison rules (per pair of values):
- both numbers: numeric order
- both dates: chronological order
- both text: accent- and case-insensitive order, raw text as tie-breaker
- either missing, or mismatched types: equal (no reordering)
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, TypeVar

from depotview.services.exceptions import InvalidSortDirectionError, InvalidSortFieldError
from depotview.services.portfolio.types import Holding, TransactionRecord

T = TypeVar("T")

ALL_TYPES = "All"

SORT_ASCENDING = "asc"
SORT_DESCENDING = "desc"


# =============================================================================
# ACCESSOR TABLES
# =============================================================================

HOLDING_SORT_FIELDS: dict[str, Callable[[Holding], Any]] = {
    "name": lambda h: h.name,
    "isin": lambda h: h.isin,
    "ticker": lambda h: h.ticker,
    "asset_type": lambda h: h.asset_type,
    "quantity": lambda h: h.quantity,
    "unit_price": lambda h: h.unit_price,
    "total_value": lambda h: h.total_value,
    "current_price": lambda h: h.current_price,
    "current_total_value": lambda h: h.current_total_value,
    "price_change": lambda h: h.price_change,
    "percent_change": lambda h: h.percent_change,
}

_STATEMENT_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")


def _trade_date(transaction: TransactionRecord) -> date | str:
    """Parse ISO (2024-01-15) and statement (15.01.2024) dates; raw text otherwise."""
    text = (transaction.date or "").strip()
    match = _STATEMENT_DATE.match(text)
    try:
        if match:
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)
        return datetime.fromisoformat(text).date()
    except ValueError:
        return text


TRANSACTION_SORT_FIELDS: dict[str, Callable[[TransactionRecord], Any]] = {
    "date": _trade_date,
    "client_id": lambda t: t.client_id,
    "transaction_id": lambda t: t.transaction_id,
    "asset": lambda t: t.asset,
    "isin": lambda t: t.isin,
    "ticker": lambda t: t.ticker,
    "asset_type": lambda t: t.asset_type,
    "quantity": lambda t: t.quantity,
    "unit_price": lambda t: t.unit_price,
    "total_value": lambda t: t.total_value,
}

# camelCase names used on the wire / by the frontend
FIELD_ALIASES: dict[str, str] = {
    "assetType": "asset_type",
    "unitPrice": "unit_price",
    "totalValue": "total_value",
    "currentPrice": "current_price",
    "currentTotalValue": "current_total_value",
    "priceChange": "price_change",
    "percentChange": "percent_change",
    "clientId": "client_id",
    "transactionId": "transaction_id",
}


# =============================================================================
# COMPARISON
# =============================================================================

def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _sign(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison following the module rules (-1, 0, 1)."""
    if a is None or b is None:
        return 0

    if isinstance(a, str) and isinstance(b, str):
        return _sign(_fold(a), _fold(b)) or _sign(a, b)

    if _is_number(a) and _is_number(b):
        return _sign(a, b)

    if isinstance(a, date) and isinstance(b, date):
        return _sign(a, b)

    return 0


def resolve_sort_field(sort_field: str, accessors: dict[str, Callable[[T], Any]]) -> Callable[[T], Any]:
    """
    Look up the accessor for a sort field (snake_case or camelCase).

    Raises:
        InvalidSortFieldError: If the field is not sortable
    """
    name = FIELD_ALIASES.get(sort_field, sort_field)
    if name not in accessors:
        raise InvalidSortFieldError(sort_field, sorted(accessors))
    return accessors[name]


def normalize_direction(direction: str | None) -> str:
    """
    Normalize a sort direction ('asc' when omitted).

    Raises:
        InvalidSortDirectionError: If direction is not asc/desc
    """
    if not direction:
        return SORT_ASCENDING

    normalized = direction.strip().lower()
    if normalized not in (SORT_ASCENDING, SORT_DESCENDING):
        raise InvalidSortDirectionError(direction)
    return normalized


def sort_items(
        items: Iterable[T],
        accessor: Callable[[T], Any],
        direction: str | None,
) -> list[T]:
    """Stable sort into a new list."""
    sign = -1 if normalize_direction(direction) == SORT_DESCENDING else 1

    def _compare(x: T, y: T) -> int:
        return sign * compare_values(accessor(x), accessor(y))

    return sorted(items, key=cmp_to_key(_compare))


# =============================================================================
# HOLDINGS VIEW
# =============================================================================

class HoldingsView:
    """
    Filters and sorts holdings for display.

    Usage:
        view = HoldingsView()
        options = view.unique_types(holdings)       # ["All", "ETF", "Stock"]
        etfs = view.filter_by_type(holdings, "ETF")
        ordered = view.sort(etfs, "total_value", "desc")
    """

    def filter_by_type(self, holdings: Sequence[Holding], asset_type: str | None) -> list[Holding]:
        """
        Keep holdings of one instrument type.

        "All", "" and None return every holding. Otherwise the match on
        asset_type is exact.
        """
        if not asset_type or asset_type == ALL_TYPES:
            return list(holdings)
        return [h for h in holdings if h.asset_type == asset_type]

    def unique_types(self, holdings: Iterable[Holding]) -> list[str]:
        """
        Filter options: "All" followed by each distinct non-blank type.

        Types are sorted alphabetically so the option list does not depend
        on transaction order.
        """
        types = {h.asset_type for h in holdings if h.asset_type and h.asset_type != ALL_TYPES}
        return [ALL_TYPES, *sorted(types, key=lambda t: (_fold(t), t))]

    def sort(
            self,
            holdings: Sequence[Holding],
            sort_field: str | None,
            direction: str | None = SORT_ASCENDING,
    ) -> list[Holding]:
        """
        Sort holdings by a field.

        Args:
            holdings: Holdings to sort (not modified)
            sort_field: Field name; None or "" keeps the current order
            direction: 'asc' or 'desc'

        Raises:
            InvalidSortFieldError: Unknown field
            InvalidSortDirectionError: Unknown direction
        """
        if not sort_field:
            normalize_direction(direction)
            return list(holdings)

        accessor = resolve_sort_field(sort_field, HOLDING_SORT_FIELDS)
        return sort_items(holdings, accessor, direction)

    def project(
            self,
            holdings: Sequence[Holding],
            asset_type: str | None = None,
            sort_field: str | None = None,
            direction: str | None = SORT_ASCENDING,
    ) -> list[Holding]:
        """Filter, then sort."""
        return self.sort(self.filter_by_type(holdings, asset_type), sort_field, direction)


# =============================================================================
# TRANSACTION HISTORY VIEW
# =============================================================================

def sort_transactions(
        transactions: Sequence[TransactionRecord],
        sort_field: str | None = "date",
        direction: str | None = SORT_DESCENDING,
) -> list[TransactionRecord]:
    """
    Sort the transaction history (newest first by default).

    Raises:
        InvalidSortFieldError: Unknown field
        InvalidSortDirectionError: Unknown direction
    """
    if not sort_field:
        normalize_direction(direction)
        return list(transactions)

    accessor = resolve_sort_field(sort_field, TRANSACTION_SORT_FIELDS)
    return sort_items(transactions, accessor, direction)
