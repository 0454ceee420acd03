# backend/depotview/services/transactions/__init__.py
"""
Transaction sources.

Usage:
    from depotview.services.transactions import HttpTransactionSource

    source = HttpTransactionSource("http://localhost:8080/api")
    records = source.get_transactions("C1")
"""

from depotview.services.transactions.source import (
    TransactionSource,
    HttpTransactionSource,
    parse_transactions,
)

__all__ = [
    "TransactionSource",
    "HttpTransactionSource",
    "parse_transactions",
]
