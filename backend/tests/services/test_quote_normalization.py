# backend/tests/services/test_quote_normalization.py
"""
Tests for normalize_quotes: raw provider payloads to {TICKER: Decimal}.
"""

from decimal import Decimal

import pytest

from depotview.services.market_data import normalize_quotes


class TestNormalizeQuotes:
    """Tests for the supported payload shapes."""

    def test_flat_mapping(self):
        assert normalize_quotes({"AAPL": 170.5, "msft": "410"}) == {
            "AAPL": Decimal("170.5"),
            "MSFT": Decimal("410"),
        }

    def test_mapping_of_quote_objects(self):
        raw = {
            "AAPL": {"close": 170.5, "volume": 1000},
            "MSFT": {"price": "410.25"},
        }

        assert normalize_quotes(raw) == {
            "AAPL": Decimal("170.5"),
            "MSFT": Decimal("410.25"),
        }

    def test_list_of_quote_objects(self):
        raw = [
            {"symbol": "AAPL", "close": 170.5},
            {"ticker": "eunl", "regularMarketPrice": 90},
        ]

        assert normalize_quotes(raw) == {
            "AAPL": Decimal("170.5"),
            "EUNL": Decimal("90"),
        }

    def test_single_quote_object(self):
        assert normalize_quotes({"symbol": "AAPL", "close": 170}) == {"AAPL": Decimal("170")}

    def test_close_wins_over_price(self):
        assert normalize_quotes({"AAPL": {"close": 1, "price": 2}}) == {"AAPL": Decimal("1")}

    @pytest.mark.parametrize("price", [0, -1, None, "n/a", float("nan"), float("inf")])
    def test_unusable_prices_are_dropped(self, price):
        assert normalize_quotes({"AAPL": price, "MSFT": 400}) == {"MSFT": Decimal("400")}

    def test_entries_without_symbol_are_dropped(self):
        raw = [{"close": 170}, {"symbol": " ", "close": 1}, "AAPL", {"symbol": "MSFT", "close": 400}]

        assert normalize_quotes(raw) == {"MSFT": Decimal("400")}

    def test_last_duplicate_wins(self):
        raw = [{"symbol": "AAPL", "close": 1}, {"symbol": "AAPL", "close": 2}]

        assert normalize_quotes(raw) == {"AAPL": Decimal("2")}

    @pytest.mark.parametrize("raw", [None, {}, [], "AAPL=170", 42])
    def test_empty_or_unknown_payloads(self, raw):
        assert normalize_quotes(raw) == {}
