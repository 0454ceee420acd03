# backend/tests/services/test_valuator.py
"""
Unit tests for HoldingValuator.

Test Coverage:
- enrich: market fields from quotes, missing/invalid quotes, zero unit price
- current_value: cost basis fallback for unquoted holdings
- profit_loss: amount and percentage, zero cost basis
- totals and weight
"""

from decimal import Decimal

import pytest

from depotview.services.portfolio.calculators import HoldingValuator
from depotview.services.portfolio.types import Holding


@pytest.fixture
def valuator() -> HoldingValuator:
    return HoldingValuator()


def make_holding(
        name: str = "Apple Inc.",
        ticker: str = "AAPL",
        quantity: str = "10",
        unit_price: str = "150",
        total_value: str | None = None,
        asset_type: str = "Stock",
        isin: str = "",
) -> Holding:
    quantity_d = Decimal(quantity)
    unit_price_d = Decimal(unit_price)
    return Holding(
        name=name,
        isin=isin,
        ticker=ticker,
        asset_type=asset_type,
        quantity=quantity_d,
        unit_price=unit_price_d,
        total_value=Decimal(total_value) if total_value else quantity_d * unit_price_d,
    )


MARKET_FIELDS = ("current_price", "current_total_value", "price_change", "percent_change")


class TestEnrich:
    """Tests for merging quotes into holdings."""

    def test_quoted_holding_gets_market_fields(self, valuator):
        """Quote 170 on 10 @ 150: value 1700, change 20, ~13.33%."""
        enriched = valuator.enrich([make_holding()], {"AAPL": Decimal("170")})

        holding = enriched[0]
        assert holding.current_price == Decimal("170")
        assert holding.current_total_value == Decimal("1700")
        assert holding.price_change == Decimal("20")
        assert holding.percent_change.quantize(Decimal("0.01")) == Decimal("13.33")
        assert holding.is_quoted

    def test_cost_fields_are_unchanged(self, valuator):
        original = make_holding()

        holding = valuator.enrich([original], {"AAPL": 170})[0]

        assert holding.quantity == original.quantity
        assert holding.unit_price == original.unit_price
        assert holding.total_value == original.total_value

    @pytest.mark.parametrize("quote", [None, 0, -5, "abc", float("nan"), float("inf"), ""])
    def test_unusable_quote_leaves_market_fields_unset(self, valuator, quote):
        """Missing, zero, negative and non-numeric quotes mean 'no quote'."""
        holding = valuator.enrich([make_holding()], {"AAPL": quote})[0]

        for field in MARKET_FIELDS:
            assert getattr(holding, field) is None
        assert not holding.is_quoted

    def test_missing_ticker_in_map(self, valuator):
        holding = valuator.enrich([make_holding()], {"MSFT": 400})[0]

        assert holding.current_price is None

    def test_holding_without_ticker_is_never_quoted(self, valuator):
        holding = valuator.enrich([make_holding(ticker="")], {"": 100})[0]

        assert holding.current_price is None

    def test_quote_lookup_falls_back_to_uppercase(self, valuator):
        holding = valuator.enrich([make_holding(ticker="aapl")], {"AAPL": 170})[0]

        assert holding.current_price == Decimal("170")

    @pytest.mark.parametrize("quote", [170, 170.0, "170", Decimal("170")])
    def test_numeric_quote_types(self, valuator, quote):
        holding = valuator.enrich([make_holding()], {"AAPL": quote})[0]

        assert holding.current_price == Decimal("170")

    def test_zero_unit_price_does_not_raise(self, valuator):
        """A free asset gets a value and change, but no percent change."""
        holding = valuator.enrich(
            [make_holding(unit_price="0", total_value="0")], {"AAPL": 10}
        )[0]

        assert holding.current_total_value == Decimal("100")
        assert holding.price_change == Decimal("10")
        assert holding.percent_change is None

    def test_market_fields_set_together(self, valuator):
        holdings = [
            make_holding(),
            make_holding(name="MSFT", ticker="MSFT"),
        ]

        for holding in valuator.enrich(holdings, {"AAPL": 170}):
            values = [getattr(holding, f) for f in MARKET_FIELDS]
            assert all(v is None for v in values) or all(v is not None for v in values)

    def test_input_is_not_mutated(self, valuator):
        holdings = [make_holding()]

        valuator.enrich(holdings, {"AAPL": 170})

        assert holdings[0].current_price is None

    def test_enrich_is_idempotent(self, valuator):
        """Enriching twice with the same map gives the same result."""
        holdings = [make_holding(), make_holding(name="MSFT", ticker="MSFT")]
        quotes = {"AAPL": 170}

        once = valuator.enrich(holdings, quotes)
        twice = valuator.enrich(once, quotes)

        assert once == twice

    def test_fresh_map_replaces_stale_quotes(self, valuator):
        """Re-enriching without a quote clears earlier market data."""
        enriched = valuator.enrich([make_holding()], {"AAPL": 170})

        refreshed = valuator.enrich(enriched, {})

        assert refreshed[0].current_price is None
        assert refreshed[0].current_total_value is None

    def test_order_is_preserved(self, valuator):
        holdings = [make_holding(name=n, ticker=n) for n in ("C", "A", "B")]

        enriched = valuator.enrich(holdings, {"A": 1})

        assert [h.name for h in enriched] == ["C", "A", "B"]


class TestCurrentValue:
    """Tests for current value with cost basis fallback."""

    def test_unquoted_value_equals_cost_basis(self, valuator):
        holdings = [make_holding(), make_holding(name="MSFT", ticker="MSFT", unit_price="400")]

        assert valuator.current_value(holdings) == valuator.cost_basis(holdings)

    def test_mixed_quoted_and_unquoted(self, valuator):
        holdings = valuator.enrich(
            [make_holding(), make_holding(name="MSFT", ticker="MSFT", quantity="2", unit_price="400")],
            {"AAPL": 170},
        )

        # 10 × 170 + cost basis 800
        assert valuator.current_value(holdings) == Decimal("2500")

    def test_empty_portfolio(self, valuator):
        assert valuator.current_value([]) == Decimal("0")
        assert valuator.cost_basis([]) == Decimal("0")


class TestProfitLoss:
    """Tests for profit/loss."""

    def test_gain(self, valuator):
        pnl = valuator.profit_loss(1000, 1200)

        assert pnl.amount == Decimal("200")
        assert pnl.percentage == Decimal("20")

    def test_loss(self, valuator):
        pnl = valuator.profit_loss(Decimal("1000"), Decimal("900"))

        assert pnl.amount == Decimal("-100")
        assert pnl.percentage == Decimal("-10")

    def test_zero_cost_basis_gives_zero_percentage(self, valuator):
        """Free asset: amount is the full value, percentage an explicit 0."""
        pnl = valuator.profit_loss(0, 100)

        assert pnl.amount == Decimal("100")
        assert pnl.percentage == Decimal("0")

    def test_malformed_inputs_count_as_zero(self, valuator):
        pnl = valuator.profit_loss(None, "n/a")

        assert pnl.amount == Decimal("0")
        assert pnl.percentage == Decimal("0")


class TestTotalsAndWeight:
    """Tests for portfolio totals and holding weights."""

    def test_totals(self, valuator):
        holdings = valuator.enrich(
            [make_holding(), make_holding(name="MSFT", ticker="MSFT", quantity="2", unit_price="400")],
            {"AAPL": 170},
        )

        totals = valuator.totals(holdings)

        assert totals.cost_basis == Decimal("2300")
        assert totals.current_value == Decimal("2500")
        assert totals.profit_loss.amount == Decimal("200")
        assert totals.quoted_holdings == 1
        assert totals.total_holdings == 2
        assert not totals.has_complete_quotes

    def test_weight(self, valuator):
        holding = make_holding(quantity="1", unit_price="250")

        assert valuator.weight(holding, Decimal("1000")) == Decimal("25")

    def test_weight_of_empty_portfolio_is_zero(self, valuator):
        assert valuator.weight(make_holding(), Decimal("0")) == Decimal("0")
