# backend/tests/schemas/test_transactions.py
"""
Tests for the transaction input schema.

TransactionRecordIn accepts camelCase and snake_case keys and parses
leniently: malformed numbers become 0, missing text becomes "".
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from depotview.schemas import TransactionRecordIn, TransactionResponse, ValuationRequest
from depotview.services.portfolio import HoldingsAggregator
from depotview.services.portfolio.types import TransactionRecord


class TestAliases:
    """Wire names and Python names are both accepted."""

    def test_camel_case(self):
        record = TransactionRecordIn.model_validate({
            "clientId": "C1",
            "transactionId": "T1",
            "assetType": "ETF",
            "unitPrice": "80",
            "totalValue": "1600",
        })

        assert record.client_id == "C1"
        assert record.transaction_id == "T1"
        assert record.asset_type == "ETF"
        assert record.unit_price == Decimal("80")
        assert record.total_value == Decimal("1600")

    def test_snake_case(self):
        record = TransactionRecordIn(client_id="C1", asset_type="Stock", unit_price=Decimal("1"))

        assert record.client_id == "C1"
        assert record.asset_type == "Stock"

    def test_alternative_names(self):
        record = TransactionRecordIn.model_validate(
            {"name": "Apple Inc.", "symbol": "AAPL", "type": "Stock"}
        )

        assert record.asset == "Apple Inc."
        assert record.ticker == "AAPL"
        assert record.asset_type == "Stock"

    def test_unknown_keys_are_ignored(self):
        record = TransactionRecordIn.model_validate({"asset": "X", "broker": "Y"})

        assert record.asset == "X"


class TestLenientParsing:
    """Bad values degrade instead of failing."""

    def test_defaults(self):
        record = TransactionRecordIn.model_validate({})

        assert record.asset == ""
        assert record.isin == ""
        assert record.quantity == Decimal("0")
        assert record.total_value == Decimal("0")

    @pytest.mark.parametrize("value", [None, "", "n/a", "NaN", True])
    def test_malformed_numbers_become_zero(self, value):
        record = TransactionRecordIn.model_validate({"quantity": value})

        assert record.quantity == Decimal("0")

    def test_floats_keep_their_decimal_text(self):
        record = TransactionRecordIn.model_validate({"unitPrice": 0.1})

        assert record.unit_price == Decimal("0.1")

    def test_null_text_becomes_empty(self):
        record = TransactionRecordIn.model_validate({"ticker": None, "isin": None})

        assert record.ticker == ""
        assert record.isin == ""

    def test_numeric_ids_become_text(self):
        record = TransactionRecordIn.model_validate({"clientId": 42, "transactionId": 7})

        assert record.client_id == "42"
        assert record.transaction_id == "7"

    def test_text_is_stripped_and_isin_uppercased(self):
        record = TransactionRecordIn.model_validate({"asset": "  Apple Inc. ", "isin": " us0378331005 "})

        assert record.asset == "Apple Inc."
        assert record.isin == "US0378331005"

    def test_structurally_wrong_text_is_rejected(self):
        with pytest.raises(ValidationError):
            TransactionRecordIn.model_validate({"asset": {"name": "Apple"}})


class TestToRecord:
    """Conversion to the engine's internal type."""

    def test_to_record(self):
        record = TransactionRecordIn.model_validate({
            "clientId": "C1", "transactionId": "T1", "date": "2024-01-15",
            "asset": "Apple Inc.", "isin": "US0378331005", "ticker": "AAPL",
            "type": "Stock", "quantity": 10, "unitPrice": 150, "totalValue": 1500,
        }).to_record()

        assert record == TransactionRecord(
            client_id="C1",
            transaction_id="T1",
            date="2024-01-15",
            asset="Apple Inc.",
            isin="US0378331005",
            ticker="AAPL",
            asset_type="Stock",
            quantity=Decimal("10"),
            unit_price=Decimal("150"),
            total_value=Decimal("1500"),
        )


class TestValuationRequest:
    """Options of the stateless valuation request."""

    def test_defaults(self):
        request = ValuationRequest.model_validate({})

        assert request.transactions == []
        assert request.quotes is None
        assert request.direction == "asc"
        assert request.currency is None

    def test_currency_is_uppercased(self):
        assert ValuationRequest.model_validate({"currency": "usd"}).currency == "USD"

    def test_currency_must_be_three_letters(self):
        with pytest.raises(ValidationError):
            ValuationRequest.model_validate({"currency": "EURO"})


class TestIsinIdentity:
    """ISINs are case-normalized, so case variants are one instrument."""

    def test_case_variants_aggregate_into_one_holding(self):
        records = [
            TransactionRecordIn.model_validate(
                {"transactionId": "T1", "asset": "Apple Inc.", "isin": "us0378331005",
                 "quantity": 10, "totalValue": 1500}
            ).to_record(),
            TransactionRecordIn.model_validate(
                {"transactionId": "T2", "asset": "Apple Inc.", "isin": "US0378331005",
                 "quantity": 5, "totalValue": 800}
            ).to_record(),
        ]

        holdings = HoldingsAggregator().aggregate(records)

        assert len(holdings) == 1
        assert holdings[0].isin == "US0378331005"
        assert holdings[0].quantity == Decimal("15")


class TestTransactionResponse:
    """History lines are built by the router mapper, never from raw records."""

    def test_record_is_not_accepted_directly(self):
        record = TransactionRecordIn.model_validate({"asset": "Apple Inc."}).to_record()

        with pytest.raises(ValidationError):
            TransactionResponse.model_validate(record)
