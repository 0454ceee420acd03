# backend/tests/services/test_formatting.py
"""
Golden-output tests for display formatting.

Output must not depend on the process locale, so exact strings are asserted.
"""

from decimal import Decimal

import pytest

from depotview.services.portfolio.formatting import (
    NBSP,
    format_currency,
    format_percentage,
    format_quantity,
)


class TestFormatCurrency:
    """Tests for money formatting."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("1234.5"), f"1.234,50{NBSP}€"),
        (0, f"0,00{NBSP}€"),
        (Decimal("1234567.891"), f"1.234.567,89{NBSP}€"),
        (Decimal("-5"), f"-5,00{NBSP}€"),
        (153.33333, f"153,33{NBSP}€"),
        ("2300", f"2.300,00{NBSP}€"),
    ])
    def test_de_de_euro(self, value, expected):
        assert format_currency(value) == expected

    @pytest.mark.parametrize("value, currency, expected", [
        (Decimal("1234.56"), "USD", "$1,234.56"),
        (Decimal("-5"), "USD", "-$5.00"),
        (Decimal("1234.56"), "EUR", "€1,234.56"),
        (Decimal("10"), "CHF", f"CHF{NBSP}10.00"),
    ])
    def test_en_us(self, value, currency, expected):
        assert format_currency(value, currency, "en-US") == expected

    def test_rounds_half_up(self):
        assert format_currency(Decimal("0.005")) == f"0,01{NBSP}€"
        assert format_currency(Decimal("2.675")) == f"2,68{NBSP}€"

    def test_negative_rounding_to_zero_has_no_sign(self):
        assert format_currency(Decimal("-0.001")) == f"0,00{NBSP}€"

    def test_unknown_currency_uses_code(self):
        assert format_currency(Decimal("1"), "SEK") == f"1,00{NBSP}SEK"

    def test_currency_code_is_case_insensitive(self):
        assert format_currency(Decimal("1"), "usd", "en-US") == "$1.00"

    def test_unknown_locale_raises(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            format_currency(Decimal("1"), "EUR", "fr-FR")

    @pytest.mark.parametrize("value", [None, "abc", float("nan")])
    def test_non_numeric_raises(self, value):
        with pytest.raises(ValueError):
            format_currency(value)


class TestFormatPercentage:
    """Tests for percentage formatting."""

    @pytest.mark.parametrize("value, expected", [
        (0, "+0.00%"),
        (Decimal("-5.75"), "-5.75%"),
        (-5.75, "-5.75%"),
        (Decimal("13.3333"), "+13.33%"),
        (Decimal("20"), "+20.00%"),
        (Decimal("0.005"), "+0.01%"),
    ])
    def test_golden_values(self, value, expected):
        assert format_percentage(value) == expected

    def test_non_numeric_raises(self):
        with pytest.raises(ValueError):
            format_percentage("n/a")


class TestFormatQuantity:
    """Tests for quantity formatting."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("15"), "15.0000"),
        (Decimal("0.123456"), "0.1235"),
        (Decimal("-3"), "-3.0000"),
    ])
    def test_four_decimals(self, value, expected):
        assert format_quantity(value) == expected


class TestLargeValues:
    """Values beyond the default 28-digit context still format."""

    def test_currency(self):
        expected = "1" + ".000" * 10 + f",00{NBSP}€"

        assert format_currency(Decimal("1e30")) == expected

    def test_currency_en_us(self):
        assert format_currency(Decimal("-1e30"), "USD", "en-US") == "-$1" + ",000" * 10 + ".00"

    def test_percentage(self):
        assert format_percentage(Decimal("1e30")) == "+1" + "0" * 30 + ".00%"

    def test_percentage_rounds_half_up(self):
        assert format_percentage(Decimal("1" + "0" * 30 + ".005")) == "+1" + "0" * 30 + ".01%"

    def test_quantity(self):
        assert format_quantity(Decimal("1e30")) == "1" + "0" * 30 + ".0000"
