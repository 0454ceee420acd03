# backend/depotview/services/portfolio/formatting.py
"""
Display formatting for money, percentages and quantities.

Output is fixed per locale table below and does not depend on the
process locale, so the same input always renders the same string:

    format_currency(1234.5)                    -> "1.234,50 €"   (de-DE, no-break space before €)
    format_currency(1234.5, "USD", "en-US")    -> "$1,234.50"
    format_percentage(0)                       -> "+0.00%"
    format_percentage(-5.75)                   -> "-5.75%"

Rounding is half-up to two decimals.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from depotview.utils.numbers import to_decimal

NBSP = "\u00a0"

CENTS = Decimal("0.01")
QUANTITY_STEP = Decimal("0.0001")


@dataclass(frozen=True)
class LocaleConventions:
    """Separators and currency symbol placement for one locale."""

    group_separator: str
    decimal_separator: str
    symbol_first: bool


SUPPORTED_LOCALES: dict[str, LocaleConventions] = {
    "de-DE": LocaleConventions(group_separator=".", decimal_separator=",", symbol_first=False),
    "en-US": LocaleConventions(group_separator=",", decimal_separator=".", symbol_first=True),
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
    "CHF": "CHF",
}


def _require_decimal(value: Any) -> Decimal:
    parsed = to_decimal(value)
    if parsed is None:
        raise ValueError(f"Cannot format non-numeric value: {value!r}")
    return parsed


def _round(value: Decimal, step: Decimal) -> Decimal:
    """
    Round half-up to step.

    The context precision is raised to fit the result, so values with more
    than 28 digits before the step (e.g. 1e30) round instead of raising
    InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - step.as_tuple().exponent + 2)
        return value.quantize(step, rounding=ROUND_HALF_UP)


def _group(amount: Decimal, conventions: LocaleConventions) -> str:
    """Render abs(amount) with two decimals and locale separators."""
    text = f"{abs(amount):,.2f}"
    return text.translate(str.maketrans({
        ",": conventions.group_separator,
        ".": conventions.decimal_separator,
    }))


def format_currency(value: Any, currency_code: str = "EUR", locale: str = "de-DE") -> str:
    """
    Format a money amount.

    Args:
        value: Amount (Decimal, int, float or numeric string)
        currency_code: ISO 4217 code; unknown codes are shown as the code
        locale: One of SUPPORTED_LOCALES

    Raises:
        ValueError: Unsupported locale or non-numeric value
    """
    conventions = SUPPORTED_LOCALES.get(locale)
    if conventions is None:
        raise ValueError(
            f"Unsupported locale '{locale}'. Supported: {', '.join(sorted(SUPPORTED_LOCALES))}"
        )

    amount = _round(_require_decimal(value), CENTS)
    code = (currency_code or "EUR").strip().upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    # -0.00 after rounding is shown unsigned
    sign = "-" if amount < 0 else ""
    digits = _group(amount, conventions)

    if conventions.symbol_first:
        spacer = NBSP if symbol.isalpha() else ""
        return f"{sign}{symbol}{spacer}{digits}"
    return f"{sign}{digits}{NBSP}{symbol}"


def format_percentage(value: Any) -> str:
    """
    Format a percentage with an explicit sign and two decimals.

    Zero and positive values get "+", negative values "-".

    Raises:
        ValueError: Non-numeric value
    """
    percentage = _require_decimal(value)
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{_round(percentage, CENTS):f}%"


def format_quantity(value: Any) -> str:
    """Four decimals, no grouping (e.g. "15.0000")."""
    quantity = _require_decimal(value)
    return f"{_round(quantity, QUANTITY_STEP):f}"
