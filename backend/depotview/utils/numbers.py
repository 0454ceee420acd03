# backend/depotview/utils/numbers.py
"""
Numeric coercion helpers.

Upstream JSON carries floats, numeric strings, nulls and occasionally junk.
The valuation engine works on Decimal only, so every number crosses this
module on the way in.

Floats are converted through str() so that 0.1 becomes Decimal("0.1")
rather than its binary expansion.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a value to a finite Decimal.

    Returns None for None, booleans, empty strings, NaN, infinities and
    anything that does not parse as a number.

    Examples:
        to_decimal(150)       -> Decimal("150")
        to_decimal(153.5)     -> Decimal("153.5")
        to_decimal(" 12.0 ")  -> Decimal("12.0")
        to_decimal("n/a")     -> None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return Decimal(str(value))

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None

    try:
        return to_decimal(float(value))
    except (TypeError, ValueError):
        return None


def to_decimal_or_zero(value: Any) -> Decimal:
    """Like to_decimal, but unusable input counts as zero."""
    parsed = to_decimal(value)
    return ZERO if parsed is None else parsed


def to_positive_decimal(value: Any) -> Decimal | None:
    """Like to_decimal, but zero and negative values are also None."""
    parsed = to_decimal(value)
    if parsed is None or parsed <= ZERO:
        return None
    return parsed
