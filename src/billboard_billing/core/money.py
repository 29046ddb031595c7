"""Money helpers: decimal coercion and rounding."""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
UNIT = Decimal("1")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a raw value to a finite Decimal.

    None, unparseable strings, booleans and non-finite numbers (NaN,
    Infinity) all become ``Decimal("0")``.

    Examples:
        >>> to_decimal("1,250.50")
        Decimal('1250.50')
        >>> to_decimal(float("nan"))
        Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.replace(",", "").replace(" ", "").strip()
        if not cleaned:
            return ZERO
        try:
            result = Decimal(cleaned)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def floor_money(value: Decimal) -> Decimal:
    """Truncate to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_DOWN)


def round_units(value: Decimal) -> Decimal:
    """Round to a whole amount, halves away from zero."""
    return to_decimal(value).quantize(UNIT, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(upper, value))
