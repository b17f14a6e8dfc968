from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CENT = Decimal("0.01")
QUANTITY_STEP = Decimal("0.0001")
ZERO = Decimal("0")

# Largest values the Numeric(14, 2) money and Numeric(14, 4) quantity columns hold
MAX_MONEY = Decimal("999999999999.99")
MAX_QUANTITY = Decimal("9999999999.9999")


def to_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """
    Coerce a stored or submitted numeric value to Decimal.
    Floats go through str() so 0.1 stays 0.1. Booleans, NaN and infinities fall back to `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not number.is_finite():
        return default
    return number


def exceeds(value: Decimal, limit: Decimal) -> bool:
    return abs(value) > limit


def _quantize(value: Any, step: Decimal) -> Decimal:
    number = to_decimal(value)
    try:
        return number.quantize(step, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the context precision; callers bound their inputs first
        raise ValueError(f"{number} is too large to round to {step}") from None


def round_currency(value: Any) -> Decimal:
    """Round half-up to cents."""
    return _quantize(value, CENT)


def round_quantity(value: Any) -> Decimal:
    return _quantize(value, QUANTITY_STEP)
