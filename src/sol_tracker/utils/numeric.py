from decimal import Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal(0)
HUNDRED = Decimal(100)


def safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is 0"""
    if not denominator:
        return ZERO
    return numerator / denominator


def pct_change(value: Decimal, base: Decimal) -> Decimal:
    """Percentage move from base to value, 0 when base is 0"""
    return safe_div(value - base, base) * HUNDRED


def to_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """Convert provider numbers (int, float, str) to Decimal"""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    # NaN/Infinity from a provider are treated as missing
    if not result.is_finite():
        return default
    return result
