"""
Numeric helpers shared by the validator and the derivation engine.

Drafts arrive from text inputs, so numbers may be strings, blank, or
garbage. These helpers keep "blank" and "not a number" distinguishable.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

CURRENCY_QUANTUM = Decimal("0.01")


def is_blank(value: Any) -> bool:
    """None, empty or whitespace-only strings count as blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a draft value as a finite Decimal.

    Returns None for blank input AND for anything that is not a number;
    use is_blank() first when the difference matters.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            return None
    else:
        return None
    return number if number.is_finite() else None


def round_currency(value: Decimal) -> Decimal:
    """Round money to 2 decimal places, half up (2.345 -> 2.35)."""
    return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
