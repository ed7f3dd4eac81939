"""Currency helpers."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """Coerce a number to Decimal without binary float artefacts."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: Union[Decimal, float, int]) -> Decimal:
    """Round half-up to 2 decimal places (nearest cent)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Union[Decimal, float, int]) -> Decimal:
    return amount * to_decimal(percentage) / HUNDRED
