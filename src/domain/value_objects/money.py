"""
Money helpers

Currency rounding for amounts held in decimal currency units.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENT = Decimal("0.01")


def round_currency(value: Union[int, float, str, Decimal]) -> Decimal:
    """Round a numeric value to 2 decimal places using half-up rounding"""
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Not a monetary value: {value!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Monetary value must be finite: {value}")
    return value.quantize(CENT, rounding=ROUND_HALF_UP)

