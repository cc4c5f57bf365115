"""Fixed-point money helpers.

Amounts cross the API as two-decimal ``Decimal`` values and are stored and
computed as integer cents.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from settleup.core.exceptions import ValidationError

CENT = Decimal("0.01")

# Equality tolerance for money comparisons: one minimum currency unit.
EPSILON_CENTS = 1

# Largest amount accepted, kept well inside a BSON 64-bit integer.
MAX_CENTS = 10 ** 15

Amount = Union[Decimal, int, float, str]


def to_cents(amount: Amount) -> int:
    """
    Round an amount to the nearest cent and return it as integer cents.

    Raises ValidationError for anything that is not a finite number or is
    worth more than MAX_CENTS cents.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        if not value.is_finite() or abs(value) * 100 > MAX_CENTS:
            raise ValidationError(f"Invalid amount: {amount}")
        return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {amount}")


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-decimal ``Decimal``."""
    return (Decimal(cents) / 100).quantize(CENT)


def within_epsilon(a_cents: int, b_cents: int) -> bool:
    return abs(a_cents - b_cents) <= EPSILON_CENTS
