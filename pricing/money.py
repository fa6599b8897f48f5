"""
Purpose: Money handling shared by every economics module.
What it does:

- Coerces caller-supplied amounts (int / str / float / Decimal) into Decimal
- Rejects negative or non-numeric amounts with InvalidAmount
- Quantizes outward-facing results to 2 decimal places (ROUND_HALF_UP)

Rule: No business rules here. Just arithmetic hygiene.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

Money = Decimal
AmountLike = Union[int, float, str, Decimal]

CENT = Decimal("0.01")
ZERO = Decimal("0")


class InvalidAmount(ValueError):
    """Raised when a negative or non-numeric amount is passed to a calculator."""
    pass


def to_money(value: AmountLike, field_name: str = "amount") -> Money:
    """
    Convert a raw amount to Decimal, failing fast on bad input.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"{field_name} must be numeric, got {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(f"{field_name} must be numeric, got {value!r}") from None
    else:
        raise InvalidAmount(f"{field_name} must be numeric, got {value!r}")

    if not amount.is_finite():
        raise InvalidAmount(f"{field_name} must be finite, got {value!r}")

    if amount < 0:
        raise InvalidAmount(f"{field_name} cannot be negative, got {amount}")

    return amount


def to_quantity(value: Union[int, str], field_name: str = "quantity") -> int:
    """
    Whole, non-negative item quantity.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"{field_name} must be a whole number, got {value!r}")

    amount = to_money(value, field_name)
    if amount != amount.to_integral_value():
        raise InvalidAmount(f"{field_name} must be a whole number, got {value!r}")
    return int(amount)


def quantize(amount: Decimal) -> Money:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_half_up(value: Decimal) -> int:
    """Nearest integer, halves away from zero (matches the dashboard's Math.round for positives)."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(amount: Decimal, currency_symbol: str = "₹") -> str:
    """Display form used in advisory texts only, e.g. ₹49.00"""
    return f"{currency_symbol}{quantize(amount)}"
