"""Money primitives - amounts are integers in minor currency units (cents)"""

from typing import Type

from treasury_gateway.domain.exceptions import InvalidAmountError


def ensure_positive_amount(amount_cents: int, error: Type[InvalidAmountError] = InvalidAmountError) -> int:
    """Reject zero, negative and non-integer amounts"""
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise error()
    return amount_cents


def ensure_non_negative_amount(amount_cents: int) -> int:
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents < 0:
        raise InvalidAmountError("amount must be a non-negative integer number of minor units")
    return amount_cents


def apply_rate(amount_cents: int, rate: float) -> int:
    """
    Multiply an amount by a decimal rate, truncating toward zero.

    The product is computed in floating point and then truncated, so
    apply_rate(2000, 0.10) == 200 and apply_rate(999, 0.07) == 69.
    """
    return int(float(amount_cents) * rate)
