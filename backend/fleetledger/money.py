# Overview: Decimal helpers for freight amounts.

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest amount a single trip field may carry: 999,999,999,999.99
MAX_AMOUNT = Decimal("999999999999.99")


def quantize(value) -> Decimal:
    """Normalize any numeric (or None) to a 2-place Decimal. None becomes zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        # str() keeps floats coming back from SQL aggregates from leaking binary noise
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value) -> str:
    return str(quantize(value))
