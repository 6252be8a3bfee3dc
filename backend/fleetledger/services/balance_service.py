# Overview: Pure balance arithmetic for trips.

"""
Balance calculator.

party_balance       = party_freight     - party_advance
motor_owner_balance = motor_owner_bhada - motor_owner_advance

No database access, no side effects. Everything is Decimal so stored
balances never pick up floating-point drift.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from ..money import quantize

# balance field -> (gross field, advance field)
BALANCE_INPUTS = {
    "party_balance": ("party_freight", "party_advance"),
    "motor_owner_balance": ("motor_owner_bhada", "motor_owner_advance"),
}


def balances_for_create(payload: Mapping[str, Any]) -> dict[str, Decimal]:
    """Balances for a new trip. Missing amounts count as zero."""
    return {
        balance: quantize(payload.get(gross)) - quantize(payload.get(advance))
        for balance, (gross, advance) in BALANCE_INPUTS.items()
    }


def balances_for_update(existing: Any, patch: Mapping[str, Any]) -> dict[str, Decimal]:
    """
    Balances after applying `patch` to `existing` (a Trip or anything with
    the same attributes).

    A balance is recomputed only when the patch carries one of its inputs;
    each operand falls back to the stored value when absent from the patch.
    Otherwise the stored balance is carried forward unchanged.
    """
    result = {}
    for balance, (gross, advance) in BALANCE_INPUTS.items():
        if gross not in patch and advance not in patch:
            result[balance] = quantize(getattr(existing, balance))
            continue
        gross_value = patch[gross] if gross in patch else getattr(existing, gross)
        advance_value = patch[advance] if advance in patch else getattr(existing, advance)
        result[balance] = quantize(gross_value) - quantize(advance_value)
    return result
