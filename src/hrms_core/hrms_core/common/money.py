"""Decimal helpers for currency amounts.

Amount maps (allowances, deductions, bonuses, adjustments) are plain
``dict[str, Decimal]``; summation never goes through float.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..core.constants import MONEY_QUANTUM
from ..core.exceptions import ValidationError

AmountMap = dict[str, Decimal]


def to_decimal(value: Any, *, field_name: str = "amount") -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1 instead of its binary expansion.
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field_name} is not a valid amount: {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite: {value!r}")
    return result


def to_amount_map(values: Optional[Mapping[str, Any]]) -> AmountMap:
    if not values:
        return {}
    return {str(key): to_decimal(val, field_name=str(key)) for key, val in values.items()}


def sum_amounts(values: Optional[Mapping[str, Decimal]]) -> Decimal:
    if not values:
        return Decimal("0")
    return sum(values.values(), Decimal("0"))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def merge_amounts(base: Optional[Mapping[str, Decimal]], updates: Optional[Mapping[str, Any]]) -> AmountMap:
    """Shallow merge: keys in ``updates`` replace keys in ``base``."""
    merged: AmountMap = dict(base or {})
    merged.update(to_amount_map(updates))
    return merged
