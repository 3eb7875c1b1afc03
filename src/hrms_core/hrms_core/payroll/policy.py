from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from ..common.money import to_decimal
from ..core.constants import (
    DEFAULT_LATE_PENALTY_AMOUNT,
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_PF_RATE,
    DEFAULT_STANDARD_HOURS_PER_DAY,
    DEFAULT_TAX_SLABS,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PayrollPolicy:
    """Organization payroll constants, read once from settings."""

    late_penalty_amount: Decimal = DEFAULT_LATE_PENALTY_AMOUNT
    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER
    standard_hours_per_day: int = DEFAULT_STANDARD_HOURS_PER_DAY
    pf_rate: Decimal = DEFAULT_PF_RATE
    # (threshold, rate) pairs, ascending; the rate applies to income above the threshold.
    tax_slabs: tuple[tuple[Decimal, Decimal], ...] = DEFAULT_TAX_SLABS

    def __post_init__(self):
        if self.standard_hours_per_day <= 0:
            raise ValidationError("standard_hours_per_day must be > 0")
        if self.late_penalty_amount < 0 or self.overtime_multiplier < 0:
            raise ValidationError("late penalty and overtime multiplier must not be negative")

    @classmethod
    def from_settings(cls, settings: Any) -> "PayrollPolicy":
        return cls(
            late_penalty_amount=to_decimal(getattr(settings, "LATE_PENALTY_AMOUNT", DEFAULT_LATE_PENALTY_AMOUNT)),
            overtime_multiplier=to_decimal(getattr(settings, "OVERTIME_MULTIPLIER", DEFAULT_OVERTIME_MULTIPLIER)),
            standard_hours_per_day=int(getattr(settings, "STANDARD_HOURS_PER_DAY", DEFAULT_STANDARD_HOURS_PER_DAY)),
            pf_rate=to_decimal(getattr(settings, "PF_RATE", DEFAULT_PF_RATE)),
            tax_slabs=_slabs(getattr(settings, "TAX_SLABS", DEFAULT_TAX_SLABS)),
        )


def _slabs(values: Iterable[Iterable[Any]]) -> tuple[tuple[Decimal, Decimal], ...]:
    pairs = [(to_decimal(threshold), to_decimal(rate)) for threshold, rate in values]
    return tuple(sorted(pairs))
