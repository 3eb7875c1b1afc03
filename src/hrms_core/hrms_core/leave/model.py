from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    leave_type_id: int
    year: int
    total: Decimal = Decimal("0")
    used: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")

    @property
    def remaining(self) -> Decimal:
        return self.total - self.used - self.pending


@dataclass(frozen=True)
class YearlyLeaveTotals:
    """All leave types of one employee-year added together."""

    employee_id: int
    year: int
    total: Decimal = Decimal("0")
    used: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")

    @property
    def overdrawn(self) -> Decimal:
        return max(Decimal("0"), self.used - self.total)
