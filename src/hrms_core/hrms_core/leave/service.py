from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from .model import LeaveBalance, YearlyLeaveTotals
from .repository import LeaveBalanceRepository


class LeaveBalanceLedger:
    """Read side of leave balances. A missing balance reads as zero, never as an error."""

    def __init__(self, balances: LeaveBalanceRepository):
        self._balances = balances

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> LeaveBalance:
        balance = self._balances.get_balance(int(employee_id), int(leave_type_id), int(year))
        if balance is None:
            return LeaveBalance(employee_id=int(employee_id), leave_type_id=int(leave_type_id), year=int(year))
        return balance

    def yearly_totals(self, organization_id: int, year: int) -> dict[int, YearlyLeaveTotals]:
        sums: dict[int, list[Decimal]] = defaultdict(lambda: [Decimal("0"), Decimal("0"), Decimal("0")])
        for b in self._balances.list_for_year(int(organization_id), int(year)):
            acc = sums[b.employee_id]
            acc[0] += b.total
            acc[1] += b.used
            acc[2] += b.pending
        return {
            employee_id: YearlyLeaveTotals(employee_id=employee_id, year=int(year), total=t, used=u, pending=p)
            for employee_id, (t, u, p) in sums.items()
        }

