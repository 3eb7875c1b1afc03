from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveBalance


class LeaveBalanceRepository(Protocol):
    """Read-only from this package; balances are mutated by leave approval elsewhere."""

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_year(self, organization_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError
