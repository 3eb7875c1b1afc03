from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decimal_or_zero, fetchall, fetchone
from .model import LeaveBalance
from .repository import LeaveBalanceRepository

_COLUMNS = "employee_id, leave_type_id, year, total, used, pending"


def _row_to_balance(r: Dict[str, Any]) -> LeaveBalance:
    return LeaveBalance(
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        year=int(r["year"]),
        total=decimal_or_zero(r.get("total")),
        used=decimal_or_zero(r.get("used")),
        pending=decimal_or_zero(r.get("pending")),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_balances WHERE employee_id=%s AND leave_type_id=%s AND year=%s",
                (int(employee_id), int(leave_type_id), int(year)),
            )
            row = fetchone(cur)
            return _row_to_balance(row) if row else None

    def list_for_year(self, organization_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_balances WHERE organization_id=%s AND year=%s",
                (int(organization_id), int(year)),
            )
            return [_row_to_balance(r) for r in fetchall(cur)]
