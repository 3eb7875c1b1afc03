from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        employee_code=r["employee_code"],
        current_shift_id=int(r["current_shift_id"]) if r.get("current_shift_id") is not None else None,
        status=EmployeeStatus(r["status"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, organization_id, employee_code, current_shift_id, status
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_for_organization(self, organization_id: int, *, active_only: bool = True) -> Sequence[Employee]:
        sql = """
            SELECT employee_id, organization_id, employee_code, current_shift_id, status
            FROM employees
            WHERE organization_id=%s
        """
        params: list[object] = [int(organization_id)]
        if active_only:
            sql += " AND status=%s"
            params.append(EmployeeStatus.ACTIVE.value)
        sql += " ORDER BY employee_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]
