from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decimal_or_zero, dump_amount_map, fetchall, fetchone, load_amount_map
from .model import PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, organization_id, employee_id, salary_structure_id, month, year,
    working_days, present_days, leave_days, unpaid_leave_days, overtime_hours, late_penalties,
    basic_salary, allowances, deductions, bonuses, adjustments, gross_salary, net_salary,
    payment_status, payment_date, payment_method, transaction_reference
"""

_INSERT = """
    INSERT INTO payrolls(
        organization_id, employee_id, salary_structure_id, month, year,
        working_days, present_days, leave_days, unpaid_leave_days, overtime_hours, late_penalties,
        basic_salary, allowances, deductions, bonuses, adjustments, gross_salary, net_salary,
        payment_status
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        organization_id=int(r["organization_id"]),
        employee_id=int(r["employee_id"]),
        salary_structure_id=int(r["salary_structure_id"]) if r.get("salary_structure_id") is not None else None,
        month=int(r["month"]),
        year=int(r["year"]),
        working_days=int(r["working_days"]),
        present_days=decimal_or_zero(r.get("present_days")),
        leave_days=decimal_or_zero(r.get("leave_days")),
        unpaid_leave_days=decimal_or_zero(r.get("unpaid_leave_days")),
        overtime_hours=decimal_or_zero(r.get("overtime_hours")),
        late_penalties=decimal_or_zero(r.get("late_penalties")),
        basic_salary=decimal_or_zero(r.get("basic_salary")),
        allowances=load_amount_map(r.get("allowances")),
        deductions=load_amount_map(r.get("deductions")),
        bonuses=load_amount_map(r.get("bonuses")),
        adjustments=load_amount_map(r.get("adjustments")),
        gross_salary=decimal_or_zero(r.get("gross_salary")),
        net_salary=decimal_or_zero(r.get("net_salary")),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_date=r.get("payment_date"),
        payment_method=r.get("payment_method"),
        transaction_reference=r.get("transaction_reference"),
    )


def _insert_params(p: PayrollRecord) -> tuple:
    return (
        p.organization_id,
        p.employee_id,
        p.salary_structure_id,
        p.month,
        p.year,
        p.working_days,
        p.present_days,
        p.leave_days,
        p.unpaid_leave_days,
        p.overtime_hours,
        p.late_penalties,
        p.basic_salary,
        dump_amount_map(p.allowances),
        dump_amount_map(p.deductions),
        dump_amount_map(p.bonuses),
        dump_amount_map(p.adjustments),
        p.gross_salary,
        p.net_salary,
        p.payment_status.value,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def statuses_for_period(self, organization_id: int, month: int, year: int) -> dict[int, PaymentStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, payment_status FROM payrolls WHERE organization_id=%s AND month=%s AND year=%s",
                (int(organization_id), int(month), int(year)),
            )
            return {int(r["employee_id"]): PaymentStatus(r["payment_status"]) for r in fetchall(cur)}

    def save_period(self, records: Sequence[PayrollRecord], *, replace_existing: bool = False) -> list[int]:
        if not records:
            return []
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for p in records:
                if replace_existing:
                    cur.execute(
                        "DELETE FROM payrolls WHERE employee_id=%s AND month=%s AND year=%s AND payment_status<>%s",
                        (p.employee_id, p.month, p.year, PaymentStatus.PAID.value),
                    )
                cur.execute(_INSERT, _insert_params(p))
                ids.append(int(cur.lastrowid))
        return ids

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def update(self, record: PayrollRecord) -> PayrollRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET allowances=%s, deductions=%s, bonuses=%s, adjustments=%s,
                    gross_salary=%s, net_salary=%s, payment_status=%s,
                    payment_date=%s, payment_method=%s, transaction_reference=%s
                WHERE payroll_id=%s
                """,
                (
                    dump_amount_map(record.allowances),
                    dump_amount_map(record.deductions),
                    dump_amount_map(record.bonuses),
                    dump_amount_map(record.adjustments),
                    record.gross_salary,
                    record.net_salary,
                    record.payment_status.value,
                    record.payment_date,
                    record.payment_method,
                    record.transaction_reference,
                    int(record.payroll_id),
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(record.payroll_id),))
            return _to_record(fetchone(cur))

    def list_for_period(self, organization_id: int, month: int, year: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE organization_id=%s AND month=%s AND year=%s ORDER BY employee_id",
                (int(organization_id), int(month), int(year)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_year(
        self, organization_id: int, year: int, *, employee_id: Optional[int] = None
    ) -> Sequence[PayrollRecord]:
        sql = f"SELECT {_COLUMNS} FROM payrolls WHERE organization_id=%s AND year=%s"
        params: list[object] = [int(organization_id), int(year)]
        if employee_id is not None:
            sql += " AND employee_id=%s"
            params.append(int(employee_id))
        sql += " ORDER BY year, month, employee_id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]
