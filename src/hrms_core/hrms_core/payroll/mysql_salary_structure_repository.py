from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decimal_or_zero, dump_amount_map, fetchall, fetchone, load_amount_map
from .model import SalaryStructure
from .repository import SalaryStructureRepository

_COLUMNS = """
    salary_structure_id, organization_id, employee_id, basic_salary, allowances, deductions,
    effective_from, effective_to, is_active
"""


def _to_structure(r: dict) -> SalaryStructure:
    return SalaryStructure(
        salary_structure_id=int(r["salary_structure_id"]),
        organization_id=int(r["organization_id"]),
        employee_id=int(r["employee_id"]),
        basic_salary=decimal_or_zero(r["basic_salary"]),
        allowances=load_amount_map(r.get("allowances")),
        deductions=load_amount_map(r.get("deductions")),
        effective_from=r.get("effective_from"),
        effective_to=r.get("effective_to"),
        is_active=bool(r.get("is_active")),
    )


class MySQLSalaryStructureRepository(SalaryStructureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self, employee_id: int) -> Optional[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM salary_structures
                WHERE employee_id=%s AND is_active=1
                ORDER BY effective_from DESC, salary_structure_id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_structure(r) if r else None

    def list_active_for_organization(self, organization_id: int) -> Sequence[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM salary_structures
                WHERE organization_id=%s AND is_active=1
                ORDER BY employee_id, effective_from DESC, salary_structure_id DESC
                """,
                (int(organization_id),),
            )
            latest: dict[int, SalaryStructure] = {}
            for r in fetchall(cur):
                s = _to_structure(r)
                latest.setdefault(s.employee_id, s)
            return list(latest.values())

    def supersede(self, structure: SalaryStructure) -> SalaryStructure:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_structures
                SET is_active=0, effective_to=COALESCE(effective_to, %s)
                WHERE employee_id=%s AND is_active=1
                """,
                (structure.effective_from, structure.employee_id),
            )
            cur.execute(
                """
                INSERT INTO salary_structures(
                    organization_id, employee_id, basic_salary, allowances, deductions,
                    effective_from, effective_to, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    structure.organization_id,
                    structure.employee_id,
                    structure.basic_salary,
                    dump_amount_map(structure.allowances),
                    dump_amount_map(structure.deductions),
                    structure.effective_from,
                    structure.effective_to,
                ),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM salary_structures WHERE salary_structure_id=%s", (new_id,))
            return _to_structure(fetchone(cur))
