from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, organization_id, employee_id, work_date, shift_id, check_in_time, check_out_time,
    status, late_minutes, early_exit_minutes, overtime_minutes, worked_minutes
"""

_INSERT = """
    INSERT INTO attendance_records(
        organization_id, employee_id, work_date, shift_id, check_in_time, check_out_time,
        status, late_minutes, early_exit_minutes, overtime_minutes, worked_minutes
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        organization_id=int(r["organization_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        late_minutes=int(r.get("late_minutes") or 0),
        early_exit_minutes=int(r.get("early_exit_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        worked_minutes=int(r.get("worked_minutes") or 0),
    )


def _params(record: AttendanceRecord) -> tuple:
    return (
        record.organization_id,
        record.employee_id,
        record.work_date,
        record.shift_id,
        record.check_in_time,
        record.check_out_time,
        record.status.value,
        record.late_minutes,
        record.early_exit_minutes,
        record.overtime_minutes,
        record.worked_minutes,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _INSERT
                + """
                ON DUPLICATE KEY UPDATE
                    shift_id=VALUES(shift_id),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    status=VALUES(status),
                    late_minutes=VALUES(late_minutes),
                    early_exit_minutes=VALUES(early_exit_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    worked_minutes=VALUES(worked_minutes)
                """,
                _params(record),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (record.employee_id, record.work_date),
            )
            return _to_record(fetchone(cur))

    def existing_keys(self, organization_id: int, keys: Iterable[tuple[int, date]]) -> set[tuple[int, date]]:
        keys = set(keys)
        if not keys:
            return set()

        employee_ids = {employee_id for employee_id, _ in keys}
        dates = [work_date for _, work_date in keys]
        placeholders, params = in_clause(sorted(employee_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, work_date
                FROM attendance_records
                WHERE organization_id=%s AND employee_id IN ({placeholders})
                  AND work_date BETWEEN %s AND %s
                """,
                (int(organization_id), *params, min(dates), max(dates)),
            )
            found = {(int(r["employee_id"]), r["work_date"]) for r in fetchall(cur)}
        return found & keys

    def insert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT, [_params(r) for r in records])
            return len(records)

    def list_between(
        self,
        organization_id: int,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["organization_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [int(organization_id), start, end]
        if employee_ids is not None:
            ids = sorted({int(i) for i in employee_ids})
            if not ids:
                return []
            placeholders, id_params = in_clause(ids)
            clauses.append(f"employee_id IN ({placeholders})")
            params.extend(id_params)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY employee_id, work_date",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
