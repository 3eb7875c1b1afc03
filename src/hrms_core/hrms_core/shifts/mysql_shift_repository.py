from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decimal_or_zero, fetchall, fetchone, normalize_mysql_time
from .model import OvertimeRule, Shift
from .repository import ShiftRepository

_COLUMNS = """
    shift_id, organization_id, shift_name, start_time, end_time,
    late_grace_minutes, early_exit_grace_minutes, overtime_min_minutes, overtime_multiplier
"""


def _to_shift(r: dict) -> Shift:
    rule = None
    if r.get("overtime_min_minutes") is not None or r.get("overtime_multiplier") is not None:
        rule = OvertimeRule(
            min_minutes=int(r.get("overtime_min_minutes") or 0),
            multiplier=decimal_or_zero(r["overtime_multiplier"]) if r.get("overtime_multiplier") is not None else None,
        )
    return Shift(
        shift_id=int(r["shift_id"]),
        organization_id=int(r["organization_id"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        late_grace_minutes=int(r.get("late_grace_minutes") or 0),
        early_exit_grace_minutes=int(r.get("early_exit_grace_minutes") or 0),
        overtime_rule=rule,
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_organization(self, organization_id: int) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE organization_id=%s ORDER BY shift_id",
                (int(organization_id),),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _to_shift(r) if r else None
