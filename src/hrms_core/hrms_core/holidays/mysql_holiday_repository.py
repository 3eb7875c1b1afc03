from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, organization_id: int, *, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, organization_id, holiday_name, holiday_date
                FROM holidays
                WHERE organization_id=%s AND holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date
                """,
                (int(organization_id), start, end),
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    organization_id=int(r["organization_id"]),
                    holiday_name=r["holiday_name"],
                    holiday_date=r["holiday_date"],
                )
                for r in fetchall(cur)
            ]
