from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventSource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..geofence.model import GeoPoint
from .model import DeviceInfo, RawAttendanceEvent
from .repository import AttendanceLogRepository


def _to_event(r: dict) -> RawAttendanceEvent:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return RawAttendanceEvent(
        log_id=int(r["log_id"]),
        organization_id=int(r["organization_id"]),
        employee_id=int(r["employee_id"]) if r.get("employee_id") is not None else None,
        punched_at=r["punched_at"],
        source=EventSource(r["source"]),
        location=location,
        device=DeviceInfo(
            verification_mode=r.get("verification_mode"),
            device_os=r.get("device_os"),
            device_type=r.get("device_type"),
            ip_address=r.get("ip_address"),
            device_key=r.get("device_key"),
            user_agent=r.get("user_agent"),
        ),
    )


class MySQLAttendanceLogRepository(AttendanceLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, event: RawAttendanceEvent) -> int:
        device = event.device or DeviceInfo()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(
                    organization_id, employee_id, punched_at, source, latitude, longitude,
                    verification_mode, device_os, device_type, ip_address, device_key, user_agent
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.organization_id,
                    event.employee_id,
                    event.punched_at,
                    event.source.value,
                    event.location.latitude if event.location else None,
                    event.location.longitude if event.location else None,
                    device.verification_mode,
                    device.device_os,
                    device.device_type,
                    device.ip_address,
                    device.device_key,
                    device.user_agent,
                ),
            )
            return int(cur.lastrowid)

    def list_between(
        self,
        organization_id: int,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[RawAttendanceEvent]:
        clauses = ["organization_id=%s", "punched_at >= %s", "punched_at < %s"]
        params: list[object] = [int(organization_id), start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, organization_id, employee_id, punched_at, source, latitude, longitude,
                       verification_mode, device_os, device_type, ip_address, device_key, user_agent
                FROM attendance_logs
                WHERE {where}
                ORDER BY punched_at ASC, log_id ASC
                """,
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]
