from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import GeoFence, GeoPoint
from .repository import GeoFenceRepository


def _to_fence(r: dict) -> GeoFence:
    return GeoFence(
        geo_fence_id=int(r["geo_fence_id"]),
        organization_id=int(r["organization_id"]),
        fence_name=r["fence_name"],
        center=GeoPoint(latitude=float(r["center_latitude"]), longitude=float(r["center_longitude"])),
        radius_meters=float(r["radius_meters"]),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLGeoFenceRepository(GeoFenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_for_organization(self, organization_id: int) -> Sequence[GeoFence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT geo_fence_id, organization_id, fence_name, center_latitude, center_longitude,
                       radius_meters, is_active
                FROM geo_fences
                WHERE organization_id=%s AND is_active=1
                ORDER BY geo_fence_id
                """,
                (int(organization_id),),
            )
            return [_to_fence(r) for r in fetchall(cur)]

    def list_active_for_employee(self, organization_id: int, employee_id: int) -> Sequence[GeoFence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.geo_fence_id, g.organization_id, g.fence_name, g.center_latitude,
                       g.center_longitude, g.radius_meters, g.is_active
                FROM employee_geo_fences egf
                JOIN geo_fences g ON g.geo_fence_id = egf.geo_fence_id
                WHERE egf.organization_id=%s AND egf.employee_id=%s
                  AND egf.is_active=1 AND g.is_active=1
                ORDER BY egf.is_primary DESC, g.geo_fence_id
                """,
                (int(organization_id), int(employee_id)),
            )
            return [_to_fence(r) for r in fetchall(cur)]
