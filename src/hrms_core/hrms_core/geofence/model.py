from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoFence:
    """Circular region (center + radius) where check-ins are accepted."""

    geo_fence_id: int
    organization_id: int
    fence_name: str
    center: GeoPoint
    radius_meters: float
    is_active: bool = True


@dataclass(frozen=True)
class EmployeeGeoFenceAssignment:
    employee_id: int
    geo_fence_id: int
    is_primary: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class LocationValidation:
    """Outcome of checking a point against a set of fences.

    ``distance_meters`` is the distance to the matched fence when valid, to the
    nearest fence when invalid, and ``None`` when no fence was checked.
    """

    is_valid: bool
    distance_meters: Optional[float] = None
    matched_fence: Optional[GeoFence] = None
    nearest_fence: Optional[GeoFence] = None
    message: str = ""

    @property
    def matched_fence_id(self) -> Optional[int]:
        return self.matched_fence.geo_fence_id if self.matched_fence else None

    @property
    def nearest_fence_id(self) -> Optional[int]:
        return self.nearest_fence.geo_fence_id if self.nearest_fence else None
