"""Pure geo-fence checks (no I/O)."""

from __future__ import annotations

import math
from typing import Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeoFence, GeoPoint, LocationValidation


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def validate(point: GeoPoint, fences: Sequence[GeoFence], *, fail_open: bool = True) -> LocationValidation:
    """Check ``point`` against ``fences``; any fence containing it makes it valid.

    With no fences the result follows ``fail_open``.
    """
    if not fences:
        if fail_open:
            return LocationValidation(is_valid=True, message="No geo-fences configured. Check-in allowed.")
        return LocationValidation(is_valid=False, message="No geo-fences configured. Check-in denied.")

    nearest: GeoFence | None = None
    nearest_distance = math.inf
    for fence in fences:
        distance = haversine_distance(fence.center, point)
        if distance <= fence.radius_meters:
            return LocationValidation(
                is_valid=True,
                distance_meters=distance,
                matched_fence=fence,
                message=f"Location is within {fence.fence_name} ({round(distance)}m away)",
            )
        if distance < nearest_distance:
            nearest, nearest_distance = fence, distance

    return LocationValidation(
        is_valid=False,
        distance_meters=nearest_distance,
        nearest_fence=nearest,
        message=f"Location is outside all geo-fences. Nearest fence is {nearest.fence_name} ({round(nearest_distance)}m away).",
    )
