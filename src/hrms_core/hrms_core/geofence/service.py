from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_coordinates
from .model import GeoFence, GeoPoint, LocationValidation
from .repository import GeoFenceRepository
from .validator import validate

logger = logging.getLogger(__name__)


class GeoFenceService:
    """Use case: validate a check-in location for an organization/employee.

    Employee-specific assignments take total precedence; organization-wide
    fences are only used when the employee has no active assignment.
    """

    def __init__(self, fences: GeoFenceRepository, *, fail_open: bool = True):
        self._fences = fences
        self._fail_open = bool(fail_open)

    @property
    def fail_open(self) -> bool:
        return self._fail_open

    def candidate_fences(self, organization_id: int, employee_id: Optional[int] = None) -> Sequence[GeoFence]:
        if employee_id is not None:
            assigned = self._fences.list_active_for_employee(int(organization_id), int(employee_id))
            if assigned:
                return assigned
        return self._fences.list_active_for_organization(int(organization_id))

    def validate_location(
        self,
        organization_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        employee_id: Optional[int] = None,
    ) -> LocationValidation:
        lat, lon = require_coordinates(latitude, longitude)
        fences = self.candidate_fences(organization_id, employee_id)

        if not fences:
            logger.warning(
                "No geo-fences configured for organization %s (fail_open=%s)", organization_id, self._fail_open
            )
        return validate(GeoPoint(latitude=lat, longitude=lon), fences, fail_open=self._fail_open)
