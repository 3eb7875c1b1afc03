from __future__ import annotations

from typing import Protocol, Sequence

from .model import GeoFence


class GeoFenceRepository(Protocol):
    def list_active_for_organization(self, organization_id: int) -> Sequence[GeoFence]:
        raise NotImplementedError

    def list_active_for_employee(self, organization_id: int, employee_id: int) -> Sequence[GeoFence]:
        """Active fences reached through the employee's active assignments, primary first."""

        raise NotImplementedError
