from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only view over employee records (owned by the application layer)."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int, *, active_only: bool = True) -> Sequence[Employee]:
        raise NotImplementedError
