from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import PayrollRecord, SalaryStructure


class SalaryStructureRepository(Protocol):
    def get_active(self, employee_id: int) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def list_active_for_organization(self, organization_id: int) -> Sequence[SalaryStructure]:
        raise NotImplementedError

    def supersede(self, structure: SalaryStructure) -> SalaryStructure:
        """Deactivate the employee's active structure and insert ``structure``, atomically."""

        raise NotImplementedError


class PayrollRepository(Protocol):
    def statuses_for_period(self, organization_id: int, month: int, year: int) -> dict[int, PaymentStatus]:
        """employee_id -> payment status of the existing record for the period."""

        raise NotImplementedError

    def save_period(self, records: Sequence[PayrollRecord], *, replace_existing: bool = False) -> list[int]:
        """Persist all records in one transaction; returns ids in input order.

        With ``replace_existing`` the unpaid rows for the same keys are removed
        first, inside the same transaction.
        """

        raise NotImplementedError

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def update(self, record: PayrollRecord) -> PayrollRecord:
        raise NotImplementedError

    def list_for_period(self, organization_id: int, month: int, year: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_for_year(
        self, organization_id: int, year: int, *, employee_id: Optional[int] = None
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError
