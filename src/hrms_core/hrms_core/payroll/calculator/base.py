from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...leave.model import YearlyLeaveTotals
from ..model import AttendanceSummary, PayrollRecord, SalaryStructure


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def summarize(self, employee_id: int, records: Iterable[AttendanceRecord]) -> AttendanceSummary:
        raise NotImplementedError

    @abstractmethod
    def calculate(
        self,
        *,
        structure: SalaryStructure,
        summary: AttendanceSummary,
        working_days: int,
        month: int,
        year: int,
        overtime_multiplier: Optional[Decimal] = None,
        leave: Optional[YearlyLeaveTotals] = None,
    ) -> PayrollRecord:
        raise NotImplementedError

    @abstractmethod
    def recompute(self, record: PayrollRecord) -> PayrollRecord:
        """Gross and net rebuilt from the record's components."""
        raise NotImplementedError
