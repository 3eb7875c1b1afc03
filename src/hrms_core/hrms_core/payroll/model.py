from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.batch import ItemError
from ..common.money import AmountMap, sum_amounts
from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class SalaryStructure:
    organization_id: int
    employee_id: int
    basic_salary: Decimal
    allowances: AmountMap = field(default_factory=dict)
    deductions: AmountMap = field(default_factory=dict)
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None
    is_active: bool = True
    salary_structure_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """One employee-month of attendance, reduced to what payroll needs."""

    employee_id: int
    present_days: int = 0
    late_count: int = 0
    leave_days: int = 0
    overtime_minutes: int = 0

    @property
    def overtime_hours(self) -> Decimal:
        return Decimal(self.overtime_minutes) / Decimal(60)


@dataclass(frozen=True)
class PayrollRecord:
    """One row per (employee_id, month, year)."""

    organization_id: int
    employee_id: int
    salary_structure_id: Optional[int]
    month: int
    year: int
    working_days: int
    present_days: Decimal
    leave_days: Decimal
    overtime_hours: Decimal
    late_penalties: Decimal
    basic_salary: Decimal
    allowances: AmountMap
    deductions: AmountMap
    gross_salary: Decimal
    net_salary: Decimal
    bonuses: AmountMap = field(default_factory=dict)
    adjustments: AmountMap = field(default_factory=dict)
    unpaid_leave_days: Decimal = Decimal("0")
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    transaction_reference: Optional[str] = None
    payroll_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, int, int]:
        return self.employee_id, self.month, self.year

    @property
    def total_allowances(self) -> Decimal:
        return sum_amounts(self.allowances)

    @property
    def total_deductions(self) -> Decimal:
        return sum_amounts(self.deductions) + self.late_penalties


@dataclass(frozen=True)
class PayrollRunResult:
    processed_count: int
    payroll_ids: list[int]
    errors: list[ItemError]
    skipped: list[ItemError] = field(default_factory=list)
    cancelled: bool = False
    not_started: int = 0


@dataclass(frozen=True)
class PFStatementRow:
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    employee_contribution: Decimal
    employer_contribution: Decimal

    @property
    def total_contribution(self) -> Decimal:
        return self.employee_contribution + self.employer_contribution


@dataclass(frozen=True)
class TaxStatementRow:
    employee_id: int
    month: int
    year: int
    gross_salary: Decimal
    deductions: Decimal
    taxable_income: Decimal
    tax: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollSummary:
    month: int
    year: int
    employee_count: int
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    by_status: dict[str, int] = field(default_factory=dict)
