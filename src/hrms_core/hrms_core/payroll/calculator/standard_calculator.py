from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ...attendance.model import AttendanceRecord
from ...common.money import quantize_money, sum_amounts
from ...core.constants import OVERTIME_ALLOWANCE_KEY
from ...core.enums import AttendanceStatus, PaymentStatus
from ...core.exceptions import ComputationHazard
from ...leave.model import YearlyLeaveTotals
from ..model import AttendanceSummary, PayrollRecord, SalaryStructure
from ..policy import PayrollPolicy
from .base import PayrollCalculator

_PRESENT = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


def compute_totals(
    *,
    basic: Decimal,
    allowances: Mapping[str, Decimal],
    deductions: Mapping[str, Decimal],
    bonuses: Mapping[str, Decimal],
    adjustments: Mapping[str, Decimal],
    late_penalties: Decimal,
) -> tuple[Decimal, Decimal]:
    """(gross, net). The only place gross and net are derived."""
    gross = basic + sum_amounts(allowances) + sum_amounts(bonuses) + sum_amounts(adjustments)
    net = gross - (sum_amounts(deductions) + late_penalties)
    return quantize_money(gross), quantize_money(net)


class StandardPayrollCalculator(PayrollCalculator):
    """Pro-rated basic, flat late penalty per late day, overtime paid on the hourly rate."""

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self.policy = policy or PayrollPolicy()

    def summarize(self, employee_id: int, records: Iterable[AttendanceRecord]) -> AttendanceSummary:
        present = late = leave = overtime = 0
        for r in records:
            if r.status in _PRESENT:
                present += 1
            if r.status == AttendanceStatus.LATE:
                late += 1
            if r.status == AttendanceStatus.LEAVE:
                leave += 1
            overtime += int(r.overtime_minutes or 0)
        return AttendanceSummary(
            employee_id=int(employee_id),
            present_days=present,
            late_count=late,
            leave_days=leave,
            overtime_minutes=overtime,
        )

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
        if working_days <= 0:
            raise ComputationHazard(f"No working days in {year}-{month:02d}; cannot pro-rate salary")

        basic = structure.basic_salary
        days = Decimal(working_days)
        prorated = quantize_money(basic * Decimal(summary.present_days) / days)

        multiplier = overtime_multiplier if overtime_multiplier is not None else self.policy.overtime_multiplier
        hourly_rate = basic / (days * Decimal(self.policy.standard_hours_per_day))
        overtime_hours = summary.overtime_hours
        overtime_pay = quantize_money(overtime_hours * hourly_rate * multiplier)

        allowances = dict(structure.allowances)
        if overtime_pay > 0:
            allowances[OVERTIME_ALLOWANCE_KEY] = overtime_pay
        deductions = dict(structure.deductions)
        late_penalties = quantize_money(self.policy.late_penalty_amount * summary.late_count)

        leave_days = Decimal(summary.leave_days)
        unpaid = min(leave_days, leave.overdrawn) if leave is not None else Decimal("0")

        gross, net = compute_totals(
            basic=prorated,
            allowances=allowances,
            deductions=deductions,
            bonuses={},
            adjustments={},
            late_penalties=late_penalties,
        )
        return PayrollRecord(
            organization_id=structure.organization_id,
            employee_id=structure.employee_id,
            salary_structure_id=structure.salary_structure_id,
            month=int(month),
            year=int(year),
            working_days=int(working_days),
            present_days=Decimal(summary.present_days),
            leave_days=leave_days,
            unpaid_leave_days=unpaid,
            overtime_hours=overtime_hours.quantize(Decimal("0.01")),
            late_penalties=late_penalties,
            basic_salary=prorated,
            allowances=allowances,
            deductions=deductions,
            gross_salary=gross,
            net_salary=net,
            payment_status=PaymentStatus.PENDING,
        )

    def recompute(self, record: PayrollRecord) -> PayrollRecord:
        gross, net = compute_totals(
            basic=record.basic_salary,
            allowances=record.allowances,
            deductions=record.deductions,
            bonuses=record.bonuses,
            adjustments=record.adjustments,
            late_penalties=record.late_penalties,
        )
        return replace(record, gross_salary=gross, net_salary=net)
