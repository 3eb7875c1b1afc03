from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.batch import ItemError, run_bounded
from ..common.datetime_utils import month_bounds, now_local
from ..common.money import merge_amounts, to_amount_map, to_decimal
from ..common.validators import require_month, require_non_empty, require_year
from ..core.constants import DEFAULT_BATCH_MAX_WORKERS
from ..core.enums import ErrorKind, PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.repository import HolidayRepository
from ..leave.service import LeaveBalanceLedger
from ..shifts.repository import ShiftRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord, PayrollRunResult, PayrollSummary, PFStatementRow, SalaryStructure, TaxStatementRow
from .policy import PayrollPolicy
from .repository import PayrollRepository, SalaryStructureRepository
from .statements import pf_statement, summarize_period, tax_statement
from .working_days import count_working_days

logger = logging.getLogger(__name__)


class PayrollService:
    """Monthly payroll per organization.

    Processing is insert-or-skip: a period that already has a payroll record is
    reported as skipped unless ``force_reprocess`` is requested, and a paid
    record is never replaced.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        salaries: SalaryStructureRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        shifts: ShiftRepository,
        holidays: HolidayRepository,
        leave: LeaveBalanceLedger,
        *,
        policy: PayrollPolicy | None = None,
        calculator: PayrollCalculator | None = None,
        max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
    ):
        self._payrolls = payrolls
        self._salaries = salaries
        self._attendance = attendance
        self._employees = employees
        self._shifts = shifts
        self._holidays = holidays
        self._leave = leave
        self._policy = policy or PayrollPolicy()
        self._calculator = calculator or StandardPayrollCalculator(self._policy)
        self._max_workers = int(max_workers)

    def process_payroll(
        self,
        organization_id: int,
        month: int,
        year: int,
        *,
        force_reprocess: bool = False,
        cancel_event: threading.Event | None = None,
    ) -> PayrollRunResult:
        month = require_month(month)
        year = require_year(year)
        organization_id = int(organization_id)

        employees = self._employees.list_for_organization(organization_id, active_only=True)
        structures = {s.employee_id: s for s in self._salaries.list_active_for_organization(organization_id)}
        eligible = [e for e in employees if e.employee_id in structures]
        if not eligible:
            raise NotFoundError(
                f"No active employees with a salary structure in organization {organization_id}"
            )

        existing = self._payrolls.statuses_for_period(organization_id, month, year)
        skipped: list[ItemError] = []
        pending: list[Employee] = []
        for employee in eligible:
            status = existing.get(employee.employee_id)
            if status is None:
                pending.append(employee)
            elif status == PaymentStatus.PAID:
                skipped.append(
                    ItemError(employee.employee_id, ErrorKind.CONFLICT, f"Payroll for {month}/{year} is already paid")
                )
            elif force_reprocess:
                pending.append(employee)
            else:
                skipped.append(
                    ItemError(
                        employee.employee_id, ErrorKind.CONFLICT, f"Payroll already processed for {month}/{year}"
                    )
                )

        first, last = month_bounds(year, month)
        holiday_dates = [h.holiday_date for h in self._holidays.list_between(organization_id, start=first, end=last)]
        working_days = count_working_days(year, month, holiday_dates)

        records_by_employee: dict[int, list[AttendanceRecord]] = defaultdict(list)
        if pending:
            for record in self._attendance.list_between(
                organization_id, start=first, end=last, employee_ids=[e.employee_id for e in pending]
            ):
                records_by_employee[record.employee_id].append(record)

        leave_totals = self._leave.yearly_totals(organization_id, year)
        shifts_by_id = {s.shift_id: s for s in self._shifts.list_for_organization(organization_id)}

        logger.info(
            "Processing payroll for organization %s, %02d/%s: %d employees, %d skipped, %d working days",
            organization_id, month, year, len(pending), len(skipped), working_days,
        )

        def work(employee: Employee) -> PayrollRecord:
            shift = shifts_by_id.get(employee.current_shift_id) if employee.current_shift_id is not None else None
            multiplier = shift.overtime_rule.multiplier if shift and shift.overtime_rule else None
            summary = self._calculator.summarize(employee.employee_id, records_by_employee.get(employee.employee_id, []))
            return self._calculator.calculate(
                structure=structures[employee.employee_id],
                summary=summary,
                working_days=working_days,
                month=month,
                year=year,
                overtime_multiplier=multiplier,
                leave=leave_totals.get(employee.employee_id),
            )

        outcome = run_bounded(
            pending,
            work,
            key=lambda e: e.employee_id,
            max_workers=self._max_workers,
            cancel_event=cancel_event,
        )

        # All computed records commit together; a storage failure here propagates.
        payroll_ids = self._payrolls.save_period(outcome.results, replace_existing=force_reprocess)

        result = PayrollRunResult(
            processed_count=len(payroll_ids),
            payroll_ids=payroll_ids,
            errors=outcome.errors,
            skipped=skipped,
            cancelled=outcome.cancelled,
            not_started=outcome.not_started,
        )
        logger.info(
            "Payroll processed for organization %s, %02d/%s: %d saved, %d errors, %d skipped%s",
            organization_id, month, year, result.processed_count, len(result.errors), len(result.skipped),
            " (cancelled)" if result.cancelled else "",
        )
        return result

    def _get_unpaid(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get(int(payroll_id))
        if record is None:
            raise NotFoundError(f"Payroll {payroll_id} not found")
        if record.payment_status == PaymentStatus.PAID:
            raise ConflictError(f"Payroll {payroll_id} is already paid and cannot be modified")
        return record

    def update_payroll(
        self,
        payroll_id: int,
        *,
        bonuses: Optional[Mapping[str, Any]] = None,
        adjustments: Optional[Mapping[str, Any]] = None,
        deductions: Optional[Mapping[str, Any]] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> PayrollRecord:
        """Merge approval-time amounts into a payroll and rebuild gross/net from scratch."""
        record = self._get_unpaid(payroll_id)
        if payment_status == PaymentStatus.PAID:
            raise ValidationError("Use mark_paid to record a payment")

        record = replace(
            record,
            bonuses=merge_amounts(record.bonuses, bonuses) if bonuses is not None else record.bonuses,
            adjustments=merge_amounts(record.adjustments, adjustments) if adjustments is not None else record.adjustments,
            deductions=merge_amounts(record.deductions, deductions) if deductions is not None else record.deductions,
            payment_status=PaymentStatus(payment_status) if payment_status is not None else record.payment_status,
        )
        record = self._calculator.recompute(record)
        logger.info("Payroll %s updated: gross=%s net=%s", payroll_id, record.gross_salary, record.net_salary)
        return self._payrolls.update(record)

    def mark_paid(
        self,
        payroll_id: int,
        *,
        payment_method: str,
        payment_date: date | None = None,
        transaction_reference: Optional[str] = None,
    ) -> PayrollRecord:
        record = self._get_unpaid(payroll_id)
        record = replace(
            record,
            payment_status=PaymentStatus.PAID,
            payment_date=payment_date or now_local().date(),
            payment_method=require_non_empty(payment_method, "payment_method"),
            transaction_reference=transaction_reference,
        )
        logger.info("Payroll %s marked paid via %s", payroll_id, record.payment_method)
        return self._payrolls.update(record)

    def set_salary_structure(
        self,
        employee_id: int,
        *,
        basic_salary: Any,
        allowances: Optional[Mapping[str, Any]] = None,
        deductions: Optional[Mapping[str, Any]] = None,
        effective_from: date | None = None,
    ) -> SalaryStructure:
        """Replace the employee's active structure; the old one is deactivated, not deleted."""
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")

        basic = to_decimal(basic_salary, field_name="basic_salary")
        if basic < 0:
            raise ValidationError("basic_salary must not be negative")

        structure = SalaryStructure(
            organization_id=employee.organization_id,
            employee_id=employee.employee_id,
            basic_salary=basic,
            allowances=to_amount_map(allowances),
            deductions=to_amount_map(deductions),
            effective_from=effective_from or now_local().date(),
        )
        return self._salaries.supersede(structure)

    def pf_statement(self, organization_id: int, year: int, *, employee_id: Optional[int] = None) -> list[PFStatementRow]:
        records = self._payrolls.list_for_year(int(organization_id), require_year(year), employee_id=employee_id)
        return pf_statement(records, self._policy.pf_rate)

    def tax_statement(
        self, organization_id: int, year: int, *, employee_id: Optional[int] = None
    ) -> list[TaxStatementRow]:
        records = self._payrolls.list_for_year(int(organization_id), require_year(year), employee_id=employee_id)
        return tax_statement(records, self._policy.tax_slabs)

    def period_summary(self, organization_id: int, month: int, year: int) -> PayrollSummary:
        month = require_month(month)
        year = require_year(year)
        return summarize_period(month, year, self._payrolls.list_for_period(int(organization_id), month, year))

