from datetime import date
from decimal import Decimal

import pytest

from src.hrms_core.hrms_core.attendance.model import AttendanceRecord
from src.hrms_core.hrms_core.core.enums import AttendanceStatus
from src.hrms_core.hrms_core.core.exceptions import ComputationHazard
from src.hrms_core.hrms_core.leave.model import YearlyLeaveTotals
from src.hrms_core.hrms_core.payroll.calculator.standard_calculator import StandardPayrollCalculator, compute_totals
from src.hrms_core.hrms_core.payroll.model import AttendanceSummary, SalaryStructure
from src.hrms_core.hrms_core.payroll.policy import PayrollPolicy


def _structure(basic, allowances=None, deductions=None):
    return SalaryStructure(
        organization_id=1,
        employee_id=5,
        basic_salary=Decimal(basic),
        allowances=allowances or {},
        deductions=deductions or {},
        salary_structure_id=3,
    )


def _record(day, status, overtime=0):
    return AttendanceRecord(
        organization_id=1,
        employee_id=5,
        work_date=date(2026, 3, day),
        shift_id=1,
        check_in_time=None,
        check_out_time=None,
        status=status,
        overtime_minutes=overtime,
    )


def test_summarize_counts_present_late_leave_and_overtime():
    calc = StandardPayrollCalculator()
    records = [
        _record(2, AttendanceStatus.PRESENT, overtime=30),
        _record(3, AttendanceStatus.LATE, overtime=15),
        _record(4, AttendanceStatus.LEAVE),
        _record(5, AttendanceStatus.ABSENT),
        _record(6, AttendanceStatus.HALF_DAY),
    ]

    summary = calc.summarize(5, records)

    assert (summary.present_days, summary.late_count, summary.leave_days, summary.overtime_minutes) == (2, 1, 1, 45)
    assert summary.overtime_hours == Decimal("0.75")


def test_full_attendance_pays_full_basic():
    calc = StandardPayrollCalculator()

    record = calc.calculate(
        structure=_structure("30000"),
        summary=AttendanceSummary(employee_id=5, present_days=30),
        working_days=30,
        month=3,
        year=2026,
    )

    assert record.basic_salary == Decimal("30000")
    assert record.gross_salary == Decimal("30000")
    assert record.net_salary == Decimal("30000")
    assert "Overtime" not in record.allowances


def test_late_penalties_and_overtime_pay():
    calc = StandardPayrollCalculator(PayrollPolicy(late_penalty_amount=Decimal("100")))

    record = calc.calculate(
        structure=_structure("22000", allowances={"HRA": Decimal("2000")}, deductions={"PF": Decimal("1500")}),
        summary=AttendanceSummary(employee_id=5, present_days=22, late_count=2, overtime_minutes=120),
        working_days=22,
        month=3,
        year=2026,
    )

    # hourly = 22000 / (22 * 8) = 125; 2h * 125 * 1.5
    assert record.allowances["Overtime"] == Decimal("375.00")
    assert record.late_penalties == Decimal("200.00")
    assert record.gross_salary == Decimal("24375.00")
    assert record.total_deductions == Decimal("1700.00")
    assert record.net_salary == Decimal("22675.00")


def test_shift_multiplier_overrides_policy():
    calc = StandardPayrollCalculator()

    record = calc.calculate(
        structure=_structure("22000"),
        summary=AttendanceSummary(employee_id=5, present_days=22, overtime_minutes=60),
        working_days=22,
        month=3,
        year=2026,
        overtime_multiplier=Decimal("2"),
    )

    assert record.allowances["Overtime"] == Decimal("250.00")


def test_zero_working_days_is_a_computation_hazard():
    calc = StandardPayrollCalculator()

    with pytest.raises(ComputationHazard):
        calc.calculate(
            structure=_structure("10000"),
            summary=AttendanceSummary(employee_id=5),
            working_days=0,
            month=3,
            year=2026,
        )


def test_unpaid_leave_is_capped_by_leave_days():
    calc = StandardPayrollCalculator()
    leave = YearlyLeaveTotals(employee_id=5, year=2026, total=Decimal("10"), used=Decimal("14"))

    record = calc.calculate(
        structure=_structure("10000"),
        summary=AttendanceSummary(employee_id=5, present_days=19, leave_days=3),
        working_days=22,
        month=3,
        year=2026,
        leave=leave,
    )

    assert record.leave_days == Decimal("3")
    assert record.unpaid_leave_days == Decimal("3")


def test_compute_totals_is_order_independent_decimal():
    gross, net = compute_totals(
        basic=Decimal("0.10"),
        allowances={"a": Decimal("0.20"), "b": Decimal("0.70")},
        deductions={"x": Decimal("0.30")},
        bonuses={},
        adjustments={"fix": Decimal("-0.05")},
        late_penalties=Decimal("0"),
    )

    assert gross == Decimal("0.95")
    assert net == Decimal("0.65")
