from decimal import Decimal

import pytest

from src.hrms_core.hrms_core.core.constants import DEFAULT_TAX_SLABS
from src.hrms_core.hrms_core.core.enums import PaymentStatus
from src.hrms_core.hrms_core.payroll.model import PayrollRecord
from src.hrms_core.hrms_core.payroll.statements import pf_statement, progressive_tax, summarize_period, tax_statement


def _payroll(employee_id, basic, gross, net, deductions=None, late=Decimal("0"), status=PaymentStatus.PENDING):
    return PayrollRecord(
        organization_id=1,
        employee_id=employee_id,
        salary_structure_id=1,
        month=3,
        year=2026,
        working_days=22,
        present_days=Decimal("22"),
        leave_days=Decimal("0"),
        overtime_hours=Decimal("0"),
        late_penalties=late,
        basic_salary=Decimal(basic),
        allowances={},
        deductions=deductions or {},
        gross_salary=Decimal(gross),
        net_salary=Decimal(net),
        payment_status=status,
    )


@pytest.mark.parametrize(
    "taxable, expected",
    [
        ("200000", "0.00"),
        ("250000", "0.00"),
        ("300000", "2500.00"),
        ("600000", "32500.00"),
    ],
)
def test_progressive_tax(taxable, expected):
    assert progressive_tax(Decimal(taxable), DEFAULT_TAX_SLABS) == Decimal(expected)


def test_pf_statement_uses_prorated_basic():
    rows = pf_statement([_payroll(1, "20000", "21875", "21875")], Decimal("0.12"))

    assert rows[0].employee_contribution == Decimal("2400.00")
    assert rows[0].employer_contribution == Decimal("2400.00")
    assert rows[0].total_contribution == Decimal("4800.00")


def test_tax_statement_subtracts_all_deductions():
    record = _payroll(1, "300000", "610000", "590000", deductions={"PF": Decimal("9900")}, late=Decimal("100"))

    row = tax_statement([record], DEFAULT_TAX_SLABS)[0]

    assert row.deductions == Decimal("10000")
    assert row.taxable_income == Decimal("600000")
    assert row.tax == Decimal("32500.00")


def test_summarize_period_totals():
    records = [
        _payroll(1, "1000", "1200", "1100", deductions={"PF": Decimal("100")}),
        _payroll(2, "2000", "2500", "2500", status=PaymentStatus.PAID),
    ]

    summary = summarize_period(3, 2026, records)

    assert summary.employee_count == 2
    assert summary.total_gross == Decimal("3700")
    assert summary.total_net == Decimal("3600")
    assert summary.total_deductions == Decimal("100")
    assert summary.by_status == {"pending": 1, "paid": 1}
