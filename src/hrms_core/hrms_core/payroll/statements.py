"""Derived payroll statements: provident fund, income tax, period summary."""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Iterable, Sequence

from ..common.money import quantize_money
from .model import PayrollRecord, PayrollSummary, PFStatementRow, TaxStatementRow


def progressive_tax(taxable: Decimal, slabs: Sequence[tuple[Decimal, Decimal]]) -> Decimal:
    """Each slab's rate applies to the part of income between its threshold and the next one."""
    tax = Decimal("0")
    ordered = sorted(slabs)
    for index, (threshold, rate) in enumerate(ordered):
        if taxable <= threshold:
            break
        upper = ordered[index + 1][0] if index + 1 < len(ordered) else taxable
        tax += (min(taxable, upper) - threshold) * rate
    return quantize_money(tax)


def pf_statement(records: Iterable[PayrollRecord], pf_rate: Decimal) -> list[PFStatementRow]:
    rows = []
    for p in records:
        contribution = quantize_money(p.basic_salary * pf_rate)
        rows.append(
            PFStatementRow(
                employee_id=p.employee_id,
                month=p.month,
                year=p.year,
                basic_salary=p.basic_salary,
                employee_contribution=contribution,
                employer_contribution=contribution,
            )
        )
    return rows


def tax_statement(records: Iterable[PayrollRecord], slabs: Sequence[tuple[Decimal, Decimal]]) -> list[TaxStatementRow]:
    rows = []
    for p in records:
        deductions = p.total_deductions
        taxable = p.gross_salary - deductions
        rows.append(
            TaxStatementRow(
                employee_id=p.employee_id,
                month=p.month,
                year=p.year,
                gross_salary=p.gross_salary,
                deductions=deductions,
                taxable_income=taxable,
                tax=progressive_tax(taxable, slabs),
                net_salary=p.net_salary,
            )
        )
    return rows


def summarize_period(month: int, year: int, records: Sequence[PayrollRecord]) -> PayrollSummary:
    zero = Decimal("0")
    return PayrollSummary(
        month=int(month),
        year=int(year),
        employee_count=len(records),
        total_gross=sum((p.gross_salary for p in records), zero),
        total_deductions=sum((p.total_deductions for p in records), zero),
        total_net=sum((p.net_salary for p in records), zero),
        by_status=dict(Counter(p.payment_status.value for p in records)),
    )
