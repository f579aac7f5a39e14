from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...attendance.model import PayrollAttendance
from ...common.money import percent_of, round_money, to_decimal, total
from ...core.constants import BASIC_SALARY_RATIO
from ...core.enums import ComponentType
from ...employees.model import SalaryComponent, SalarySettings
from ..model import PayslipFigures, SalaryBreakdown
from .base import SalaryCalculator

_ZERO = Decimal("0")


def lop_deduction(gross_salary: Decimal, total_working_days: int, absent_days: Decimal, unpaid_leave_days: Decimal) -> Decimal:
    """Loss of pay: a day's share of gross for every absent or unpaid-leave day."""

    if not total_working_days:
        return _ZERO
    per_day = to_decimal(gross_salary) / Decimal(total_working_days)
    return round_money(per_day * (to_decimal(absent_days) + to_decimal(unpaid_leave_days)))


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: basic is half the wage, allowances are percentages of basic,
    and the fixed allowance takes up whatever is left of the wage.
    """

    def breakdown(self, salary: SalarySettings) -> SalaryBreakdown:
        wage = round_money(to_decimal(salary.monthly_wage))
        basic = round_money(wage * BASIC_SALARY_RATIO)
        hra = round_money(percent_of(basic, salary.hra_percentage))
        standard = round_money(to_decimal(salary.standard_allowance))
        bonus = round_money(percent_of(basic, salary.bonus_percentage))
        lta = round_money(percent_of(basic, salary.lta_percentage))

        residual = wage - (basic + hra + standard + bonus + lta)
        return SalaryBreakdown(
            monthly_wage=wage,
            basic_salary=basic,
            hra=hra,
            standard_allowance=standard,
            performance_bonus=bonus,
            leave_travel_allowance=lta,
            fixed_allowance=max(_ZERO, residual),
            exceeds_wage=residual < 0,
            overflow=-residual if residual < 0 else _ZERO,
        )

    def compute(
        self,
        salary: SalarySettings,
        components: Sequence[SalaryComponent],
        attendance: PayrollAttendance,
    ) -> PayslipFigures:
        breakdown = self.breakdown(salary)
        active = [c for c in components if c.is_active]

        other_earnings = round_money(total(c.amount for c in active if c.component_type == ComponentType.EARNING))
        other_deductions = round_money(total(c.amount for c in active if c.component_type == ComponentType.DEDUCTION))
        gross = breakdown.monthly_wage + other_earnings

        pf = round_money(percent_of(breakdown.basic_salary, salary.pf_percentage))
        professional_tax = round_money(to_decimal(salary.professional_tax))
        lop = lop_deduction(gross, attendance.total_working_days, attendance.absent_days, attendance.unpaid_leave_days)

        deductions = other_deductions + pf + professional_tax + lop
        return PayslipFigures(
            breakdown=breakdown,
            other_earnings=other_earnings,
            gross_salary=gross,
            pf_deduction=pf,
            professional_tax=professional_tax,
            lop_deduction=lop,
            other_deductions=other_deductions,
            total_deductions=deductions,
            net_salary=gross - deductions,
        )
