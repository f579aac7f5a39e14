from decimal import Decimal

from hr_payroll.attendance.model import PayrollAttendance
from hr_payroll.core.enums import ComponentType
from hr_payroll.employees.model import SalaryComponent, SalarySettings
from hr_payroll.payroll.calculator.standard_calculator import StandardSalaryCalculator, lop_deduction


def _attendance(total=22, absent="0", unpaid="0"):
    return PayrollAttendance(
        total_working_days=total,
        present_days=Decimal(total) - Decimal(absent) - Decimal(unpaid),
        paid_leave_days=Decimal("0"),
        unpaid_leave_days=Decimal(unpaid),
        absent_days=Decimal(absent),
        working_hours=0.0,
        overtime_hours=0.0,
    )


def test_breakdown_sums_back_to_wage():
    b = StandardSalaryCalculator().breakdown(SalarySettings(monthly_wage=Decimal("100000")))

    assert b.basic_salary == Decimal("50000.00")
    assert b.hra == Decimal("25000.00")
    assert b.standard_allowance == Decimal("4167.00")
    assert b.performance_bonus == Decimal("4165.00")
    assert b.leave_travel_allowance == Decimal("4166.50")
    assert b.fixed_allowance == Decimal("12501.50")
    assert b.total == Decimal("100000.00")
    assert not b.exceeds_wage


def test_breakdown_flags_components_over_wage():
    salary = SalarySettings(monthly_wage=Decimal("10000"), hra_percentage=Decimal("100"))
    b = StandardSalaryCalculator().breakdown(salary)

    # 5000 + 5000 + 4167 + 416.50 + 416.65 overshoots by 5000.15
    assert b.fixed_allowance == Decimal("0")
    assert b.exceeds_wage
    assert b.overflow == Decimal("5000.15")


def test_lop_deduction():
    assert lop_deduction(Decimal("100000"), 22, Decimal("2"), Decimal("1")) == Decimal("13636.36")
    assert lop_deduction(Decimal("100000"), 0, Decimal("2"), Decimal("1")) == Decimal("0")
    assert lop_deduction(Decimal("100000"), 22, Decimal("0.5"), Decimal("0")) == Decimal("2272.73")


def test_compute_net_salary_with_components_and_lop():
    components = [
        SalaryComponent(1, 1, "Night shift", ComponentType.EARNING, Decimal("10000")),
        SalaryComponent(2, 1, "Canteen", ComponentType.DEDUCTION, Decimal("500")),
        SalaryComponent(3, 1, "Old bonus", ComponentType.EARNING, Decimal("999"), is_active=False),
    ]
    figures = StandardSalaryCalculator().compute(
        SalarySettings(monthly_wage=Decimal("100000")),
        components,
        _attendance(total=22, absent="1", unpaid="1"),
    )

    assert figures.other_earnings == Decimal("10000.00")
    assert figures.gross_salary == Decimal("110000.00")
    assert figures.pf_deduction == Decimal("6000.00")
    assert figures.professional_tax == Decimal("200.00")
    assert figures.lop_deduction == Decimal("10000.00")
    assert figures.other_deductions == Decimal("500.00")
    assert figures.total_deductions == Decimal("16700.00")
    assert figures.net_salary == Decimal("93300.00")
