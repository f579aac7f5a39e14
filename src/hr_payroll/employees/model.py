from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.constants import (
    DEFAULT_BONUS_PERCENTAGE,
    DEFAULT_HRA_PERCENTAGE,
    DEFAULT_LTA_PERCENTAGE,
    DEFAULT_PF_PERCENTAGE,
    DEFAULT_PROFESSIONAL_TAX,
    DEFAULT_STANDARD_ALLOWANCE,
)
from ..core.enums import ComponentType, EmploymentStatus, Role


@dataclass(frozen=True)
class SalarySettings:
    """Per-employee salary configuration. Percentages are of basic salary."""

    monthly_wage: Decimal = Decimal("0")
    hra_percentage: Decimal = DEFAULT_HRA_PERCENTAGE
    bonus_percentage: Decimal = DEFAULT_BONUS_PERCENTAGE
    lta_percentage: Decimal = DEFAULT_LTA_PERCENTAGE
    pf_percentage: Decimal = DEFAULT_PF_PERCENTAGE
    professional_tax: Decimal = DEFAULT_PROFESSIONAL_TAX
    standard_allowance: Decimal = DEFAULT_STANDARD_ALLOWANCE


@dataclass(frozen=True)
class SalaryComponent:
    component_id: int
    employee_id: int
    name: str
    component_type: ComponentType
    amount: Decimal
    is_active: bool = True


@dataclass(frozen=True)
class Employee:
    employee_id: int
    user_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    role: Role
    employment_status: EmploymentStatus
    date_of_joining: date
    organization_id: Optional[int] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    salary: SalarySettings = field(default_factory=SalarySettings)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.employment_status == EmploymentStatus.ACTIVE


@dataclass(frozen=True)
class NewEmployee:
    first_name: str
    last_name: str
    email: str
    company_name: str
    date_of_joining: date
    monthly_wage: Decimal
    role: Role = Role.EMPLOYEE
    phone: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    organization_id: Optional[int] = None
    professional_tax: Optional[Decimal] = None
    pf_percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class CreatedEmployee:
    """Outcome of onboarding; the welcome email is best-effort."""

    employee: Employee
    temporary_password: str
    email_delivered: bool
