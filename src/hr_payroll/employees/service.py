from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import Clock, now_local
from ..common.validators import require_date, require_decimal, require_non_empty
from ..core.constants import DEFAULT_PF_PERCENTAGE, DEFAULT_PROFESSIONAL_TAX, DEFAULT_STANDARD_ALLOWANCE
from ..core.enums import ComponentType, EmploymentStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..leaves.service import LeaveBalanceService
from ..notifications.service import NotificationService
from ..organizations.service import OrganizationService
from ..users.repository import UserRepository
from .codes import generate_employee_code, generate_temporary_password
from .model import CreatedEmployee, Employee, NewEmployee, SalaryComponent, SalarySettings
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def parse_role(value) -> Role:
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid role")


def parse_employment_status(value) -> EmploymentStatus:
    try:
        return EmploymentStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid employment status")


def parse_component_type(value) -> ComponentType:
    try:
        return ComponentType(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid component type")


def _percentage(value, field_name: str) -> Decimal:
    pct = require_decimal(value, field_name)
    if pct > _HUNDRED:
        raise ValidationError(f"{field_name} must be between 0 and 100")
    return pct


class EmployeeService:
    """Onboarding and HR maintenance of employee records."""

    def __init__(
        self,
        employees: EmployeeRepository,
        users: UserRepository,
        organizations: OrganizationService,
        balances: LeaveBalanceService,
        notifications: NotificationService,
        *,
        standard_allowance: Decimal = DEFAULT_STANDARD_ALLOWANCE,
        clock: Clock = now_local,
    ):
        self._employees = employees
        self._users = users
        self._organizations = organizations
        self._balances = balances
        self._notifications = notifications
        self._standard_allowance = Decimal(standard_allowance)
        self._clock = clock

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(
        self, *, status: Optional[EmploymentStatus] = None, organization_id: Optional[int] = None
    ) -> Sequence[Employee]:
        return self._employees.list_employees(status=status, organization_id=organization_id)

    def create_employee(self, data: NewEmployee) -> CreatedEmployee:
        first_name = require_non_empty(data.first_name, "First name")
        last_name = require_non_empty(data.last_name, "Last name")
        email = require_non_empty(data.email, "Email").lower()
        company_name = require_non_empty(data.company_name, "Company name")
        joined = require_date(data.date_of_joining, "Date of joining")
        wage = require_decimal(data.monthly_wage, "Monthly wage")

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        salary = SalarySettings(
            monthly_wage=wage,
            pf_percentage=_percentage(
                data.pf_percentage if data.pf_percentage is not None else DEFAULT_PF_PERCENTAGE, "PF percentage"
            ),
            professional_tax=require_decimal(
                data.professional_tax if data.professional_tax is not None else DEFAULT_PROFESSIONAL_TAX,
                "Professional tax",
            ),
            standard_allowance=self._standard_allowance,
        )

        temporary_password = generate_temporary_password()

        # user, employee and balances land together or not at all
        with self._employees.atomic():
            serial = self._employees.count_joined_in_year(joined.year) + 1
            employee_code = generate_employee_code(first_name, last_name, company_name, joined, serial)

            organization_id = data.organization_id
            if organization_id is None:
                organization_id = self._organizations.find_or_create(company_name).organization_id

            user_id = self._users.create_user(
                email=email,
                full_name=f"{first_name} {last_name}",
                password_hash=generate_password_hash(temporary_password),
            )
            employee_id = self._employees.create(
                user_id=user_id,
                organization_id=organization_id,
                employee_code=employee_code,
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=data.phone,
                department=data.department,
                designation=data.designation,
                role=data.role,
                date_of_joining=joined,
                salary=salary,
            )
            self._balances.initialize_defaults(employee_id, self._clock().year)
        logger.info("Employee %s created with code %s", employee_id, employee_code)

        delivery = self._notifications.send_welcome_email(
            recipient=email,
            employee_name=f"{first_name} {last_name}",
            employee_code=employee_code,
            temporary_password=temporary_password,
            company_name=company_name,
        )
        if not delivery.delivered:
            logger.warning("Welcome email for employee %s was not delivered", employee_id)

        return CreatedEmployee(
            employee=self.get_employee(employee_id),
            temporary_password=temporary_password,
            email_delivered=delivery.delivered,
        )

    def update_salary_settings(self, employee_id: int, **changes) -> Employee:
        """Apply a partial update to the salary settings. Unknown keys are rejected."""

        employee = self.get_employee(employee_id)
        allowed = set(SalarySettings.__dataclass_fields__)
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown salary fields: {', '.join(sorted(unknown))}")

        cleaned = {}
        for key, value in changes.items():
            if value is None:
                continue
            if key.endswith("_percentage"):
                cleaned[key] = _percentage(value, key)
            else:
                cleaned[key] = require_decimal(value, key)

        salary = replace(employee.salary, **cleaned)
        self._employees.update_salary(employee.employee_id, salary)
        logger.info("Salary settings updated for employee %s", employee.employee_id)
        return self.get_employee(employee.employee_id)

    def update_profile(
        self,
        employee_id: int,
        *,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Employee:
        employee = self.get_employee(employee_id)
        self._employees.update_profile(
            employee.employee_id,
            phone=phone if phone is not None else employee.phone,
            department=department if department is not None else employee.department,
            designation=designation if designation is not None else employee.designation,
        )
        return self.get_employee(employee.employee_id)

    def set_employment_status(self, employee_id: int, status) -> Employee:
        employee = self.get_employee(employee_id)
        new_status = status if isinstance(status, EmploymentStatus) else parse_employment_status(status)
        self._employees.set_status(employee.employee_id, new_status)
        self._users.set_active(employee.user_id, is_active=new_status == EmploymentStatus.ACTIVE)
        logger.info("Employee %s status changed to %s", employee.employee_id, new_status.value)
        return self.get_employee(employee.employee_id)

    def list_components(self, employee_id: int) -> Sequence[SalaryComponent]:
        employee = self.get_employee(employee_id)
        return self._employees.list_components(employee.employee_id)

    def add_salary_component(self, employee_id: int, *, name: str, component_type, amount) -> SalaryComponent:
        employee = self.get_employee(employee_id)
        kind = component_type if isinstance(component_type, ComponentType) else parse_component_type(component_type)
        component_id = self._employees.add_component(
            employee_id=employee.employee_id,
            name=require_non_empty(name, "Component name"),
            component_type=kind,
            amount=require_decimal(amount, "Amount"),
        )
        for c in self._employees.list_components(employee.employee_id):
            if c.component_id == component_id:
                return c
        raise NotFoundError("Salary component not found")

    def deactivate_salary_component(self, employee_id: int, component_id: int) -> None:
        employee = self.get_employee(employee_id)
        owned = {c.component_id for c in self._employees.list_components(employee.employee_id)}
        if int(component_id) not in owned:
            raise NotFoundError("Salary component not found")
        self._employees.set_component_active(int(component_id), is_active=False)
