from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import ComponentType, EmploymentStatus, Role
from .model import Employee, SalaryComponent, SalarySettings


class EmployeeRepository(Protocol):
    """Persistence for employees and their custom salary components."""

    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(self, *, status: Optional[EmploymentStatus] = None, organization_id: Optional[int] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def count_joined_in_year(self, year: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        organization_id: Optional[int],
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        phone: Optional[str],
        department: Optional[str],
        designation: Optional[str],
        role: Role,
        date_of_joining: date,
        salary: SalarySettings,
    ) -> int:
        raise NotImplementedError

    def update_salary(self, employee_id: int, salary: SalarySettings) -> bool:
        raise NotImplementedError

    def update_profile(self, employee_id: int, *, phone: Optional[str], department: Optional[str], designation: Optional[str]) -> bool:
        raise NotImplementedError

    def set_role(self, employee_id: int, role: Role) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, status: EmploymentStatus) -> bool:
        raise NotImplementedError

    def list_components(self, employee_id: int) -> Sequence[SalaryComponent]:
        raise NotImplementedError

    def add_component(self, *, employee_id: int, name: str, component_type: ComponentType, amount: Decimal) -> int:
        raise NotImplementedError

    def set_component_active(self, component_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
