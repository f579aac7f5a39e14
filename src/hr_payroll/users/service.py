from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    employee_id: int
    employee_code: str
    full_name: str
    role: Role


@dataclass(frozen=True)
class UserRow:
    user_id: int
    employee_id: Optional[int]
    email: str
    full_name: str
    role: Optional[Role]
    is_active: bool


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        employee = self._employees.get_by_user_id(user.user_id)
        if not employee:
            raise AuthenticationError("No employee record is linked to this account")

        return SessionUser(
            user_id=user.user_id,
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            role=employee.role,
        )


class UserService:
    """Use case: manage user accounts (admin)."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    def list_users(self) -> list[UserRow]:
        rows = []
        for user in self._users.list_users():
            employee = self._employees.get_by_user_id(user.user_id)
            rows.append(
                UserRow(
                    user_id=user.user_id,
                    employee_id=employee.employee_id if employee else None,
                    email=user.email,
                    full_name=user.full_name,
                    role=employee.role if employee else None,
                    is_active=user.is_active,
                )
            )
        return rows

    def change_role(self, *, current_role: Role, current_user_id: int, user_id: int, role: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change roles")
        try:
            new_role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot change your own role")

        employee = self._employees.get_by_user_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        self._employees.set_role(employee.employee_id, new_role)
        logger.info("Role of user %s changed to %s", user_id, new_role.value)
