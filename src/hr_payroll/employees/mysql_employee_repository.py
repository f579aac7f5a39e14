from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..common.money import to_decimal
from ..core.enums import ComponentType, EmploymentStatus, Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import atomic, db_cursor, fetchall, fetchone
from .model import Employee, SalaryComponent, SalarySettings
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, user_id, organization_id, employee_code, first_name, last_name, email, phone,
    department, designation, role, employment_status, date_of_joining,
    monthly_wage, hra_percentage, bonus_percentage, lta_percentage, pf_percentage,
    professional_tax, standard_allowance
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]),
        organization_id=int(r["organization_id"]) if r.get("organization_id") is not None else None,
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r.get("phone"),
        department=r.get("department"),
        designation=r.get("designation"),
        role=Role(r["role"]),
        employment_status=EmploymentStatus(r["employment_status"]),
        date_of_joining=r["date_of_joining"],
        salary=SalarySettings(
            monthly_wage=to_decimal(r["monthly_wage"]),
            hra_percentage=to_decimal(r["hra_percentage"]),
            bonus_percentage=to_decimal(r["bonus_percentage"]),
            lta_percentage=to_decimal(r["lta_percentage"]),
            pf_percentage=to_decimal(r["pf_percentage"]),
            professional_tax=to_decimal(r["professional_tax"]),
            standard_allowance=to_decimal(r["standard_allowance"]),
        ),
    )


def _to_component(r: dict) -> SalaryComponent:
    return SalaryComponent(
        component_id=int(r["component_id"]),
        employee_id=int(r["employee_id"]),
        name=r["name"],
        component_type=ComponentType(r["component_type"]),
        amount=to_decimal(r["amount"]),
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def atomic(self):
        return atomic(self._conn_factory)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_employees(self, *, status: Optional[EmploymentStatus] = None, organization_id: Optional[int] = None) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees WHERE 1=1"
        params: list = []
        if status:
            sql += " AND employment_status=%s"
            params.append(status.value)
        if organization_id:
            sql += " AND organization_id=%s"
            params.append(int(organization_id))
        sql += " ORDER BY employee_code ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def count_joined_in_year(self, year: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE YEAR(date_of_joining)=%s", (int(year),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        user_id, organization_id, employee_code, first_name, last_name, email, phone,
                        department, designation, role, employment_status, date_of_joining,
                        monthly_wage, hra_percentage, bonus_percentage, lta_percentage, pf_percentage,
                        professional_tax, standard_allowance
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        organization_id,
                        employee_code,
                        first_name,
                        last_name,
                        email,
                        phone,
                        department,
                        designation,
                        role.value,
                        EmploymentStatus.ACTIVE.value,
                        date_of_joining,
                        salary.monthly_wage,
                        salary.hra_percentage,
                        salary.bonus_percentage,
                        salary.lta_percentage,
                        salary.pf_percentage,
                        salary.professional_tax,
                        salary.standard_allowance,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            # uq employee_code / email: a concurrent onboarding took it first
            raise ConflictError("Employee code or email is already in use") from exc

    def update_salary(self, employee_id: int, salary: SalarySettings) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET monthly_wage=%s, hra_percentage=%s, bonus_percentage=%s, lta_percentage=%s,
                    pf_percentage=%s, professional_tax=%s, standard_allowance=%s
                WHERE employee_id=%s
                """,
                (
                    salary.monthly_wage,
                    salary.hra_percentage,
                    salary.bonus_percentage,
                    salary.lta_percentage,
                    salary.pf_percentage,
                    salary.professional_tax,
                    salary.standard_allowance,
                    int(employee_id),
                ),
            )
            return cur.rowcount > 0

    def update_profile(self, employee_id: int, *, phone: Optional[str], department: Optional[str], designation: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET phone=%s, department=%s, designation=%s WHERE employee_id=%s",
                (phone, department, designation, int(employee_id)),
            )
            return cur.rowcount > 0

    def set_role(self, employee_id: int, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET role=%s WHERE employee_id=%s", (role.value, int(employee_id)))
            return cur.rowcount > 0

    def set_status(self, employee_id: int, status: EmploymentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET employment_status=%s WHERE employee_id=%s",
                (status.value, int(employee_id)),
            )
            return cur.rowcount > 0

    def list_components(self, employee_id: int) -> Sequence[SalaryComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT component_id, employee_id, name, component_type, amount, is_active
                FROM salary_components
                WHERE employee_id=%s
                ORDER BY component_id ASC
                """,
                (int(employee_id),),
            )
            return [_to_component(r) for r in fetchall(cur)]

    def add_component(self, *, employee_id: int, name: str, component_type: ComponentType, amount: Decimal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_components(employee_id, name, component_type, amount, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (int(employee_id), name, component_type.value, amount),
            )
            return int(cur.lastrowid)

    def set_component_active(self, component_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_components SET is_active=%s WHERE component_id=%s",
                (1 if is_active else 0, int(component_id)),
            )
            return cur.rowcount > 0
