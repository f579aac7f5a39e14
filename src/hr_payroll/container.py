from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from .attendance.factory import DayStatusStrategyFactory
from .attendance.payroll_attendance import PayrollAttendanceCalculator
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_LEAVE_ALLOCATIONS, DEFAULT_STANDARD_ALLOWANCE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveBalanceRepository, MySQLLeaveRepository
from .leaves.repository import LeaveBalanceRepository, LeaveRepository
from .leaves.service import LeaveBalanceService, LeaveService
from .notifications.email import EmailSender, SMTPEmailSender
from .notifications.mysql_outbox_repository import MySQLOutboxRepository
from .notifications.repository import OutboxRepository
from .notifications.service import NotificationService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .organizations.service import OrganizationService
from .payroll.calculator.standard_calculator import StandardSalaryCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.repository import PermissionRepository
from .permissions.service import PermissionService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    clock: Clock
    company_name: str

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    organizations_repo: OrganizationRepository
    sessions_repo: SessionRepository
    leaves_repo: LeaveRepository
    balances_repo: LeaveBalanceRepository
    payroll_repo: PayrollRepository
    permissions_repo: PermissionRepository
    outbox_repo: OutboxRepository

    auth_service: AuthService
    user_service: UserService
    organization_service: OrganizationService
    notification_service: NotificationService
    permission_service: PermissionService
    session_service: SessionService
    attendance_service: AttendanceService
    leave_balance_service: LeaveBalanceService
    leave_service: LeaveService
    employee_service: EmployeeService
    payroll_attendance: PayrollAttendanceCalculator
    payroll_service: PayrollService


def wire(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    organizations_repo: OrganizationRepository,
    sessions_repo: SessionRepository,
    leaves_repo: LeaveRepository,
    balances_repo: LeaveBalanceRepository,
    payroll_repo: PayrollRepository,
    permissions_repo: PermissionRepository,
    outbox_repo: OutboxRepository,
    email_sender: EmailSender,
    clock: Clock = now_local,
    company_name: str = "Odoo India",
    standard_allowance: Decimal = DEFAULT_STANDARD_ALLOWANCE,
    leave_allocations: Optional[Mapping[str, int]] = None,
) -> Container:
    """Build services over the given repositories; tests pass in-memory ones."""

    auth_service = AuthService(users_repo, employees_repo)
    user_service = UserService(users_repo, employees_repo)
    organization_service = OrganizationService(organizations_repo)
    notification_service = NotificationService(outbox_repo, email_sender, clock=clock)
    permission_service = PermissionService(permissions_repo)
    session_service = SessionService(sessions_repo, employees_repo, clock=clock)
    attendance_service = AttendanceService(
        sessions_repo,
        employees_repo,
        strategy_factory=DayStatusStrategyFactory(),
        clock=clock,
    )
    leave_balance_service = LeaveBalanceService(
        balances_repo, default_allocations=leave_allocations or DEFAULT_LEAVE_ALLOCATIONS
    )
    leave_service = LeaveService(leaves_repo, leave_balance_service, employees_repo, clock=clock)
    employee_service = EmployeeService(
        employees_repo,
        users_repo,
        organization_service,
        leave_balance_service,
        notification_service,
        standard_allowance=standard_allowance,
        clock=clock,
    )
    payroll_attendance = PayrollAttendanceCalculator(sessions_repo, leave_service, clock=clock)
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        payroll_attendance,
        calculator=StandardSalaryCalculator(),
        clock=clock,
    )

    return Container(
        clock=clock,
        company_name=company_name,
        users_repo=users_repo,
        employees_repo=employees_repo,
        organizations_repo=organizations_repo,
        sessions_repo=sessions_repo,
        leaves_repo=leaves_repo,
        balances_repo=balances_repo,
        payroll_repo=payroll_repo,
        permissions_repo=permissions_repo,
        outbox_repo=outbox_repo,
        auth_service=auth_service,
        user_service=user_service,
        organization_service=organization_service,
        notification_service=notification_service,
        permission_service=permission_service,
        session_service=session_service,
        attendance_service=attendance_service,
        leave_balance_service=leave_balance_service,
        leave_service=leave_service,
        employee_service=employee_service,
        payroll_attendance=payroll_attendance,
        payroll_service=payroll_service,
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return wire(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        organizations_repo=MySQLOrganizationRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        balances_repo=MySQLLeaveBalanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        permissions_repo=MySQLPermissionRepository(conn),
        outbox_repo=MySQLOutboxRepository(conn),
        email_sender=SMTPEmailSender(
            smtp_host=getattr(settings, "SMTP_HOST", "localhost"),
            smtp_port=int(getattr(settings, "SMTP_PORT", 587)),
            smtp_user=getattr(settings, "SMTP_USER", ""),
            smtp_password=getattr(settings, "SMTP_PASSWORD", ""),
            from_email=getattr(settings, "SMTP_FROM", ""),
            from_name=getattr(settings, "COMPANY_NAME", "HR Payroll"),
        ),
        company_name=getattr(settings, "COMPANY_NAME", "Odoo India"),
        standard_allowance=Decimal(str(getattr(settings, "STANDARD_ALLOWANCE", DEFAULT_STANDARD_ALLOWANCE))),
        leave_allocations=getattr(settings, "DEFAULT_LEAVE_ALLOCATIONS", None),
    )
