"""In-memory repositories and helpers shared by the test modules."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from hr_payroll.container import wire
from hr_payroll.core.enums import ComponentType, EmploymentStatus, LeaveStatus, PayrunStatus, PayslipStatus, Role
from hr_payroll.core.exceptions import ConflictError
from hr_payroll.employees.model import Employee, SalaryComponent, SalarySettings
from hr_payroll.leaves.model import Leave, LeaveBalance
from hr_payroll.notifications.model import DeliveryResult
from hr_payroll.organizations.model import Organization
from hr_payroll.payroll.model import Payrun, Payslip
from hr_payroll.permissions.defaults import DEFAULT_ROLE_PERMISSIONS
from hr_payroll.permissions.model import RolePermission
from hr_payroll.sessions.model import WorkSession
from hr_payroll.users.model import User


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def atomic(self):
        return nullcontext()

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, email, full_name, password_hash):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(user_id=uid, email=email, full_name=full_name, password_hash=password_hash)
        return uid

    def set_active(self, user_id, *, is_active):
        self.users[int(user_id)] = replace(self.users[int(user_id)], is_active=is_active)
        return True

    def list_users(self):
        return list(self.users.values())


class FakeEmployeesRepo:
    def __init__(self):
        self._next_id = 1
        self._next_component_id = 1
        self.employees: dict[int, Employee] = {}
        self.components: dict[int, SalaryComponent] = {}
        self.atomic_calls = 0

    def atomic(self):
        self.atomic_calls += 1
        return nullcontext()

    def add(self, **overrides) -> Employee:
        eid = self._next_id
        self._next_id += 1
        fields = dict(
            employee_id=eid,
            user_id=eid,
            employee_code=f"EMP{eid:04d}",
            first_name="Emp",
            last_name=str(eid),
            email=f"emp{eid}@example.com",
            role=Role.EMPLOYEE,
            employment_status=EmploymentStatus.ACTIVE,
            date_of_joining=date(2024, 1, 1),
            organization_id=1,
            salary=SalarySettings(monthly_wage=Decimal("100000")),
        )
        fields.update(overrides)
        employee = Employee(**fields)
        self.employees[eid] = employee
        return employee

    def get_by_id(self, employee_id):
        return self.employees.get(int(employee_id))

    def get_by_user_id(self, user_id):
        return next((e for e in self.employees.values() if e.user_id == int(user_id)), None)

    def list_employees(self, *, status=None, organization_id=None):
        return [
            e
            for e in self.employees.values()
            if (status is None or e.employment_status == status)
            and (organization_id is None or e.organization_id == organization_id)
        ]

    def count_joined_in_year(self, year):
        return sum(1 for e in self.employees.values() if e.date_of_joining.year == int(year))

    def create(self, *, user_id, organization_id, employee_code, first_name, last_name, email, phone, department,
               designation, role, date_of_joining, salary):
        return self.add(
            user_id=user_id,
            organization_id=organization_id,
            employee_code=employee_code,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            department=department,
            designation=designation,
            role=role,
            date_of_joining=date_of_joining,
            salary=salary,
        ).employee_id

    def update_salary(self, employee_id, salary):
        self.employees[int(employee_id)] = replace(self.employees[int(employee_id)], salary=salary)
        return True

    def update_profile(self, employee_id, *, phone, department, designation):
        self.employees[int(employee_id)] = replace(
            self.employees[int(employee_id)], phone=phone, department=department, designation=designation
        )
        return True

    def set_role(self, employee_id, role):
        self.employees[int(employee_id)] = replace(self.employees[int(employee_id)], role=role)
        return True

    def set_status(self, employee_id, status):
        self.employees[int(employee_id)] = replace(self.employees[int(employee_id)], employment_status=status)
        return True

    def list_components(self, employee_id):
        return [c for c in self.components.values() if c.employee_id == int(employee_id)]

    def add_component(self, *, employee_id, name, component_type: ComponentType, amount):
        cid = self._next_component_id
        self._next_component_id += 1
        self.components[cid] = SalaryComponent(
            component_id=cid, employee_id=int(employee_id), name=name, component_type=component_type, amount=amount
        )
        return cid

    def set_component_active(self, component_id, *, is_active):
        self.components[int(component_id)] = replace(self.components[int(component_id)], is_active=is_active)
        return True


class FakeOrganizationsRepo:
    def __init__(self):
        self.orgs: dict[int, Organization] = {1: Organization(1, "Odoo India")}

    def get_by_id(self, organization_id):
        return self.orgs.get(int(organization_id))

    def get_by_name(self, company_name):
        return next((o for o in self.orgs.values() if o.company_name == company_name), None)

    def create(self, company_name):
        oid = max(self.orgs, default=0) + 1
        self.orgs[oid] = Organization(oid, company_name)
        return oid

    def rename(self, organization_id, company_name):
        if int(organization_id) not in self.orgs:
            return False
        self.orgs[int(organization_id)] = Organization(int(organization_id), company_name)
        return True


class FakeSessionsRepo:
    def __init__(self):
        self._next_id = 1
        self.sessions: dict[int, WorkSession] = {}

    def atomic(self):
        return nullcontext()

    def add(self, *, employee_id, start, end=None, break_minutes=0, **overrides) -> WorkSession:
        """Store a session; closed sessions get their hours frozen like a real checkout."""

        from hr_payroll.sessions.calculator import calculate_overtime, calculate_working_hours

        sid = self._next_id
        self._next_id += 1
        fields = dict(
            session_id=sid,
            employee_id=employee_id,
            work_date=start.date(),
            start_time=start,
            end_time=end,
            is_active=end is None,
            total_break_minutes=break_minutes,
        )
        if end is not None:
            hours = calculate_working_hours(start, end, break_minutes)
            fields.update(working_hours=hours, overtime_hours=calculate_overtime(hours))
        fields.update(overrides)
        session = WorkSession(**fields)
        self.sessions[sid] = session
        return session

    def get_by_id(self, session_id):
        return self.sessions.get(int(session_id))

    def find_active(self, employee_id):
        return next((s for s in self.sessions.values() if s.employee_id == int(employee_id) and s.is_active), None)

    def list_for_range(self, employee_id, start, end):
        return sorted(
            (s for s in self.sessions.values() if s.employee_id == int(employee_id) and start <= s.work_date <= end),
            key=lambda s: s.start_time,
        )

    def list_all_for_range(self, start, end):
        return sorted((s for s in self.sessions.values() if start <= s.work_date <= end), key=lambda s: s.start_time)

    def create(self, *, employee_id, work_date, start_time):
        if self.find_active(employee_id):
            raise ConflictError("You already have an active session")
        return self.add(employee_id=int(employee_id), start=start_time)

    def start_break(self, *, session_id, break_start_time):
        s = self.sessions[int(session_id)]
        self.sessions[s.session_id] = replace(s, break_start_time=break_start_time, break_end_time=None)
        return True

    def end_break(self, *, session_id, break_end_time, total_break_minutes):
        s = self.sessions[int(session_id)]
        self.sessions[s.session_id] = replace(s, break_end_time=break_end_time, total_break_minutes=total_break_minutes)
        return True

    def close(self, *, session_id, end_time, total_break_minutes, break_end_time, working_hours, overtime_hours):
        s = self.sessions[int(session_id)]
        if not s.is_active:
            return False
        self.sessions[s.session_id] = replace(
            s,
            end_time=end_time,
            is_active=False,
            total_break_minutes=total_break_minutes,
            break_end_time=break_end_time or s.break_end_time,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
        )
        return True


class FakeLeavesRepo:
    def __init__(self):
        self._next_id = 1
        self.leaves: dict[int, Leave] = {}

    def atomic(self):
        return nullcontext()

    def add(self, *, employee_id, leave_type, start_date, end_date, status=LeaveStatus.PENDING, reason="r") -> Leave:
        lid = self._next_id
        self._next_id += 1
        leave = Leave(
            leave_id=lid,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=Decimal((end_date - start_date).days + 1),
            reason=reason,
            status=status,
            created_at=datetime(2025, 1, 1, 9, 0),
        )
        self.leaves[lid] = leave
        return leave

    def get_by_id(self, leave_id):
        return self.leaves.get(int(leave_id))

    def create(self, *, employee_id, leave_type, start_date, end_date, total_days, reason, attachment=None):
        leave = self.add(
            employee_id=employee_id, leave_type=leave_type, start_date=start_date, end_date=end_date, reason=reason
        )
        self.leaves[leave.leave_id] = replace(leave, total_days=total_days, attachment=attachment)
        return leave.leave_id

    def _matches(self, leave, filters):
        return (
            (filters.status is None or leave.status == filters.status)
            and (filters.leave_type is None or leave.leave_type == filters.leave_type)
            and (filters.year is None or leave.start_date.year == filters.year)
        )

    def list_for_employee(self, employee_id, filters):
        return [l for l in self.leaves.values() if l.employee_id == int(employee_id) and self._matches(l, filters)]

    def list_all(self, filters, *, offset, limit):
        items = [l for l in self.leaves.values() if self._matches(l, filters)]
        return items[offset : offset + limit], len(items)

    def list_approved_in_range(self, employee_id, start, end):
        return [
            l
            for l in self.leaves.values()
            if l.employee_id == int(employee_id)
            and l.status == LeaveStatus.APPROVED
            and l.start_date <= end
            and l.end_date >= start
        ]

    def set_status(self, leave_id, *, status, expected, approved_by=None, approved_at=None, rejection_reason=None):
        leave = self.leaves.get(int(leave_id))
        if not leave or leave.status != expected:
            return False
        self.leaves[leave.leave_id] = replace(
            leave,
            status=status,
            approved_by=approved_by or leave.approved_by,
            approved_at=approved_at or leave.approved_at,
            rejection_reason=rejection_reason or leave.rejection_reason,
        )
        return True


class FakeBalancesRepo:
    def __init__(self):
        self._next_id = 1
        self.balances: dict[int, LeaveBalance] = {}

    def get(self, employee_id, leave_type, year):
        return next(
            (
                b
                for b in self.balances.values()
                if b.employee_id == int(employee_id) and b.leave_type == leave_type and b.year == int(year)
            ),
            None,
        )

    def list_for_employee(self, employee_id, year):
        return [b for b in self.balances.values() if b.employee_id == int(employee_id) and b.year == int(year)]

    def insert(self, *, employee_id, leave_type, year, allocated):
        bid = self._next_id
        self._next_id += 1
        self.balances[bid] = LeaveBalance(
            balance_id=bid,
            employee_id=int(employee_id),
            leave_type=leave_type,
            year=int(year),
            allocated=Decimal(allocated),
            used=Decimal("0"),
            remaining=Decimal(allocated),
        )
        return bid

    def update(self, balance_id, *, allocated, used, remaining):
        b = self.balances[int(balance_id)]
        self.balances[b.balance_id] = replace(b, allocated=allocated, used=used, remaining=remaining)
        return True


class FakePayrollRepo:
    def __init__(self):
        self._next_payrun_id = 1
        self._next_payslip_id = 1
        self.payruns: dict[int, Payrun] = {}
        self.payslips: dict[int, Payslip] = {}
        self.atomic_calls = 0

    def atomic(self):
        self.atomic_calls += 1
        return nullcontext()

    def get_payrun(self, payrun_id):
        return self.payruns.get(int(payrun_id))

    def find_payrun(self, month, year):
        return next((p for p in self.payruns.values() if (p.month, p.year) == (int(month), int(year))), None)

    def create_payrun(self, *, month, year, period_start, period_end):
        if self.find_payrun(month, year):
            raise ConflictError("duplicate")
        pid = self._next_payrun_id
        self._next_payrun_id += 1
        self.payruns[pid] = Payrun(
            payrun_id=pid,
            month=month,
            year=year,
            period_start=period_start,
            period_end=period_end,
            status=PayrunStatus.PROCESSING,
        )
        return pid

    def recent_payruns(self, limit):
        return sorted(self.payruns.values(), key=lambda p: (p.year, p.month), reverse=True)[:limit]

    def set_payrun_total(self, payrun_id, total_amount):
        self.payruns[int(payrun_id)] = replace(self.payruns[int(payrun_id)], total_amount=total_amount)

    def complete_payrun(self, payrun_id, *, completed_at):
        self.payruns[int(payrun_id)] = replace(
            self.payruns[int(payrun_id)], status=PayrunStatus.COMPLETED, completed_at=completed_at
        )

    def get_payslip(self, payslip_id):
        return self.payslips.get(int(payslip_id))

    def find_payslip(self, employee_id, month, year):
        return next(
            (
                p
                for p in self.payslips.values()
                if (p.employee_id, p.month, p.year) == (int(employee_id), int(month), int(year))
            ),
            None,
        )

    def list_payslips(self, payrun_id):
        return [p for p in self.payslips.values() if p.payrun_id == int(payrun_id)]

    def list_payslips_by_employee(self, employee_id, year=None):
        return [
            p
            for p in self.payslips.values()
            if p.employee_id == int(employee_id) and (year is None or p.year == int(year))
        ]

    def insert_payslip(self, draft):
        sid = self._next_payslip_id
        self._next_payslip_id += 1
        self.payslips[sid] = Payslip(
            payslip_id=sid,
            payrun_id=draft.payrun_id,
            employee_id=draft.employee_id,
            month=draft.month,
            year=draft.year,
            attendance=draft.attendance,
            figures=draft.figures,
            status=PayslipStatus.PENDING,
        )
        return sid

    def replace_payslip(self, payslip_id, draft):
        self.payslips[int(payslip_id)] = replace(
            self.payslips[int(payslip_id)],
            payrun_id=draft.payrun_id,
            attendance=draft.attendance,
            figures=draft.figures,
            status=PayslipStatus.PENDING,
            processed_by=None,
            processed_at=None,
            paid_at=None,
        )

    def set_payslip_status(self, payslip_id, *, status, expected, processed_by=None, processed_at=None):
        slip = self.payslips.get(int(payslip_id))
        if not slip or slip.status != expected:
            return False
        self.payslips[slip.payslip_id] = replace(
            slip, status=status, processed_by=processed_by, processed_at=processed_at
        )
        return True

    def process_pending_payslips(self, payrun_id, *, processed_by, processed_at):
        count = 0
        for slip in self.list_payslips(payrun_id):
            if slip.status == PayslipStatus.PENDING:
                self.payslips[slip.payslip_id] = replace(
                    slip, status=PayslipStatus.PROCESSED, processed_by=processed_by, processed_at=processed_at
                )
                count += 1
        return count

    def mark_payslips_paid(self, payrun_id, *, paid_at):
        count = 0
        for slip in self.list_payslips(payrun_id):
            if slip.status == PayslipStatus.PROCESSED:
                self.payslips[slip.payslip_id] = replace(slip, status=PayslipStatus.PAID, paid_at=paid_at)
                count += 1
        return count


class FakePermissionsRepo:
    def __init__(self, seed_defaults: bool = True):
        self.rows: set[RolePermission] = set()
        if seed_defaults:
            for role, modules in DEFAULT_ROLE_PERMISSIONS.items():
                for module, actions in modules.items():
                    for action in actions:
                        self.rows.add(RolePermission(role, module, action))

    def exists(self, role, module, action):
        return RolePermission(role, module, action) in self.rows

    def list_for_role(self, role):
        return sorted((p for p in self.rows if p.role == role), key=lambda p: (p.module, p.action.value))

    def replace_for_role(self, role, permissions):
        self.rows = {p for p in self.rows if p.role != role}
        new_rows = list(permissions)
        self.rows.update(new_rows)
        return len(new_rows)


class FakeOutboxRepo:
    def __init__(self):
        self.messages = {}
        self.status = {}

    def enqueue(self, message):
        oid = len(self.messages) + 1
        self.messages[oid] = message
        self.status[oid] = "QUEUED"
        return oid

    def mark_sent(self, outbox_id, *, sent_at):
        self.status[outbox_id] = "SENT"

    def mark_failed(self, outbox_id, *, error):
        self.status[outbox_id] = f"FAILED: {error}"


class FakeEmailSender:
    def __init__(self, deliver: bool = True, explode: bool = False):
        self.deliver = deliver
        self.explode = explode
        self.sent = []

    def send(self, message):
        if self.explode:
            raise OSError("smtp down")
        self.sent.append(message)
        if self.deliver:
            return DeliveryResult(delivered=True)
        return DeliveryResult(delivered=False, error="Email not configured")


def make_container(clock: Optional[MutableClock] = None, *, email_sender: Optional[FakeEmailSender] = None):
    return wire(
        users_repo=FakeUsersRepo(),
        employees_repo=FakeEmployeesRepo(),
        organizations_repo=FakeOrganizationsRepo(),
        sessions_repo=FakeSessionsRepo(),
        leaves_repo=FakeLeavesRepo(),
        balances_repo=FakeBalancesRepo(),
        payroll_repo=FakePayrollRepo(),
        permissions_repo=FakePermissionsRepo(),
        outbox_repo=FakeOutboxRepo(),
        email_sender=email_sender or FakeEmailSender(),
        clock=clock or MutableClock(datetime(2025, 3, 31, 18, 0)),
    )
