from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from werkzeug.security import check_password_hash

from fakes import FakeEmailSender, MutableClock, make_container

from hr_payroll.core.enums import ComponentType, EmploymentStatus, LeaveType, Role
from hr_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from hr_payroll.employees.model import NewEmployee


def _new(**overrides):
    fields = dict(
        first_name="John",
        last_name="Doe",
        email="John.Doe@Example.com",
        company_name="Odoo India",
        date_of_joining=date(2025, 2, 3),
        monthly_wage=Decimal("60000"),
        department="Engineering",
    )
    fields.update(overrides)
    return NewEmployee(**fields)


def test_create_employee_sets_up_account_and_balances():
    sender = FakeEmailSender()
    container = make_container(MutableClock(datetime(2025, 3, 1, 9, 0)), email_sender=sender)

    created = container.employee_service.create_employee(_new())

    emp = created.employee
    assert emp.employee_code == "ODINJODO20250001"
    assert emp.email == "john.doe@example.com"
    assert emp.role == Role.EMPLOYEE
    assert emp.organization_id == 1
    assert emp.salary.monthly_wage == Decimal("60000")
    assert created.email_delivered

    user = container.users_repo.get_by_id(emp.user_id)
    assert check_password_hash(user.password_hash, created.temporary_password)

    balances = {b.leave_type: b.remaining for b in container.leave_balance_service.get_balances(emp.employee_id, 2025)}
    assert balances[LeaveType.PAID_TIME_OFF] == Decimal("24")

    assert sender.sent[0].recipient == "john.doe@example.com"
    assert created.temporary_password in sender.sent[0].text_body
    assert list(container.outbox_repo.status.values()) == ["SENT"]


def test_new_company_creates_organization_and_serial_increments():
    container = make_container()
    container.employee_service.create_employee(_new())

    created = container.employee_service.create_employee(
        _new(first_name="Ann", last_name="Lee", email="ann@example.com", company_name="Blue Fin")
    )

    assert created.employee.employee_code == "BLFIANLE20250002"
    assert container.organizations_repo.get_by_name("Blue Fin").organization_id == created.employee.organization_id


def test_email_failure_does_not_fail_creation():
    container = make_container(email_sender=FakeEmailSender(explode=True))

    created = container.employee_service.create_employee(_new())

    assert not created.email_delivered
    assert container.employees_repo.get_by_id(created.employee.employee_id)
    assert list(container.outbox_repo.status.values()) == ["FAILED: smtp down"]


def test_failed_employee_insert_runs_in_one_transaction_and_sends_nothing(monkeypatch):
    sender = FakeEmailSender()
    container = make_container(email_sender=sender)

    def taken(**_):
        raise ConflictError("Employee code already taken")

    monkeypatch.setattr(container.employees_repo, "create", taken)

    with pytest.raises(ConflictError):
        container.employee_service.create_employee(_new())

    assert container.employees_repo.atomic_calls == 1
    assert sender.sent == []
    assert container.outbox_repo.messages == {}


def test_duplicate_email_is_rejected():
    container = make_container()
    container.employee_service.create_employee(_new())

    with pytest.raises(ValidationError, match="already exists"):
        container.employee_service.create_employee(_new(email="john.doe@example.com"))


def test_update_salary_settings_validates_percentages():
    container = make_container()
    emp = container.employees_repo.add()

    updated = container.employee_service.update_salary_settings(
        emp.employee_id, monthly_wage="80000", hra_percentage="40", professional_tax=None
    )
    assert updated.salary.monthly_wage == Decimal("80000")
    assert updated.salary.hra_percentage == Decimal("40")
    assert updated.salary.professional_tax == Decimal("200")

    with pytest.raises(ValidationError):
        container.employee_service.update_salary_settings(emp.employee_id, pf_percentage="120")
    with pytest.raises(ValidationError, match="Unknown salary fields"):
        container.employee_service.update_salary_settings(emp.employee_id, bonus="5")


def test_status_change_deactivates_login():
    container = make_container()
    user_id = container.users_repo.create_user(email="a@example.com", full_name="A", password_hash="x")
    emp = container.employees_repo.add(user_id=user_id)

    updated = container.employee_service.set_employment_status(emp.employee_id, "terminated")

    assert updated.employment_status == EmploymentStatus.TERMINATED
    assert not container.users_repo.get_by_id(user_id).is_active


def test_salary_components():
    container = make_container()
    emp = container.employees_repo.add()
    other = container.employees_repo.add()

    component = container.employee_service.add_salary_component(
        emp.employee_id, name="Internet", component_type="earning", amount="1500"
    )
    assert component.component_type == ComponentType.EARNING

    with pytest.raises(NotFoundError):
        container.employee_service.deactivate_salary_component(other.employee_id, component.component_id)

    container.employee_service.deactivate_salary_component(emp.employee_id, component.component_id)
    assert not container.employee_service.list_components(emp.employee_id)[0].is_active


def test_profile_update_keeps_unset_fields():
    container = make_container()
    emp = container.employees_repo.add(phone="123", department="Ops")

    updated = container.employee_service.update_profile(emp.employee_id, designation="Lead")

    assert (updated.phone, updated.department, updated.designation) == ("123", "Ops", "Lead")
    with pytest.raises(NotFoundError):
        container.employee_service.get_employee(404)
