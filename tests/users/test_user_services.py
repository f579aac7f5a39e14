import pytest
from werkzeug.security import generate_password_hash

from fakes import make_container

from hr_payroll.core.enums import Role
from hr_payroll.core.exceptions import AuthenticationError, AuthorizationError, ValidationError


def _account(container, email, password, role=Role.EMPLOYEE, **overrides):
    user_id = container.users_repo.create_user(
        email=email, full_name="Some One", password_hash=generate_password_hash(password)
    )
    employee = container.employees_repo.add(user_id=user_id, email=email, role=role, **overrides)
    return user_id, employee


def test_authenticate():
    container = make_container()
    user_id, employee = _account(container, "jane@example.com", "s3cret!")

    session_user = container.auth_service.authenticate("  Jane@Example.com ", "s3cret!")

    assert session_user.user_id == user_id
    assert session_user.employee_id == employee.employee_id
    assert session_user.employee_code == employee.employee_code
    assert session_user.role == Role.EMPLOYEE


def test_authenticate_rejects_bad_credentials():
    container = make_container()
    _account(container, "jane@example.com", "s3cret!")
    container.users_repo.create_user(email="legacy@example.com", full_name="L", password_hash="CHANGE_ME")

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("jane@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("nobody@example.com", "s3cret!")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("legacy@example.com", "CHANGE_ME")
    with pytest.raises(ValidationError):
        container.auth_service.authenticate("", "x")


def test_change_role():
    container = make_container()
    admin_user, _ = _account(container, "admin@example.com", "pw", role=Role.ADMIN)
    target_user, target = _account(container, "bob@example.com", "pw")

    container.user_service.change_role(
        current_role=Role.ADMIN, current_user_id=admin_user, user_id=target_user, role="HR_OFFICER"
    )
    assert container.employees_repo.get_by_id(target.employee_id).role == Role.HR_OFFICER

    rows = {r.user_id: r for r in container.user_service.list_users()}
    assert rows[target_user].role == Role.HR_OFFICER

    with pytest.raises(ValidationError):
        container.user_service.change_role(
            current_role=Role.ADMIN, current_user_id=admin_user, user_id=admin_user, role="EMPLOYEE"
        )
    with pytest.raises(AuthorizationError):
        container.user_service.change_role(
            current_role=Role.HR_OFFICER, current_user_id=target_user, user_id=admin_user, role="EMPLOYEE"
        )
