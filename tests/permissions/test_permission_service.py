import pytest

from fakes import FakePermissionsRepo

from hr_payroll.core.enums import PermissionAction, Role
from hr_payroll.core.exceptions import AuthorizationError, ValidationError
from hr_payroll.permissions.defaults import ATTENDANCE, PAYROLL, TIME_OFF
from hr_payroll.permissions.service import PermissionService, parse_action


def test_default_grants():
    service = PermissionService(FakePermissionsRepo())

    assert service.has_permission(Role.EMPLOYEE, ATTENDANCE, PermissionAction.CREATE)
    assert not service.has_permission(Role.EMPLOYEE, PAYROLL, PermissionAction.PROCESS)
    assert service.has_permission(Role.PAYROLL_OFFICER, PAYROLL, PermissionAction.PROCESS)


def test_admin_is_always_allowed():
    service = PermissionService(FakePermissionsRepo(seed_defaults=False))
    assert service.has_permission(Role.ADMIN, PAYROLL, PermissionAction.DELETE)


def test_permissions_grouped_by_module():
    grouped = PermissionService(FakePermissionsRepo()).permissions_for_role(Role.EMPLOYEE)
    assert sorted(grouped[TIME_OFF]) == ["Create", "View"]
    assert PAYROLL in grouped


def test_replace_role_permissions():
    service = PermissionService(FakePermissionsRepo())

    result = service.replace_role_permissions(
        current_role=Role.ADMIN,
        role=Role.EMPLOYEE,
        permissions={ATTENDANCE: ["view", "VIEW", "Export"]},
    )

    assert result == {ATTENDANCE: ["Export", "View"]}
    assert not service.has_permission(Role.EMPLOYEE, TIME_OFF, PermissionAction.VIEW)


def test_replace_role_permissions_guards():
    service = PermissionService(FakePermissionsRepo())

    with pytest.raises(AuthorizationError):
        service.replace_role_permissions(current_role=Role.HR_OFFICER, role=Role.EMPLOYEE, permissions={})
    with pytest.raises(ValidationError):
        service.replace_role_permissions(current_role=Role.ADMIN, role=Role.ADMIN, permissions={})
    with pytest.raises(ValidationError, match="Unknown module"):
        service.replace_role_permissions(current_role=Role.ADMIN, role=Role.EMPLOYEE, permissions={"Cafeteria": []})
    with pytest.raises(ValidationError, match="must be a list"):
        service.replace_role_permissions(current_role=Role.ADMIN, role=Role.EMPLOYEE, permissions={PAYROLL: "View"})


def test_parse_action_accepts_name_or_label():
    assert parse_action("approve") == PermissionAction.APPROVE
    assert parse_action("Export") == PermissionAction.EXPORT
    with pytest.raises(ValidationError):
        parse_action("Fly")
