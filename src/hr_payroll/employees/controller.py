from __future__ import annotations

from flask import Flask, request

from ..common.validators import optional_int, require_date
from ..common.web import current_user, json_body, json_response, login_required, query_int, require_permission, to_jsonable
from ..core.enums import MANAGER_ROLES, PermissionAction, Role
from ..core.exceptions import AuthorizationError
from ..permissions.defaults import EMPLOYEES
from .model import Employee, NewEmployee
from .service import parse_employment_status, parse_role

_SALARY_FIELDS = {
    "monthlyWage": "monthly_wage",
    "hraPercentage": "hra_percentage",
    "bonusPercentage": "bonus_percentage",
    "ltaPercentage": "lta_percentage",
    "pfPercentage": "pf_percentage",
    "professionalTax": "professional_tax",
    "standardAllowance": "standard_allowance",
}


def employee_json(employee: Employee) -> dict:
    data = to_jsonable(employee)
    data["fullName"] = employee.full_name
    return data


def register(app: Flask, container) -> None:
    def _require_manager() -> None:
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")

    @app.route("/api/employee", methods=["GET"], endpoint="employee_list")
    @require_permission(EMPLOYEES, PermissionAction.VIEW)
    def list_employees():
        status = request.args.get("status")
        employees = container.employee_service.list_employees(
            status=parse_employment_status(status) if status else None,
            organization_id=query_int("organizationId"),
        )
        return json_response([employee_json(e) for e in employees])

    @app.route("/api/employee", methods=["POST"], endpoint="employee_create")
    @require_permission(EMPLOYEES, PermissionAction.CREATE)
    def create_employee():
        data = json_body()
        created = container.employee_service.create_employee(
            NewEmployee(
                first_name=data.get("firstName", ""),
                last_name=data.get("lastName", ""),
                email=data.get("email", ""),
                company_name=data.get("companyName") or container.company_name,
                date_of_joining=require_date(data.get("dateOfJoining"), "dateOfJoining"),
                monthly_wage=data.get("monthlyWage", 0),
                role=parse_role(data["role"]) if data.get("role") else Role.EMPLOYEE,
                phone=data.get("phone"),
                department=data.get("department"),
                designation=data.get("designation"),
                organization_id=optional_int(data.get("organizationId"), "organizationId"),
                professional_tax=data.get("professionalTax"),
                pf_percentage=data.get("pfPercentage"),
            )
        )
        return json_response(
            {
                "employee": employee_json(created.employee),
                "temporaryPassword": created.temporary_password,
                "emailDelivered": created.email_delivered,
            },
            201,
        )

    @app.route("/api/employee/<int:employee_id>", methods=["GET"], endpoint="employee_get")
    @require_permission(EMPLOYEES, PermissionAction.VIEW)
    def get_employee(employee_id: int):
        employee = container.employee_service.get_employee(employee_id)
        data = employee_json(employee)
        data["salaryComponents"] = to_jsonable(container.employee_service.list_components(employee_id))
        return json_response(data)

    @app.route("/api/employee/<int:employee_id>/salary", methods=["PUT"], endpoint="employee_salary")
    @require_permission(EMPLOYEES, PermissionAction.EDIT)
    def update_salary(employee_id: int):
        _require_manager()
        data = json_body()
        changes = {field: data[key] for key, field in _SALARY_FIELDS.items() if key in data}
        employee = container.employee_service.update_salary_settings(employee_id, **changes)
        return json_response(employee_json(employee))

    @app.route("/api/employee/<int:employee_id>/status", methods=["PUT"], endpoint="employee_status")
    @require_permission(EMPLOYEES, PermissionAction.EDIT)
    def update_status(employee_id: int):
        employee = container.employee_service.set_employment_status(
            employee_id, json_body().get("employmentStatus", "")
        )
        return json_response(employee_json(employee))

    @app.route("/api/employee/<int:employee_id>/components", methods=["GET"], endpoint="employee_components")
    @require_permission(EMPLOYEES, PermissionAction.VIEW)
    def list_components(employee_id: int):
        return json_response(container.employee_service.list_components(employee_id))

    @app.route("/api/employee/<int:employee_id>/components", methods=["POST"], endpoint="employee_add_component")
    @require_permission(EMPLOYEES, PermissionAction.EDIT)
    def add_component(employee_id: int):
        _require_manager()
        data = json_body()
        component = container.employee_service.add_salary_component(
            employee_id,
            name=data.get("name", ""),
            component_type=data.get("type") or data.get("componentType", ""),
            amount=data.get("amount"),
        )
        return json_response(component, 201)

    @app.route(
        "/api/employee/<int:employee_id>/components/<int:component_id>",
        methods=["DELETE"],
        endpoint="employee_remove_component",
    )
    @require_permission(EMPLOYEES, PermissionAction.EDIT)
    def remove_component(employee_id: int, component_id: int):
        _require_manager()
        container.employee_service.deactivate_salary_component(employee_id, component_id)
        return json_response({"success": True})

    @app.route("/api/profile", methods=["GET"], endpoint="profile_get")
    @login_required
    def profile():
        return json_response(employee_json(container.employee_service.get_employee(current_user().employee_id)))

    @app.route("/api/profile", methods=["PUT"], endpoint="profile_update")
    @login_required
    def update_profile():
        data = json_body()
        employee = container.employee_service.update_profile(
            current_user().employee_id,
            phone=data.get("phone"),
            department=data.get("department"),
            designation=data.get("designation"),
        )
        return json_response(employee_json(employee))
