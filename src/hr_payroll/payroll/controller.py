from __future__ import annotations

from flask import Flask

from ..common.validators import optional_int, require_month_year
from ..common.web import current_user, json_body, json_response, query_int, require_permission
from ..core.constants import DEFAULT_RECENT_PAYRUNS
from ..core.enums import MANAGER_ROLES, PermissionAction
from ..core.exceptions import AuthorizationError
from ..permissions.defaults import PAYROLL


def register(app: Flask, container) -> None:
    @app.route("/api/payroll/payrun/<int:month>/<int:year>", methods=["GET"], endpoint="payroll_payrun")
    @require_permission(PAYROLL, PermissionAction.VIEW)
    def payrun(month: int, year: int):
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")
        return json_response({"payrun": container.payroll_service.get_payrun_with_payslips(month, year)})

    @app.route("/api/payroll/payrun/generate", methods=["POST"], endpoint="payroll_generate")
    @require_permission(PAYROLL, PermissionAction.CREATE)
    def generate():
        data = json_body()
        month, year = require_month_year(data.get("month"), data.get("year"))
        run = container.payroll_service.get_or_create_payrun(month, year)
        result = container.payroll_service.generate_payslips(
            run.payrun_id,
            force=bool(data.get("force", False)),
            organization_id=optional_int(data.get("organizationId"), "organizationId"),
        )
        return json_response(
            {
                "payrun": result.payrun,
                "created": result.created,
                "replaced": result.replaced,
                "skipped": result.skipped,
            }
        )

    @app.route("/api/payroll/payslip/<int:payslip_id>/approve", methods=["POST"], endpoint="payroll_approve_payslip")
    @require_permission(PAYROLL, PermissionAction.PROCESS)
    def approve_payslip(payslip_id: int):
        approval = container.payroll_service.approve_payslip(payslip_id, approver=current_user().employee_code)
        return json_response(
            {
                "payslip": approval.payslip,
                "payrun": approval.payrun,
                "payrunCompleted": approval.payrun_completed,
            }
        )

    @app.route("/api/payroll/payrun/<int:payrun_id>/done", methods=["POST"], endpoint="payroll_payrun_done")
    @require_permission(PAYROLL, PermissionAction.PROCESS)
    def payrun_done(payrun_id: int):
        run = container.payroll_service.mark_payrun_as_done(payrun_id, processed_by=current_user().employee_code)
        return json_response({"payrun": run})

    @app.route("/api/payroll/payslips/my", methods=["GET"], endpoint="payroll_my_payslips")
    @require_permission(PAYROLL, PermissionAction.VIEW)
    def my_payslips():
        slips = container.payroll_service.get_payslips_by_employee(current_user().employee_id, query_int("year"))
        return json_response(slips)

    @app.route("/api/payroll/payslip/<int:payslip_id>", methods=["GET"], endpoint="payroll_payslip")
    @require_permission(PAYROLL, PermissionAction.VIEW)
    def payslip(payslip_id: int):
        user = current_user()
        slip = container.payroll_service.get_payslip(payslip_id)
        if slip.employee_id != user.employee_id and user.role not in MANAGER_ROLES:
            raise AuthorizationError("You can only view your own payslips")
        return json_response(slip)

    @app.route("/api/payroll/payruns/recent", methods=["GET"], endpoint="payroll_recent")
    @require_permission(PAYROLL, PermissionAction.VIEW)
    def recent():
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")
        return json_response(container.payroll_service.recent_payruns(query_int("limit", DEFAULT_RECENT_PAYRUNS)))

    @app.route("/api/payroll/warnings", methods=["GET"], endpoint="payroll_warnings")
    @require_permission(PAYROLL, PermissionAction.VIEW)
    def warnings():
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")
        return json_response(container.payroll_service.payroll_warnings(organization_id=query_int("organizationId")))
