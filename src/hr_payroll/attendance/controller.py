from __future__ import annotations

from flask import Flask

from ..common.web import current_user, json_response, query_int, require_permission
from ..core.enums import MANAGER_ROLES, PermissionAction
from ..core.exceptions import AuthorizationError
from ..permissions.defaults import ATTENDANCE


def register(app: Flask, container) -> None:
    def _month_year():
        today = container.clock().date()
        return query_int("month", today.month), query_int("year", today.year)

    @app.route("/api/attendance/my-attendance", methods=["GET"], endpoint="attendance_mine")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def my_attendance():
        month, year = _month_year()
        days, summary = container.attendance_service.my_attendance(current_user().employee_id, month, year)
        return json_response({"days": days, "summary": summary})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def summary():
        user = current_user()
        month, year = _month_year()
        employee_id = query_int("employeeId", user.employee_id)
        if employee_id != user.employee_id and user.role not in MANAGER_ROLES:
            raise AuthorizationError("You can only view your own attendance")
        return json_response(container.attendance_service.employee_summary(employee_id, month, year))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def today():
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")
        return json_response(container.attendance_service.today_overview(organization_id=query_int("organizationId")))

    @app.route("/api/attendance/organization-summary", methods=["GET"], endpoint="attendance_org_summary")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def organization_summary():
        if current_user().role not in MANAGER_ROLES:
            raise AuthorizationError("Forbidden")
        month, year = _month_year()
        rows = container.attendance_service.organization_summary(
            month, year, organization_id=query_int("organizationId")
        )
        return json_response(rows)
