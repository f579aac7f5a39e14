from __future__ import annotations

from flask import Flask, request

from ..common.validators import optional_int
from ..common.web import current_user, json_body, json_response, query_int, require_permission, require_roles
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import PermissionAction, Role
from ..permissions.defaults import TIME_OFF
from .model import LeaveFilters
from .service import parse_leave_status, parse_leave_type


def _filters() -> LeaveFilters:
    status = request.args.get("status")
    leave_type = request.args.get("leaveType")
    return LeaveFilters(
        status=parse_leave_status(status) if status else None,
        leave_type=parse_leave_type(leave_type) if leave_type else None,
        year=query_int("year"),
        department=request.args.get("department") or None,
    )


def register(app: Flask, container) -> None:
    @app.route("/api/leave/my-leaves", methods=["GET"], endpoint="leave_mine")
    @require_permission(TIME_OFF, PermissionAction.VIEW)
    def my_leaves():
        return json_response(container.leave_service.list_my_leaves(current_user().employee_id, _filters()))

    @app.route("/api/leave/my-balances", methods=["GET"], endpoint="leave_my_balances")
    @require_permission(TIME_OFF, PermissionAction.VIEW)
    def my_balances():
        year = query_int("year", container.clock().year)
        return json_response(container.leave_balance_service.get_balances(current_user().employee_id, year))

    @app.route("/api/leave/request", methods=["POST"], endpoint="leave_request")
    @require_permission(TIME_OFF, PermissionAction.CREATE)
    def request_leave():
        user = current_user()
        data = json_body()
        leave = container.leave_service.request_leave(
            requester_employee_id=user.employee_id,
            requester_role=user.role,
            employee_id=data.get("employeeId"),
            leave_type=data.get("leaveType"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
            attachment=data.get("attachment"),
        )
        return json_response(leave, 201)

    @app.route("/api/leave/all", methods=["GET"], endpoint="leave_all")
    @require_permission(TIME_OFF, PermissionAction.VIEW)
    @require_roles(Role.ADMIN, Role.HR_OFFICER)
    def all_leaves():
        page = container.leave_service.list_leaves(
            _filters(),
            page=query_int("page", 1),
            limit=query_int("limit", DEFAULT_PAGE_SIZE),
        )
        return json_response({"leaves": page.items, "total": page.total, "page": page.page, "limit": page.limit})

    @app.route("/api/leave/<int:leave_id>/approve", methods=["POST"], endpoint="leave_approve")
    @require_permission(TIME_OFF, PermissionAction.APPROVE)
    def approve(leave_id: int):
        return json_response(container.leave_service.approve_leave(leave_id, approver=current_user().employee_code))

    @app.route("/api/leave/<int:leave_id>/reject", methods=["POST"], endpoint="leave_reject")
    @require_permission(TIME_OFF, PermissionAction.APPROVE)
    def reject(leave_id: int):
        data = json_body()
        leave = container.leave_service.reject_leave(
            leave_id,
            approver=current_user().employee_code,
            reason=data.get("rejectionReason") or data.get("reason"),
        )
        return json_response(leave)

    @app.route("/api/leave/<int:leave_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    @require_permission(TIME_OFF, PermissionAction.CREATE)
    def cancel(leave_id: int):
        return json_response(container.leave_service.cancel_leave(leave_id, employee_id=current_user().employee_id))

    @app.route("/api/leave/balances/<int:employee_id>", methods=["PUT"], endpoint="leave_set_balance")
    @require_permission(TIME_OFF, PermissionAction.EDIT)
    @require_roles(Role.ADMIN, Role.HR_OFFICER)
    def set_balance(employee_id: int):
        data = json_body()
        container.employee_service.get_employee(employee_id)
        balance = container.leave_balance_service.allocate(
            employee_id=employee_id,
            leave_type=parse_leave_type(data.get("leaveType")),
            year=optional_int(data.get("year"), "year") or container.clock().year,
            allocated=data.get("allocated"),
        )
        return json_response(balance)
