from __future__ import annotations

from flask import Flask

from ..common.web import current_user, json_body, json_response, login_required
from ..core.exceptions import NotFoundError


def register(app: Flask, container) -> None:
    def _organization_id() -> int:
        employee = container.employee_service.get_employee(current_user().employee_id)
        if employee.organization_id is None:
            raise NotFoundError("Organization not found")
        return employee.organization_id

    @app.route("/api/organization", methods=["GET"], endpoint="organization_get")
    @login_required
    def get_organization():
        return json_response(container.organization_service.get(_organization_id()))

    @app.route("/api/organization", methods=["PUT"], endpoint="organization_update")
    @login_required
    def update_organization():
        org = container.organization_service.rename(
            current_role=current_user().role,
            organization_id=_organization_id(),
            company_name=json_body().get("companyName", ""),
        )
        return json_response(org)
