from __future__ import annotations

from flask import Flask

from ..common.web import current_user, json_body, json_response, login_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..employees.service import parse_role


def register(app: Flask, container) -> None:
    @app.route("/api/permissions/<role>", methods=["GET"], endpoint="permissions_get")
    @login_required
    def get_permissions(role: str):
        user = current_user()
        target = parse_role(role)
        if target != user.role and user.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")
        return json_response({"role": target, "permissions": container.permission_service.permissions_for_role(target)})

    @app.route("/api/permissions/<role>", methods=["PUT"], endpoint="permissions_update")
    @login_required
    def update_permissions(role: str):
        target = parse_role(role)
        permissions = container.permission_service.replace_role_permissions(
            current_role=current_user().role,
            role=target,
            permissions=json_body().get("permissions", {}),
        )
        return json_response({"role": target, "permissions": permissions})
