from __future__ import annotations

from flask import Flask, session

from ..common.web import current_user, json_body, json_response, login_required, require_roles, store_session_user
from ..core.enums import Role


def register(app: Flask, container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        store_session_user(user)
        return json_response(user)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return json_response({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        user = current_user()
        employee = container.employee_service.get_employee(user.employee_id)
        return json_response({"user": user, "employee": employee, "fullName": employee.full_name})

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @require_roles(Role.ADMIN)
    def list_users():
        return json_response(container.user_service.list_users())

    @app.route("/api/users/<int:user_id>/role", methods=["PUT"], endpoint="users_change_role")
    @login_required
    def change_role(user_id: int):
        user = current_user()
        container.user_service.change_role(
            current_role=user.role,
            current_user_id=user.user_id,
            user_id=user_id,
            role=str(json_body().get("role", "")).upper(),
        )
        return json_response({"success": True})
