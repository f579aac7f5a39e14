from __future__ import annotations

from flask import Flask, request

from ..common.validators import require_date
from ..common.web import current_user, json_response, require_permission
from ..core.enums import PermissionAction
from ..permissions.defaults import ATTENDANCE


def register(app: Flask, container) -> None:
    @app.route("/api/session/active", methods=["GET"], endpoint="session_active")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def active():
        found = container.session_service.get_active_session(current_user().employee_id)
        if not found:
            return json_response({"session": None})
        return json_response({"session": found.session, "liveWorkingHours": found.live_working_hours})

    @app.route("/api/session/start", methods=["POST"], endpoint="session_start")
    @require_permission(ATTENDANCE, PermissionAction.CREATE)
    def start():
        return json_response(container.session_service.start_session(current_user().employee_id), 201)

    @app.route("/api/session/stop", methods=["POST"], endpoint="session_stop")
    @require_permission(ATTENDANCE, PermissionAction.CREATE)
    def stop():
        return json_response(container.session_service.stop_session(current_user().employee_id))

    @app.route("/api/session/break/start", methods=["POST"], endpoint="session_break_start")
    @require_permission(ATTENDANCE, PermissionAction.CREATE)
    def break_start():
        return json_response(container.session_service.start_break(current_user().employee_id))

    @app.route("/api/session/break/end", methods=["POST"], endpoint="session_break_end")
    @require_permission(ATTENDANCE, PermissionAction.CREATE)
    def break_end():
        result = container.session_service.end_break(current_user().employee_id)
        return json_response({"session": result.session, "breakMinutes": result.break_minutes})

    @app.route("/api/session/today-hours", methods=["GET"], endpoint="session_today_hours")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def today_hours():
        hours = container.session_service.today_hours(current_user().employee_id)
        return json_response(
            {
                "totalMinutes": hours.total_minutes,
                "hours": hours.hours,
                "minutes": hours.minutes,
                "formatted": hours.formatted,
                "hasActiveSession": hours.has_active_session,
                "sessionCount": hours.session_count,
            }
        )

    @app.route("/api/session/history", methods=["GET"], endpoint="session_history")
    @require_permission(ATTENDANCE, PermissionAction.VIEW)
    def history():
        start = require_date(request.args.get("start"), "start")
        end = require_date(request.args.get("end"), "end")
        return json_response(container.session_service.list_sessions(current_user().employee_id, start, end))
