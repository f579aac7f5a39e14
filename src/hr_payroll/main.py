from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .common.web import CONTAINER_KEY
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables, seed_role_permissions
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .organizations.controller import register as register_organizations
from .payroll.controller import register as register_payroll
from .permissions.controller import register as register_permissions
from .sessions.controller import register as register_sessions
from .settings import get_settings_module
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            seed_role_permissions(db_config)
            ensure_demo_admin(db_config, company_name=getattr(settings, "COMPANY_NAME", "Odoo India"))
            logger.info("Demo seed ready")

        container = build_container(settings)

    app.extensions[CONTAINER_KEY] = container
    _register_error_handlers(app)

    register_users(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_employees(app, container)
    register_organizations(app, container)
    register_permissions(app, container)

    return app
