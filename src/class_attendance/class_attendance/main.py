from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, jsonify, session

from config import get_settings_module

from .academics.controller import register as register_academics
from .attendance.controller import register as register_attendance
from .common.serializers import to_json
from .container import Container, build_container
from .core.constants import DEFAULT_DEFAULTER_THRESHOLD
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    DuplicateEntityError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .logging_config import setup_logging
from .reports.controller import register as register_reports
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DuplicateEntityError, 409),
    (StoreError, 503),
)


def _status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = _status_for(exc)
        body = {"error": str(exc), "type": type(exc).__name__}
        if isinstance(exc, ConflictError) and exc.conflicting_entry is not None:
            body["conflicting_entry"] = to_json(exc.conflicting_entry)

        if status >= 500:
            logger.error("%s: %s", type(exc).__name__, exc)
        else:
            logger.info("Request rejected (%s): %s", status, exc)
        return jsonify(body), status


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", "logs"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("Demo accounts ready")

        container = build_container(
            db_config=db_config,
            defaulter_threshold=getattr(settings, "DEFAULTER_THRESHOLD", DEFAULT_DEFAULTER_THRESHOLD),
        )

    app.extensions["container"] = container

    @app.before_request
    def load_identity():
        g.identity = None
        user_id = session.get("user_id")
        if user_id is None:
            return
        try:
            g.identity = container.auth_service.identity_for(int(user_id))
        except AuthenticationError:
            session.clear()

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    _register_error_handlers(app)
    register_users(app, container)
    register_academics(app, container)
    register_timetable(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_dashboard(app, container)

    return app
