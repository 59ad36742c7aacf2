from __future__ import annotations

import atexit
import importlib
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.errors import register_error_handlers, register_jwt_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_DAYS
from .core.exceptions import StoreError
from .core.logging import configure_logging, get_logger
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_migrations
from .database.connection import DBConfig
from .users.controller import register as register_users

logger = get_logger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Without an explicit ``container`` the MySQL-backed one is built from
    settings, pending migrations are applied first (when ``AUTO_INIT_DB``),
    and the connection pool is closed at process exit. Configuration or
    migration failures raise ``StoreError``.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    jwt_secret = getattr(settings, "JWT_SECRET_KEY", None)
    if not jwt_secret:
        raise StoreError("JWT_SECRET_KEY is not set; create a .env file or export it")

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["HOST"] = getattr(settings, "HOST", "127.0.0.1")
    app.config["PORT"] = int(getattr(settings, "PORT", 5000))
    app.config["JWT_SECRET_KEY"] = jwt_secret
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        days=int(getattr(settings, "JWT_ACCESS_TOKEN_EXPIRES_DAYS", DEFAULT_TOKEN_DAYS))
    )

    if container is None:
        db_config = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
        logger.info("settings=%s db=%s", settings_module, db_config.describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_migrations(db_config)

        container = build_container(
            db_config=getattr(settings, "DB_CONFIG"),
            pool_size=int(getattr(settings, "DB_POOL_SIZE", 5)),
        )
        atexit.register(container.close)

    app.extensions["attendance_tracker"] = container

    jwt = JWTManager(app)
    register_jwt_handlers(jwt)
    register_error_handlers(app)

    register_users(app, container)
    register_attendance(app, container)
    register_dashboard(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running"})

    return app
