"""Application factory for the shift roster web service."""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Any

from flask import Flask, jsonify
from flask.typing import ResponseReturnValue

from .adapters import config_loader
from .blueprints.auth.routes import bp as auth_bp
from .blueprints.employees.routes import bp as employees_bp
from .blueprints.reports.routes import bp as reports_bp
from .blueprints.schedules.routes import bp as schedules_bp
from .config import DEFAULT_CONFIG, SETTINGS_ENV_VAR
from .dao import db as db_module
from .errors import DomainError, StorageError
from .services.scheduler import SchedulingRules

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("shiftroster").setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError) -> ResponseReturnValue:
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(StorageError)
    def handle_storage_error(exc: StorageError) -> ResponseReturnValue:
        logger.error(f"Storage failure while handling request: {exc}")
        return jsonify({"message": "Storage unavailable, please retry"}), exc.status_code


def create_app(config: dict[str, Any] | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(DEFAULT_CONFIG)

    settings_path = os.environ.get(SETTINGS_ENV_VAR)
    if settings_path:
        app.config.update({key.upper(): value for key, value in config_loader.load_config(settings_path).items()})

    if config:
        app.config.update(config)

    if not app.config.get("DATABASE"):
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
        app.config["DATABASE"] = str(Path(app.instance_path) / "shiftroster.sqlite")
    app.permanent_session_lifetime = timedelta(seconds=int(app.config["PERMANENT_SESSION_LIFETIME"]))

    _configure_logging(app)
    # Fail at startup on a bad rotation pattern or manpower floor.
    SchedulingRules.from_config(app.config)

    db_module.init_app(app)
    if app.config.get("AUTO_INIT_DB", True):
        db_module.ensure_schema(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(employees_bp)
    app.register_blueprint(schedules_bp)
    app.register_blueprint(reports_bp)
    _register_error_handlers(app)

    @app.get("/healthz")
    def healthcheck() -> tuple[str, int]:
        return "OK", 200

    return app
