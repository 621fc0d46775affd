from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .batch.controller import register as register_batch
from .config import get_settings_module
from .container import build_container_from_settings
from .core.exceptions import DomainError, InvalidInputError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .sites.controller import register as register_sites

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(app.config["DEBUG"])

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module, db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    container = build_container_from_settings(settings)

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn)
        logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(DomainError)
    def handle_domain_error(exc):
        logger.error("Unhandled domain error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    register_attendance(app, container)
    register_batch(app, container)
    register_sites(app, container)

    return app
