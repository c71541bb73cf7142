import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from kiliniks.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(IntegrityError)
    def handle_conflict(e):
        # e.g. a pinned sales item id that already belongs to another stage
        logger.warning(
            "Storage conflict",
            extra={"context": {"error": str(e.orig)}},
        )
        return jsonify({"error": "Conflict with existing data"}), 409

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(e):
        logger.error(
            "Storage failure",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # Unknown routes and methods answer in JSON like every other error
        return jsonify({"error": e.name}), e.code


def create_app(event_publisher=None):
    """
    Build the Flask application.

    Args:
        event_publisher: publisher for appointment events; when omitted it is
            picked from EVENT_PUBLISHER (console or eventbridge)
    """
    app = Flask(__name__)

    env = os.getenv("FLASK_ENV", "development")
    is_production = env == "production"
    app.config["TESTING"] = os.getenv("TESTING", "").lower() in ("1", "true", "yes")
    app.json.sort_keys = False

    from kiliniks.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=logging.INFO if is_production else logging.DEBUG,
        enable_sql_echo=os.getenv("SQL_ECHO", "0") == "1",
        log_to_file=os.getenv("LOG_TO_FILE", "0") == "1",
        use_json_format=is_production,
    )

    from kiliniks.core.config import log_config

    log_config()

    if event_publisher is None:
        from kiliniks.events import build_event_publisher

        event_publisher = build_event_publisher()
    app.extensions["event_publisher"] = event_publisher

    from kiliniks.controllers import (
        appointments_bp,
        flows_bp,
        health_bp,
        locations_bp,
        stages_bp,
    )

    app.register_blueprint(appointments_bp)
    app.register_blueprint(flows_bp)
    app.register_blueprint(locations_bp)
    app.register_blueprint(stages_bp)
    app.register_blueprint(health_bp)

    _register_error_handlers(app)

    logger.info(
        "Application created",
        extra={
            "context": {
                "environment": env,
                "event_publisher": type(event_publisher).__name__,
            }
        },
    )
    return app
