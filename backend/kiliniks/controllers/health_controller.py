"""
Health controller - health check endpoint for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from kiliniks.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


def check_database_connection() -> bool:
    db = None
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"error": str(e)}},
        )
        return False
    finally:
        if db is not None:
            db.close()


@health_bp.route("", methods=["GET"])
def health_check():
    """
    Report service and database status.

    Status codes:
        200: database reachable
        503: database unreachable
    """
    db_ok = check_database_connection()
    return jsonify(
        {
            "status": "healthy" if db_ok else "unhealthy",
            "database": "connected" if db_ok else "disconnected",
        }
    ), (200 if db_ok else 503)
