# Overview: Liveness endpoint reporting process and database health.

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return False


@system_bp.get("/health")
def health():
    """
    Returns:
        200: {"status": "ok", "database": "up"}
        503: {"status": "ok", "database": "down"}
    """
    database_up = check_database()
    response = {
        "status": "ok",
        "database": "up" if database_up else "down",
        "timestamp": to_utc_z(utcnow()),
    }
    return response, 200 if database_up else 503
