# turfboard/routes/system.py

"""
Health and metrics endpoints
"""

from flask import Response, current_app, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from turfboard.models import db
from turfboard.services.response_cache import get_response_cache


def register_system_routes(app):
    """Register health and metrics routes"""

    @app.route(app.config.get("HEALTH_CHECK_ENDPOINT", "/health"), methods=["GET"])
    def health_check():
        """Liveness plus a database ping"""
        try:
            db.session.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Health check database ping failed: {str(e)}")
            database = "unavailable"

        status_code = 200 if database == "ok" else 503
        return (
            jsonify(
                {
                    "status": "ok" if status_code == 200 else "degraded",
                    "database": database,
                    "cache": get_response_cache().stats(),
                }
            ),
            status_code,
        )

    if app.config.get("MONITORING_ENABLED", False):

        @app.route(app.config.get("METRICS_ENDPOINT", "/metrics"), methods=["GET"])
        def metrics():
            return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
