# turfboard/utils/error_handler.py
"""
Error taxonomy for the turf API and the Flask handlers that render it.

Every error body is ``{"message": str}``. Messages are deliberately terse:
permission failures never say which organization or role was missing, and
store failures never expose driver details.
"""

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class TurfError(Exception):
    """Base class for errors that map to an HTTP response"""

    status_code = 500
    message = "internal error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(TurfError):
    """Malformed or missing input on a write; never retried automatically"""

    status_code = 400
    message = "invalid values"


class NotFound(TurfError):
    """Unknown slug or organization"""

    status_code = 404
    message = "not found"


class PermissionDenied(TurfError):
    """Identity present but lacking organization access or role"""

    status_code = 403
    message = "no permission"


class StoreUnavailable(TurfError):
    """Backing store connectivity or transaction failure"""

    status_code = 500
    message = "internal error"


def error_response(message, status_code):
    return jsonify({"message": message}), status_code


def init_error_handlers(app):
    """Register JSON error handlers on the application"""

    @app.errorhandler(TurfError)
    def handle_turf_error(error):
        if isinstance(error, StoreUnavailable):
            current_app.logger.error(f"Store unavailable: {error.__cause__ or error}")
        else:
            current_app.logger.info(f"{type(error).__name__}: {error.message}")
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code == 404:
            return error_response("not found", 404)
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        from turfboard.models import db

        db.session.rollback()
        current_app.logger.error(f"Unhandled error: {str(error)}", exc_info=True)
        return error_response("internal error", 500)
