# turfboard/routes/importer.py

"""
Batch import endpoint
"""

from flask import current_app, jsonify, request

from turfboard.importer.service import import_logins
from turfboard.services.response_cache import get_response_cache
from turfboard.utils.error_handler import ValidationError
from turfboard.utils.permissions import get_current_user_email, identity_required


def register_importer_routes(app):
    """Register import routes"""

    @app.route("/api/import/logins", methods=["POST"])
    @identity_required
    def api_import_logins():
        """
        Import a batch of logins.

        Body: a JSON list of items, or {"plans": [...], "organizationId": optional default}
        """
        data = request.get_json(silent=True)
        default_organization = None
        if isinstance(data, dict):
            default_organization = data.get("organizationId")
            data = data.get("plans")
        if not isinstance(data, list) or not data:
            raise ValidationError("no plans provided")

        user_email = get_current_user_email()
        current_app.logger.info(f"Import of {len(data)} items requested by {user_email or 'anonymous'}")
        summary = import_logins(
            data,
            organization_id=default_organization,
            cache=get_response_cache(),
            user_email=user_email,
        )
        return jsonify(summary.to_dict())
