# turfboard/routes/organizations.py

"""
Organization and membership listing routes
"""

from flask import current_app, jsonify

from turfboard.models import Organization
from turfboard.utils.error_handler import ValidationError
from turfboard.utils.permissions import get_current_user_email, get_user_organization_ids, get_user_organizations


def register_organization_routes(app):
    """Register organization routes"""

    @app.route("/api/user/organizations", methods=["GET"])
    def api_user_organizations():
        """List the caller's memberships: organizationId, role, organizationName"""
        user_email = get_current_user_email()
        if user_email is None:
            raise ValidationError("userEmail is required")

        memberships = get_user_organizations(user_email)
        current_app.logger.debug(f"Found {len(memberships)} memberships for {user_email}")
        return jsonify(memberships)

    @app.route("/api/organizations", methods=["GET"])
    def api_list_organizations():
        """
        List organizations ordered by name. With an identity, only the
        organizations the user is a member of are returned.
        """
        user_email = get_current_user_email()
        query = Organization.query
        if user_email is not None:
            org_ids = get_user_organization_ids(user_email)
            if not org_ids:
                return jsonify([])
            query = query.filter(Organization.id.in_(org_ids))

        organizations = query.order_by(Organization.name).all()
        return jsonify([organization.to_dict() for organization in organizations])
