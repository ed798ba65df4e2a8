# turfboard/utils/permissions.py

from functools import wraps

from flask import current_app
from flask_login import current_user

from turfboard.models import LoginRecord, Membership, MembershipRole, Organization, db
from turfboard.utils.error_handler import PermissionDenied


def normalize_email(user_email):
    """Trim an identity; blank identities count as no identity"""
    if user_email is None:
        return None
    user_email = str(user_email).strip()
    return user_email or None


def get_current_user_email():
    """Email of the identity attached to this request, or None when anonymous"""
    if not current_user or not current_user.is_authenticated:
        return None
    return normalize_email(current_user.get_id())


def get_user_organizations(user_email):
    """
    Get every organization a user belongs to, with the role held there.

    Returns:
        list of dicts {organizationId, role, organizationName, companyName}
        ordered by organization name
    """
    user_email = normalize_email(user_email)
    if not user_email:
        return []

    rows = (
        db.session.query(Membership, Organization)
        .join(Organization, Organization.id == Membership.organization_id)
        .filter(Membership.user_email == user_email)
        .order_by(Organization.name)
        .all()
    )
    return [
        {
            "organizationId": membership.organization_id,
            "role": membership.role.value,
            "organizationName": organization.name,
            "companyName": organization.company_name,
        }
        for membership, organization in rows
    ]


def get_user_role_in_organization(user_email, organization_id):
    """Get the role a user holds directly in an organization, or None"""
    user_email = normalize_email(user_email)
    if not user_email or organization_id is None:
        return None

    membership = Membership.query.filter_by(user_email=user_email, organization_id=organization_id).first()
    return membership.role if membership else None


def has_role(user_email, organization_id, required_role):
    """Check if the user holds at least ``required_role`` in the organization"""
    role = get_user_role_in_organization(user_email, organization_id)
    if role is None:
        return False
    return role >= MembershipRole.parse(required_role)


def is_admin(user_email, organization_id):
    return has_role(user_email, organization_id, MembershipRole.ADMIN)


def get_user_organization_ids(user_email, min_role=None):
    """
    Get IDs of organizations where the user holds at least ``min_role``
    (any role when ``min_role`` is None). Empty set for unknown users.
    """
    user_email = normalize_email(user_email)
    if not user_email:
        return set()

    query = Membership.query.filter_by(user_email=user_email)
    if min_role is not None:
        minimum = MembershipRole.parse(min_role)
        allowed = [role for role in MembershipRole if role >= minimum]
        query = query.filter(Membership.role.in_(allowed))
    return {membership.organization_id for membership in query.all()}


def is_admin_anywhere(user_email):
    return bool(get_user_organization_ids(user_email, MembershipRole.ADMIN))


def can_view_organization(user_email, organization_id):
    """
    Check if the user may view an organization's data.

    Any direct membership grants view. An admin of ANY organization may
    also view every other organization, even without a membership there.
    """
    user_email = normalize_email(user_email)
    if not user_email or organization_id is None:
        return False

    if get_user_role_in_organization(user_email, organization_id) is not None:
        return True

    return is_admin_anywhere(user_email)


def can_edit_organization(user_email, organization_id):
    """
    Check if the user may edit an organization's logins.

    Narrower than view: the admin-anywhere escalation does not grant edit
    rights; the user needs vendor or higher in that organization itself.
    """
    if not can_view_organization(user_email, organization_id):
        return False
    return has_role(user_email, organization_id, MembershipRole.VENDOR)


def get_accessible_logins(user_email, organization_id=None, rows=None):
    """
    Filter logins down to those the user may see.

    Only rows owned by organizations the user is a member of are returned.
    When ``organization_id`` is given it must also pass
    can_view_organization, otherwise the result is empty (silent deny).

    Args:
        user_email: caller identity
        organization_id: optional organization filter
        rows: optional serialized all-rows snapshot (dicts carrying
              ``organizationId``) to filter instead of querying

    Returns:
        list of serialized login dicts ordered by login name
    """
    user_org_ids = get_user_organization_ids(user_email)
    if not user_org_ids:
        return []

    if organization_id is not None:
        if not can_view_organization(user_email, organization_id):
            current_app.logger.debug(f"Silently denying {user_email} view of organization {organization_id}")
            return []
        allowed_ids = user_org_ids & {organization_id}
    else:
        allowed_ids = user_org_ids

    if rows is None:
        records = (
            LoginRecord.query.filter(LoginRecord.organization_id.in_(allowed_ids))
            .order_by(LoginRecord.login.asc())
            .all()
        )
        return [record.to_dict(include_organization=True) for record in records]

    return [row for row in rows if row.get("organizationId") in allowed_ids]


def require_edit_permission(user_email, login):
    """
    Raise PermissionDenied unless the user may view AND edit the login's
    organization. A login without an organization cannot be edited by an
    identified caller.
    """
    organization_id = login.organization_id
    if not (
        can_view_organization(user_email, organization_id) and can_edit_organization(user_email, organization_id)
    ):
        current_app.logger.warning(f"Edit denied for {user_email} on login {login.slug}")
        raise PermissionDenied()


def identity_required(f):
    """Decorator rejecting anonymous callers when legacy anonymous access is disabled"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_user_email() is None and not current_app.config.get("LEGACY_ANONYMOUS_ACCESS", True):
            raise PermissionDenied()
        return f(*args, **kwargs)

    return decorated_function
