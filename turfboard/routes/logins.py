# turfboard/routes/logins.py

"""
JSON routes for reading and editing login counters
"""

from flask import current_app, jsonify, request

from turfboard.services.login_store import LoginStore, validate_counts
from turfboard.services.response_cache import get_response_cache
from turfboard.services.stats_service import aggregate_stats, compute_stats
from turfboard.utils.error_handler import NotFound, PermissionDenied, StoreUnavailable, ValidationError
from turfboard.utils.metrics import record_login_update
from turfboard.utils.permissions import (
    can_view_organization,
    get_accessible_logins,
    get_current_user_email,
    identity_required,
    require_edit_permission,
)

ORGANIZATION_FIELDS = ("organizationId", "organizationName")


def _parse_organization_filter():
    """
    Returns (organization_id, valid). A malformed id is not an error: the
    caller silently gets no rows.
    """
    raw = request.args.get("organizationId")
    if raw is None or not raw.strip():
        return None, True
    try:
        return int(raw), True
    except ValueError:
        return None, False


def _present(row, with_organization):
    """Copy a cached row for output, adding stats and the identity-only fields"""
    data = {key: value for key, value in row.items() if with_organization or key not in ORGANIZATION_FIELDS}
    data["stats"] = compute_stats(row["onTurf"], row["offTurf"]).to_dict()
    return data


def _load_all_rows():
    """Return (snapshot, cache_hit) for the all-logins listing"""
    cache = get_response_cache()
    snapshot = cache.get_all()
    if snapshot is not None:
        return snapshot, True
    snapshot = [record.to_dict(include_organization=True) for record in LoginStore.list_all()]
    cache.put_all(snapshot)
    return snapshot, False


def _visible_rows():
    """Rows the current caller may see, plus whether the snapshot was cached"""
    snapshot, hit = _load_all_rows()
    user_email = get_current_user_email()
    if user_email is None:
        # Legacy unauthenticated mode: everything, without organization fields
        return snapshot, hit, False

    organization_id, valid = _parse_organization_filter()
    if not valid:
        return [], hit, True
    return get_accessible_logins(user_email, organization_id, rows=snapshot), hit, True


def _with_cache_header(response, hit):
    response.headers["X-Cache"] = "HIT" if hit else "MISS"
    return response


def register_login_routes(app):
    """Register login routes"""

    @app.route("/api/logins", methods=["GET"])
    @identity_required
    def api_list_logins():
        """List visible logins ordered by login name, each with its stats"""
        rows, hit, with_organization = _visible_rows()
        current_app.logger.debug(f"Listing {len(rows)} logins (cache {'hit' if hit else 'miss'})")
        response = jsonify([_present(row, with_organization) for row in rows])
        return _with_cache_header(response, hit)

    @app.route("/api/logins/summary", methods=["GET"])
    @identity_required
    def api_logins_summary():
        """Aggregate stats over the same rows the listing would return"""
        rows, hit, _ = _visible_rows()
        response = jsonify(aggregate_stats(rows).to_dict())
        return _with_cache_header(response, hit)

    @app.route("/api/logins/<slug>", methods=["GET"])
    @identity_required
    def api_get_login(slug):
        """Fetch one login by slug"""
        cache = get_response_cache()
        row = cache.get(slug)
        hit = row is not None
        if not hit:
            row = LoginStore.get_by_slug(slug).to_dict(include_organization=True)
            cache.put(slug, row)

        user_email = get_current_user_email()
        if user_email is not None and not can_view_organization(user_email, row.get("organizationId")):
            # Indistinguishable from an unknown slug
            raise NotFound()

        response = jsonify(_present(row, user_email is not None))
        return _with_cache_header(response, hit)

    @app.route("/api/logins/<slug>", methods=["PATCH"])
    @identity_required
    def api_update_login(slug):
        """
        Update both counters of a login.

        Body: {"onTurf": number, "offTurf": number}
        """
        user_email = get_current_user_email()
        try:
            on_turf, off_turf = validate_counts(request.get_json(silent=True))

            if user_email is not None:
                require_edit_permission(user_email, LoginStore.get_by_slug(slug))

            record = LoginStore.update_counts(slug, on_turf, off_turf)
        except ValidationError:
            record_login_update("invalid")
            raise
        except NotFound:
            record_login_update("not_found")
            raise
        except PermissionDenied:
            record_login_update("forbidden")
            raise
        except StoreUnavailable:
            record_login_update("error")
            raise

        get_response_cache().invalidate(slug)
        record_login_update("updated")
        return jsonify(_present(record.to_dict(include_organization=True), user_email is not None))
