"""
Idempotent batch import of login records.

Re-running the same batch is safe: every login name that already exists is
reported as ``exists`` and left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from turfboard.models import MembershipRole, Organization, db
from turfboard.services.login_store import MAX_COUNT, ImportOutcome, LoginStore
from turfboard.services.stats_service import coerce_count
from turfboard.utils.error_handler import PermissionDenied, StoreUnavailable, ValidationError
from turfboard.utils.metrics import record_import_item
from turfboard.utils.permissions import has_role

NAME_KEYS = ("login", "displayName", "name", "username")
ON_KEYS = ("onTurf", "onCount", "on_turf")
OFF_KEYS = ("offTurf", "offCount", "off_turf")


@dataclass
class ImportSummary:
    """Aggregate results from one import batch."""

    total: int
    results: list[ImportOutcome] = field(default_factory=list)
    skipped: int = 0

    @property
    def created(self) -> int:
        return sum(1 for outcome in self.results if outcome.status == "created")

    @property
    def exists(self) -> int:
        return sum(1 for outcome in self.results if outcome.status == "exists")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": f"Import finished: {self.created} created, {self.exists} already existed",
            "results": [outcome.to_dict() for outcome in self.results],
            "total": self.total,
            "created": self.created,
            "exists": self.exists,
            "skipped": self.skipped,
        }


def _first_present(item: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def _resolve_login(item: Mapping[str, Any]) -> Optional[str]:
    value = _first_present(item, NAME_KEYS)
    if value is None:
        return None
    login = str(value).strip()
    return login or None


def _resolve_organization(item: Mapping[str, Any], default: Optional[int]) -> Optional[int]:
    value = item.get("organizationId", default)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("invalid organizationId")
    try:
        organization_id = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("invalid organizationId") from exc
    if Organization.find_by_id(organization_id) is None:
        raise ValidationError("invalid organizationId")
    return organization_id


def _resolve_count(item: Mapping[str, Any], keys: Iterable[str]) -> int:
    count = int(round(coerce_count(_first_present(item, keys))))
    if count > MAX_COUNT:
        raise ValidationError("invalid values")
    return count


def _require_import_permission(user_email: str, organization_id: Optional[int]) -> None:
    """An identified caller may only create logins where they hold vendor or higher"""
    if organization_id is None or not has_role(user_email, organization_id, MembershipRole.VENDOR):
        current_app.logger.warning(f"Import denied for {user_email} into organization {organization_id}")
        raise PermissionDenied()


def import_logins(
    items: Iterable[Any],
    *,
    organization_id: Optional[int] = None,
    cache=None,
    user_email: Optional[str] = None,
) -> ImportSummary:
    """
    Create a login for every item whose name is not yet known.

    The whole batch is one transaction: a store failure rolls back every
    item. Items without a usable name are skipped with a warning.

    Args:
        items: mappings with a name (``login``/``displayName``/``name``/
               ``username``), optional counters and ``organizationId``
        organization_id: default organization for items that name none
        cache: response cache to invalidate once the batch is committed
        user_email: caller identity; when given, every target organization
                    must grant it vendor or higher (no unowned logins)
    """
    items = list(items)
    summary = ImportSummary(total=len(items))

    try:
        for item in items:
            if not isinstance(item, Mapping):
                current_app.logger.warning(f"Skipping import item that is not an object: {item!r}")
                summary.skipped += 1
                continue
            login = _resolve_login(item)
            if login is None:
                current_app.logger.warning(f"Skipping import item without a login name: {item!r}")
                summary.skipped += 1
                continue

            target_organization = _resolve_organization(item, organization_id)
            if user_email is not None:
                _require_import_permission(user_email, target_organization)

            outcome = LoginStore.create_from_import(
                login,
                on_turf=_resolve_count(item, ON_KEYS),
                off_turf=_resolve_count(item, OFF_KEYS),
                organization_id=target_organization,
                commit=False,
            )
            summary.results.append(outcome)
        db.session.commit()
    except (ValidationError, PermissionDenied, StoreUnavailable):
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Database error committing import batch: {str(e)}")
        raise StoreUnavailable() from e

    if cache is not None:
        cache.invalidate_all()

    record_import_item("created", summary.created)
    record_import_item("exists", summary.exists)
    record_import_item("skipped", summary.skipped)
    current_app.logger.info(
        f"Import batch of {summary.total}: {summary.created} created, "
        f"{summary.exists} existing, {summary.skipped} skipped"
    )
    return summary
