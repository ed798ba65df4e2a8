# turfboard/services/login_store.py
"""
Login Store - reads and atomic counter updates over the logins table
"""

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from turfboard.models import LoginRecord, db, generate_slug, utcnow
from turfboard.utils.error_handler import NotFound, StoreUnavailable, ValidationError

# Largest value a 32-bit integer column accepts
MAX_COUNT = 2**31 - 1


def _as_count(value: Any) -> int:
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError()
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError()
    if value < 0 or value > MAX_COUNT:
        raise ValidationError()
    return int(round(value))


def validate_counts(payload: Any) -> Tuple[int, int]:
    """
    Validate a PATCH body at the API edge.

    Both ``onTurf`` and ``offTurf`` must be present JSON numbers that are
    finite and non-negative. Returns the integer pair.

    Raises:
        ValidationError: "invalid values" for anything else
    """
    if not isinstance(payload, Mapping):
        raise ValidationError()
    return _as_count(payload.get("onTurf")), _as_count(payload.get("offTurf"))


@dataclass(frozen=True)
class ImportOutcome:
    """Result of one idempotent create"""

    login: str
    status: str  # "created" or "exists"
    id: int
    slug: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"login": self.login, "status": self.status, "id": self.id}
        if self.slug is not None:
            data["slug"] = self.slug
        return data


class LoginStore:
    """CRUD helpers over LoginRecord. Store failures surface as StoreUnavailable."""

    @staticmethod
    def _fail(action: str, error: SQLAlchemyError) -> StoreUnavailable:
        db.session.rollback()
        current_app.logger.error(f"Database error {action}: {str(error)}")
        return StoreUnavailable()

    @staticmethod
    def list_all() -> List[LoginRecord]:
        """All logins ordered by login name"""
        try:
            return (
                LoginRecord.query.options(joinedload(LoginRecord.organization))
                .order_by(LoginRecord.login.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise LoginStore._fail("listing logins", e) from e

    @staticmethod
    def get_by_slug(slug: str) -> LoginRecord:
        """
        Raises:
            NotFound: when no login has this slug
        """
        try:
            record = LoginRecord.query.filter_by(slug=slug).first()
        except SQLAlchemyError as e:
            raise LoginStore._fail(f"finding login {slug}", e) from e
        if record is None:
            raise NotFound()
        return record

    @staticmethod
    def update_counts(slug: str, on_turf: int, off_turf: int) -> LoginRecord:
        """
        Set both counters and refresh updated_at in one UPDATE statement,
        committed as a single transaction. Concurrent writers to the same
        slug are serialized by the database; the last commit wins.

        Raises:
            NotFound: when no login has this slug
        """
        try:
            result = db.session.execute(
                update(LoginRecord)
                .where(LoginRecord.slug == slug)
                .values(on_turf=on_turf, off_turf=off_turf, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.session.rollback()
                raise NotFound()
            db.session.commit()
            # commit() expired the identity map, so this reads committed state
            record = LoginRecord.query.filter_by(slug=slug).first()
        except SQLAlchemyError as e:
            raise LoginStore._fail(f"updating login {slug}", e) from e
        if record is None:
            raise NotFound()
        current_app.logger.info(f"Updated login {slug}: on_turf={on_turf} off_turf={off_turf}")
        return record

    @staticmethod
    def _create_or_skip(login: str, on_turf: int, off_turf: int, organization_id: Optional[int]) -> ImportOutcome:
        existing = LoginRecord.query.filter_by(login=login).first()
        if existing is not None:
            current_app.logger.debug(f"Login already exists: {login}")
            return ImportOutcome(login=login, status="exists", id=existing.id)

        record = LoginRecord(
            login=login,
            slug=generate_slug(login),
            on_turf=on_turf,
            off_turf=off_turf,
            organization_id=organization_id,
        )
        db.session.add(record)
        db.session.flush()
        current_app.logger.info(f"Login created: {login} ({record.slug})")
        return ImportOutcome(login=login, status="created", id=record.id, slug=record.slug)

    @staticmethod
    def create_from_import(
        login: str, on_turf: int = 0, off_turf: int = 0, organization_id: Optional[int] = None, commit: bool = True
    ) -> ImportOutcome:
        """
        Idempotent on the login name: an existing login is reported as
        "exists" and left untouched, otherwise a fresh slug is generated and
        the row inserted. Pass ``commit=False`` to batch inside a caller's
        transaction.
        """
        try:
            outcome = LoginStore._create_or_skip(login, on_turf, off_turf, organization_id)
            if commit:
                db.session.commit()
            return outcome
        except SQLAlchemyError as e:
            raise LoginStore._fail(f"importing login {login}", e) from e

    @staticmethod
    def assign_orphans(organization_id: int) -> int:
        """Attach every login without an organization to ``organization_id``"""
        try:
            result = db.session.execute(
                update(LoginRecord)
                .where(LoginRecord.organization_id.is_(None))
                .values(organization_id=organization_id)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            raise LoginStore._fail("assigning orphan logins", e) from e
        return result.rowcount
