# turfboard/models/login.py

import re
import secrets
from datetime import timezone

from sqlalchemy import CheckConstraint, Index

from .base import BaseModel, db

SLUG_SUFFIX_BYTES = 4


def generate_slug(login):
    """
    Build a URL-safe slug from a login name plus a random disambiguator,
    e.g. ``"Ana Souza"`` -> ``"ana-souza-9f8c01ab"``.
    """
    normalized = re.sub(r"[^a-z0-9]+", "-", (login or "").lower())
    return f"{normalized}-{secrets.token_hex(SLUG_SUFFIX_BYTES)}"


def isoformat_utc(value):
    """Serialize a timestamp as ISO-8601, treating naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class LoginRecord(BaseModel):
    """A login with its on-turf and off-turf counters"""

    __tablename__ = "logins"

    id = db.Column(db.Integer, primary_key=True)
    login = db.Column(db.String(255), nullable=False, unique=True, index=True)
    slug = db.Column(db.String(300), nullable=False, unique=True, index=True)
    on_turf = db.Column(db.Integer, nullable=False, default=0)
    off_turf = db.Column(db.Integer, nullable=False, default=0)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=True)

    # Relationships
    organization = db.relationship("Organization", back_populates="logins")

    __table_args__ = (
        CheckConstraint("on_turf >= 0", name="ck_logins_on_turf_non_negative"),
        CheckConstraint("off_turf >= 0", name="ck_logins_off_turf_non_negative"),
        Index("idx_logins_org", "organization_id"),
    )

    def __repr__(self):
        return f"<LoginRecord {self.login} ({self.slug})>"

    def to_dict(self, include_organization=False):
        """Serialize to the camelCase shape the dashboard consumes."""
        data = {
            "id": self.id,
            "login": self.login,
            "slug": self.slug,
            "onTurf": self.on_turf,
            "offTurf": self.off_turf,
            "updatedAt": isoformat_utc(self.updated_at),
        }
        if include_organization:
            data["organizationId"] = self.organization_id
            data["organizationName"] = self.organization.name if self.organization else None
        return data
