# turfboard/models/membership.py

from flask import current_app
from sqlalchemy import Enum
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import BaseModel, db, utcnow
from .enums import MembershipRole


class Membership(BaseModel):
    """Grant of a role to a user email inside one organization"""

    __tablename__ = "user_organizations"

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(255), nullable=False, index=True)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=False)
    role = db.Column(
        Enum(MembershipRole, name="membership_role_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=MembershipRole.VIEWER,
    )

    # Relationships
    organization = db.relationship("Organization", back_populates="memberships")

    # Unique constraint - a user holds one role per organization
    __table_args__ = (db.UniqueConstraint("user_email", "organization_id", name="_user_email_org_uc"),)

    def __repr__(self):
        return f"<Membership user={self.user_email} org={self.organization_id} role={self.role.value}>"

    @staticmethod
    def upsert(user_email, organization_id, role):
        """
        Grant ``role`` to ``user_email`` in the organization, replacing any
        existing role and bumping updated_at.

        Raises:
            SQLAlchemyError: after rolling back, when the write fails
        """
        role = MembershipRole.parse(role)
        for attempt in range(2):
            try:
                membership = Membership.query.filter_by(
                    user_email=user_email, organization_id=organization_id
                ).first()
                if membership:
                    membership.role = role
                    membership.updated_at = utcnow()
                else:
                    membership = Membership(user_email=user_email, organization_id=organization_id, role=role)
                    db.session.add(membership)
                db.session.commit()
                return membership
            except IntegrityError:
                # A concurrent insert won the unique constraint; retry as an update
                db.session.rollback()
                if attempt:
                    raise
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(
                    f"Database error upserting membership {user_email} in org {organization_id}: {str(e)}"
                )
                raise
