# turfboard/models/organization.py

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseModel, db


class Organization(BaseModel):
    """Model for the companies that own login records"""

    __tablename__ = "organizations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, unique=True, index=True)
    company_name = db.Column(db.String(200), nullable=True)

    # Relationships
    memberships = db.relationship("Membership", back_populates="organization", cascade="all, delete-orphan")
    logins = db.relationship("LoginRecord", back_populates="organization")

    def __repr__(self):
        return f"<Organization {self.name}>"

    @staticmethod
    def find_by_id(org_id):
        """Find organization by ID with error handling"""
        try:
            return db.session.get(Organization, org_id)
        except SQLAlchemyError as e:
            current_app.logger.error(f"Database error finding organization by id {org_id}: {str(e)}")
            return None

    @staticmethod
    def find_by_name(name):
        """Find organization by name with error handling"""
        try:
            return Organization.query.filter_by(name=name).first()
        except SQLAlchemyError as e:
            current_app.logger.error(f"Database error finding organization by name {name}: {str(e)}")
            return None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "companyName": self.company_name,
        }
