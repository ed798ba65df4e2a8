# turfboard/models/__init__.py
"""
Database models package
"""

from .base import BaseModel, db, utcnow
from .enums import ROLE_HIERARCHY, MembershipRole
from .login import LoginRecord, generate_slug, isoformat_utc
from .membership import Membership
from .organization import Organization

__all__ = [
    "db",
    "BaseModel",
    "utcnow",
    "LoginRecord",
    "Organization",
    "Membership",
    "MembershipRole",
    "ROLE_HIERARCHY",
    "generate_slug",
    "isoformat_utc",
]
