# turfboard/models/enums.py
"""
Enums for membership models.
"""

from enum import Enum as PyEnum

# Role hierarchy: ADMIN > VENDOR > VIEWER
ROLE_HIERARCHY = {
    "viewer": 1,
    "vendor": 2,
    "admin": 3,
}


class MembershipRole(PyEnum):
    """Role a user holds inside one organization, totally ordered by level"""

    VIEWER = "viewer"
    VENDOR = "vendor"
    ADMIN = "admin"

    @property
    def level(self):
        return ROLE_HIERARCHY[self.value]

    @classmethod
    def parse(cls, value):
        """Resolve a role from an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Role is required")
        normalized = str(value).strip().lower()
        for role in cls:
            if role.value == normalized:
                return role
        raise ValueError(f"Unknown role: {value!r}")

    def __ge__(self, other):
        if not isinstance(other, MembershipRole):
            return NotImplemented
        return self.level >= other.level

    def __gt__(self, other):
        if not isinstance(other, MembershipRole):
            return NotImplemented
        return self.level > other.level

    def __le__(self, other):
        if not isinstance(other, MembershipRole):
            return NotImplemented
        return self.level <= other.level

    def __lt__(self, other):
        if not isinstance(other, MembershipRole):
            return NotImplemented
        return self.level < other.level
