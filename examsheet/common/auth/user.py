"""
Authenticated Identity

The evaluation services consume an already authenticated identity: the user
id, a role claim and the school the user belongs to.
"""

import enum
from dataclasses import dataclass
from typing import Optional


class UserRole(enum.Enum):
    """Roles recognised by the evaluation access rules."""

    INSTRUCTOR = "Instructor"
    STUDENT = "Student"
    SCHOOL_ADMIN = "SchoolAdmin"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['UserRole']:
        """Map a role claim to a role, or None for roles the service does not know."""
        if value is None:
            return None
        for role in cls:
            if role.value.lower() == str(value).lower():
                return role
        return None


@dataclass(frozen=True)
class AuthenticatedUser:
    """
    Identity of the caller for the current request.

    Attributes:
        user_id: Subject of the bearer token
        role: Recognised role, or None when the claim names any other role
        school_id: Driving school the caller belongs to, if any
    """
    user_id: str
    role: Optional[UserRole] = None
    school_id: Optional[int] = None

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR

