"""
Account domain models.

These describe who is making a request and what they may see. They don't
know about Supabase or HTTP; the infrastructure layer translates provider
payloads into these types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class Role(Enum):
    """
    Dashboard audience.

    Stored profiles historically used both "teacher" and "tutor" for
    course authors; both map to TEACHER.
    """
    STUDENT = "student"
    TEACHER = "teacher"


DEFAULT_ROLE = Role.STUDENT

_TEACHER_ALIASES = frozenset({"teacher", "tutor"})


def role_from_value(value: Optional[str]) -> Role:
    """Map a stored role string to a Role, defaulting to STUDENT."""
    if value and value.strip().lower() in _TEACHER_ALIASES:
        return Role.TEACHER
    return DEFAULT_ROLE


@dataclass(frozen=True)
class AuthUser:
    """The authenticated identity behind a request."""
    id: str
    email: Optional[str] = None


@dataclass
class Profile:
    """Public profile row for a user."""
    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Role = DEFAULT_ROLE

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Profile":
        return cls(
            id=str(row["id"]),
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            role=role_from_value(row.get("role")),
        )
