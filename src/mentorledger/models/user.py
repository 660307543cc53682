"""User directory models.

Users are created on registration and never physically removed:
deactivation is a soft delete that keeps the username and principal
reserved.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

MAX_USERNAME_LENGTH = 50
MAX_EXPERTISE = 10
MAX_AVAILABILITY_HOURS = 168
MAX_GOALS = 5
MAX_SKILLS = 10
DEFAULT_MAX_USERS = 5000


class Role(str, enum.Enum):
    MENTOR = "mentor"
    MENTEE = "mentee"

    @classmethod
    def parse(cls, value: Any) -> Optional[Role]:
        """Return the matching Role, or None if value names no role."""
        try:
            return cls(value)
        except ValueError:
            return None


class _Unset:
    """Marker for a profile field that was not supplied."""

    _instance: Optional[_Unset] = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class UserRecord:
    """A registered participant."""
    user_id: int
    username: str
    role: Role
    principal: str
    expertise: list[str] = field(default_factory=list)
    availability_hours: int = 0
    goals: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    registered_at: int = 0
    last_updated: int = 0
    active: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "principal": self.principal,
            "expertise": list(self.expertise),
            "availability_hours": self.availability_hours,
            "goals": list(self.goals),
            "skills": list(self.skills),
            "registered_at": self.registered_at,
            "last_updated": self.last_updated,
            "active": self.active,
        }


@dataclass(frozen=True)
class ProfileUpdate:
    """Selective overwrite of a user profile.

    Each field is either UNSET (leave unchanged) or a new value. A supplied
    availability of 0 is a real value, distinct from UNSET.
    Role and skills cannot be changed after registration.
    """
    username: Any = UNSET
    expertise: Any = UNSET
    availability_hours: Any = UNSET
    goals: Any = UNSET

    def supplied(self) -> dict[str, Any]:
        """Return only the fields that were supplied."""
        values = {
            "username": self.username,
            "expertise": self.expertise,
            "availability_hours": self.availability_hours,
            "goals": self.goals,
        }
        return {k: v for k, v in values.items() if v is not UNSET}
