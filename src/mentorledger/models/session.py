"""Mentorship session models.

Session status is a complete graph over four states: either participant
may move a session from any status to any other. Ratings are only
accepted once the status is COMPLETED.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 1440
MAX_TOPIC_LENGTH = 100
INTERACTION_HASH_LENGTH = 32
MIN_RATING = 0
MAX_RATING = 5
DEFAULT_MAX_SESSIONS = 10000
NO_SESSION = -1


class SessionStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any) -> Optional[SessionStatus]:
        try:
            return cls(value)
        except ValueError:
            return None


class ParticipantPair(NamedTuple):
    """Ordered (mentor, mentee) key. (A, B) and (B, A) are distinct."""
    mentor: str
    mentee: str


@dataclass
class SessionRecord:
    """A booked mentorship session."""
    session_id: int
    mentor: str
    mentee: str
    start_time: int
    duration_minutes: int
    topic: str
    interaction_hash: bytes
    status: SessionStatus = SessionStatus.PENDING
    mentor_rating: int = 0
    mentee_rating: int = 0
    last_updated: int = 0

    @property
    def pair(self) -> ParticipantPair:
        return ParticipantPair(self.mentor, self.mentee)

    def is_participant(self, principal: str) -> bool:
        return principal in (self.mentor, self.mentee)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "mentor": self.mentor,
            "mentee": self.mentee,
            "start_time": self.start_time,
            "duration_minutes": self.duration_minutes,
            "topic": self.topic,
            "interaction_hash": self.interaction_hash.hex(),
            "status": self.status.value,
            "mentor_rating": self.mentor_rating,
            "mentee_rating": self.mentee_rating,
            "last_updated": self.last_updated,
        }
