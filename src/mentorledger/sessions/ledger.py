"""Session ledger: one outstanding session per ordered mentor/mentee pair.

Booking is caller-agnostic: once the authority is bound, any caller may
book on behalf of two principals. After booking, only the mentor or the
mentee of a session may change its status or rate it, and each rates
only their own side.

Status transitions are unrestricted (any of the four states to any
other). Ratings are accepted only while the status is COMPLETED.

Participant registration is not checked unless the ledger is built with
a participant_check callable; the service wires that to the user
registry when configured to.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from mentorledger.authority.gate import AuthorityGate
from mentorledger.models.errors import SessionError
from mentorledger.models.principal import Principal, is_null
from mentorledger.models.results import Failure, LedgerResult, Success
from mentorledger.models.session import (
    DEFAULT_MAX_SESSIONS,
    INTERACTION_HASH_LENGTH,
    MAX_DURATION_MINUTES,
    MAX_RATING,
    MAX_TOPIC_LENGTH,
    MIN_DURATION_MINUTES,
    MIN_RATING,
    NO_SESSION,
    ParticipantPair,
    SessionRecord,
    SessionStatus,
)


@dataclass
class SessionState:
    """Owned state of a session ledger."""
    next_session_id: int = 0
    sessions: Dict[int, SessionRecord] = field(default_factory=dict)
    session_by_pair: Dict[ParticipantPair, int] = field(default_factory=dict)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _valid_id(session_id: Any) -> bool:
    return _is_int(session_id) and session_id >= 0


class SessionLedger:
    """Booked sessions keyed by id and by ordered participant pair.

    Usage:
        ledger = SessionLedger(gate)
        result = ledger.book_session(
            "ST1MENTOR", "ST2MENTEE", 100, 60, "Career Advice", b"a" * 32,
            block_height=0,
        )
        ledger.update_session_status("ST1MENTOR", result.value, "completed")
        ledger.rate_session("ST2MENTEE", result.value, 5)
    """

    def __init__(
        self,
        gate: AuthorityGate,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        participant_check: Optional[Callable[[Principal], bool]] = None,
        state: Optional[SessionState] = None,
    ) -> None:
        if max_sessions <= 0:
            raise ValueError("max_sessions must be positive")
        self._gate = gate
        self._max_sessions = max_sessions
        self._participant_check = participant_check
        self._state = state if state is not None else SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def book_session(
        self,
        mentor: Principal,
        mentee: Principal,
        start_time: int,
        duration_minutes: int,
        topic: str,
        interaction_hash: bytes,
        block_height: int = 0,
    ) -> LedgerResult:
        """Book a PENDING session. Returns Success(session_id)."""
        state = self._state
        if state.next_session_id >= self._max_sessions:
            return Failure(SessionError.MAX_SESSIONS_EXCEEDED)
        if is_null(mentor) or is_null(mentee):
            return Failure(SessionError.INVALID_PARTICIPANT)
        if not _is_int(start_time) or start_time < block_height:
            return Failure(SessionError.INVALID_TIMESTAMP)
        if not _is_int(duration_minutes) or not (
            MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES
        ):
            return Failure(SessionError.INVALID_DURATION)
        if not topic or len(topic) > MAX_TOPIC_LENGTH:
            return Failure(SessionError.INVALID_TOPIC)
        if not self._gate.is_bound:
            return Failure(SessionError.NOT_AUTHORIZED)
        if self._participant_check is not None and not (
            self._participant_check(mentor) and self._participant_check(mentee)
        ):
            return Failure(SessionError.USER_NOT_REGISTERED)
        pair = ParticipantPair(mentor, mentee)
        if pair in state.session_by_pair:
            return Failure(SessionError.SESSION_ALREADY_EXISTS)
        if not isinstance(interaction_hash, (bytes, bytearray)) or (
            len(interaction_hash) != INTERACTION_HASH_LENGTH
        ):
            raise ValueError(f"interaction_hash must be {INTERACTION_HASH_LENGTH} bytes")

        session_id = state.next_session_id
        state.sessions[session_id] = SessionRecord(
            session_id=session_id,
            mentor=mentor,
            mentee=mentee,
            start_time=start_time,
            duration_minutes=duration_minutes,
            topic=topic,
            interaction_hash=bytes(interaction_hash),
            status=SessionStatus.PENDING,
            mentor_rating=0,
            mentee_rating=0,
            last_updated=block_height,
        )
        state.session_by_pair[pair] = session_id
        state.next_session_id += 1
        return Success(session_id)

    def update_session_status(
        self,
        caller: Principal,
        session_id: int,
        new_status: str,
        block_height: int = 0,
    ) -> LedgerResult:
        """Set a session's status. Either participant, any state to any state."""
        if not _valid_id(session_id):
            return Failure(SessionError.INVALID_SESSION_ID)
        session = self._state.sessions.get(session_id)
        if session is None:
            return Failure(SessionError.SESSION_NOT_FOUND)
        if not session.is_participant(caller):
            return Failure(SessionError.NOT_AUTHORIZED)
        status = SessionStatus.parse(new_status)
        if status is None:
            return Failure(SessionError.INVALID_STATUS)

        session.status = status
        session.last_updated = block_height
        return Success(True)

    def rate_session(
        self,
        caller: Principal,
        session_id: int,
        rating: int,
        block_height: int = 0,
    ) -> LedgerResult:
        """Rate a completed session from the caller's side."""
        if not _valid_id(session_id):
            return Failure(SessionError.INVALID_SESSION_ID)
        session = self._state.sessions.get(session_id)
        if session is None:
            return Failure(SessionError.SESSION_NOT_FOUND)
        if session.status != SessionStatus.COMPLETED:
            return Failure(SessionError.SESSION_NOT_ACTIVE)
        if not session.is_participant(caller):
            return Failure(SessionError.NOT_AUTHORIZED)
        if not _is_int(rating) or not MIN_RATING <= rating <= MAX_RATING:
            return Failure(SessionError.INVALID_RATING)

        if caller == session.mentor:
            session.mentor_rating = rating
        else:
            session.mentee_rating = rating
        session.last_updated = block_height
        return Success(True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_session(self, session_id: int) -> Optional[SessionRecord]:
        """Return the session, or None for an absent or invalid id."""
        if not _valid_id(session_id):
            return None
        return self._state.sessions.get(session_id)

    def get_session_by_participants(self, mentor: Principal, mentee: Principal) -> int:
        """Return the session id for the ordered pair, or NO_SESSION (-1)."""
        return self._state.session_by_pair.get(ParticipantPair(mentor, mentee), NO_SESSION)

    def session_count(self) -> int:
        return self._state.next_session_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionState:
        return copy.deepcopy(self._state)

    def restore(self, snapshot: SessionState) -> None:
        self._state = copy.deepcopy(snapshot)

    def reset(self) -> None:
        self._state = SessionState()
