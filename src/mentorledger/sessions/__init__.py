"""Session ledger: booked mentorship sessions, status and ratings."""

from mentorledger.sessions.ledger import SessionLedger, SessionState

__all__ = ["SessionLedger", "SessionState"]
