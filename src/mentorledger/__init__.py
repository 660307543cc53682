"""Mentorship ledger: token, user registry and session sub-ledgers behind one authority gate."""

from mentorledger.authority.gate import AuthorityGate
from mentorledger.config import LedgerConfig
from mentorledger.registry.users import UserRegistry
from mentorledger.service import MentorshipService, ServiceResult
from mentorledger.sessions.ledger import SessionLedger
from mentorledger.tokens.ledger import MAX_SUPPLY, TokenLedger

__all__ = [
    "AuthorityGate",
    "LedgerConfig",
    "MAX_SUPPLY",
    "MentorshipService",
    "ServiceResult",
    "SessionLedger",
    "TokenLedger",
    "UserRegistry",
]
