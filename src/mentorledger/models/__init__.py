"""Ledger data models."""

from mentorledger.models.errors import (
    GateError,
    SessionError,
    TokenError,
    UserError,
    describe,
)
from mentorledger.models.principal import NULL_PRINCIPAL, Principal
from mentorledger.models.results import Failure, LedgerResult, Success
from mentorledger.models.session import SessionRecord, SessionStatus
from mentorledger.models.user import UNSET, ProfileUpdate, Role, UserRecord

__all__ = [
    "Failure",
    "GateError",
    "LedgerResult",
    "NULL_PRINCIPAL",
    "Principal",
    "ProfileUpdate",
    "Role",
    "SessionError",
    "SessionRecord",
    "SessionStatus",
    "Success",
    "TokenError",
    "UNSET",
    "UserError",
    "UserRecord",
    "describe",
]
