"""Authority gate: the single permanent binding that unlocks issuance.

The gate starts unbound. bind() succeeds exactly once; there is no unbind.
Mint, user registration and session booking all refuse to proceed while
the gate is unbound. The gate is shared by every sub-ledger of a service.
"""

from __future__ import annotations

from typing import Optional

from mentorledger.models.errors import GateError
from mentorledger.models.principal import Principal, is_null
from mentorledger.models.results import Failure, LedgerResult, Success


class AuthorityGate:
    """Holds the bound authority principal.

    Usage:
        gate = AuthorityGate()
        gate.bind("ST3AUTH")      # Success(True)
        gate.bind("ST4OTHER")     # Failure(GateError.ALREADY_BOUND)
        gate.is_bound             # True
    """

    def __init__(self) -> None:
        self._authority: Optional[Principal] = None

    @property
    def authority(self) -> Optional[Principal]:
        return self._authority

    @property
    def is_bound(self) -> bool:
        return self._authority is not None

    def bind(self, candidate: Principal) -> LedgerResult:
        """Bind the authority. Permanent for the lifetime of the gate."""
        if self._authority is not None:
            return Failure(GateError.ALREADY_BOUND)
        if is_null(candidate):
            return Failure(GateError.INVALID_PRINCIPAL)
        self._authority = candidate
        return Success(True)

    def snapshot(self) -> Optional[Principal]:
        return self._authority

    def restore(self, authority: Optional[Principal]) -> None:
        if authority is not None and is_null(authority):
            raise ValueError("Cannot restore the null principal as authority")
        self._authority = authority
