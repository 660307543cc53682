"""Authority gate: one-time binding of the controlling principal."""

from mentorledger.authority.gate import AuthorityGate

__all__ = ["AuthorityGate"]
