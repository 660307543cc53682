"""Principals: opaque authenticated identities.

A principal is authenticated upstream; the ledger treats it as an opaque
string. NULL_PRINCIPAL is the reserved burn address: it can never hold a
balance, be a session participant, or be bound as authority.
"""

from __future__ import annotations

Principal = str

NULL_PRINCIPAL: Principal = "SP000000000000000000002Q6VF78"


def is_null(principal: Principal) -> bool:
    return principal == NULL_PRINCIPAL
