"""Fungible mentorship token: balances, supply and staking."""

from mentorledger.tokens.ledger import MAX_SUPPLY, TokenLedger, TokenState

__all__ = ["MAX_SUPPLY", "TokenLedger", "TokenState"]
