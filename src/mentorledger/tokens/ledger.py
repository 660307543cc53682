"""Token ledger: balances, total supply and single-position staking.

Supply accounting:
    sum(balances) + total_staked == total_supply

Only mint (+) and burn (-) move total_supply. Transfer, stake and unstake
redistribute between balances and stakes and never create or destroy
tokens. Every precondition is evaluated before the first mutation, so a
Failure always leaves the state untouched.

Staking is all-or-nothing: a principal holds at most one stake, and
unstake returns the whole of it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict

from mentorledger.authority.gate import AuthorityGate
from mentorledger.models.errors import TokenError
from mentorledger.models.principal import Principal, is_null
from mentorledger.models.results import Failure, LedgerResult, Success

MAX_SUPPLY = 1_000_000_000


def _valid_amount(amount: object) -> bool:
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


@dataclass
class TokenState:
    """Owned state of a token ledger. Absent balance == 0, absent stake == unstaked."""
    total_supply: int = 0
    total_staked: int = 0
    balances: Dict[Principal, int] = field(default_factory=dict)
    stakes: Dict[Principal, int] = field(default_factory=dict)


class TokenLedger:
    """Balances, supply and staking behind a shared authority gate.

    Usage:
        gate = AuthorityGate()
        gate.bind("ST3AUTH")
        ledger = TokenLedger(gate)
        ledger.mint(1000, "ST1MENTOR")
        ledger.transfer("ST1MENTOR", 500, "ST1MENTOR", "ST2MENTEE")
        ledger.stake_tokens("ST1MENTOR", 500)
    """

    def __init__(self, gate: AuthorityGate, state: TokenState | None = None) -> None:
        self._gate = gate
        self._state = state if state is not None else TokenState()

    @property
    def state(self) -> TokenState:
        return self._state

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mint(self, amount: int, recipient: Principal) -> LedgerResult:
        """Credit new tokens to recipient, growing total supply."""
        if not _valid_amount(amount):
            return Failure(TokenError.INVALID_AMOUNT)
        if not self._gate.is_bound:
            return Failure(TokenError.NOT_AUTHORIZED)
        if is_null(recipient):
            return Failure(TokenError.INVALID_RECIPIENT)
        if self._state.total_supply + amount > MAX_SUPPLY:
            return Failure(TokenError.MAX_SUPPLY_EXCEEDED)

        self._state.balances[recipient] = self.balance(recipient) + amount
        self._state.total_supply += amount
        return Success(True)

    def transfer(
        self,
        caller: Principal,
        amount: int,
        sender: Principal,
        recipient: Principal,
    ) -> LedgerResult:
        """Move tokens from sender to recipient. Only the sender may call."""
        if caller != sender:
            return Failure(TokenError.NOT_AUTHORIZED)
        if not _valid_amount(amount):
            return Failure(TokenError.INVALID_AMOUNT)
        if is_null(recipient):
            return Failure(TokenError.INVALID_RECIPIENT)
        if self.balance(sender) < amount:
            return Failure(TokenError.INSUFFICIENT_BALANCE)

        # Debit then credit: a self-transfer nets to zero.
        balances = self._state.balances
        balances[sender] = self.balance(sender) - amount
        balances[recipient] = self.balance(recipient) + amount
        return Success(True)

    def burn(self, caller: Principal, amount: int, owner: Principal) -> LedgerResult:
        """Destroy tokens held by owner. Only the owner may call."""
        if caller != owner:
            return Failure(TokenError.NOT_AUTHORIZED)
        if not _valid_amount(amount):
            return Failure(TokenError.INVALID_AMOUNT)
        if self.balance(owner) < amount:
            return Failure(TokenError.INSUFFICIENT_BALANCE)

        self._state.balances[owner] = self.balance(owner) - amount
        self._state.total_supply -= amount
        return Success(True)

    def stake_tokens(self, caller: Principal, amount: int) -> LedgerResult:
        """Lock amount of the caller's balance as their single stake."""
        if not _valid_amount(amount):
            return Failure(TokenError.INVALID_STAKE_AMOUNT)
        if caller in self._state.stakes:
            return Failure(TokenError.ALREADY_STAKED)
        if self.balance(caller) < amount:
            return Failure(TokenError.INSUFFICIENT_BALANCE)

        self._state.balances[caller] = self.balance(caller) - amount
        self._state.stakes[caller] = amount
        self._state.total_staked += amount
        return Success(True)

    def unstake_tokens(self, caller: Principal) -> LedgerResult:
        """Return the caller's entire stake to their balance."""
        staked = self.staked_balance(caller)
        if staked <= 0:
            return Failure(TokenError.NO_STAKE_FOUND)

        self._state.balances[caller] = self.balance(caller) + staked
        del self._state.stakes[caller]
        self._state.total_staked -= staked
        return Success(True)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def total_supply(self) -> int:
        return self._state.total_supply

    def total_staked(self) -> int:
        return self._state.total_staked

    def balance(self, principal: Principal) -> int:
        return self._state.balances.get(principal, 0)

    def staked_balance(self, principal: Principal) -> int:
        return self._state.stakes.get(principal, 0)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def snapshot(self) -> TokenState:
        return copy.deepcopy(self._state)

    def restore(self, snapshot: TokenState) -> None:
        self._state = copy.deepcopy(snapshot)

    def reset(self) -> None:
        self._state = TokenState()
