"""Mentorship ledger service: unified facade over the three sub-ledgers.

This is the primary interface for programmatic access to the ledger.
It wires one AuthorityGate into:
- TokenLedger (mint, transfer, burn, stake, unstake)
- UserRegistry (register, update profile, deactivate)
- SessionLedger (book, update status, rate)

Every mutating call takes the authenticated caller principal and the
current logical clock (block height) explicitly. All operations produce
a ServiceResult. Each successful mutation appends one event to the
audit log; if a durable append fails, the affected sub-ledger is rolled
back and the call fails closed rather than mutating without an audit
record. Failed operations change nothing and are not logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from mentorledger.authority.gate import AuthorityGate
from mentorledger.config import LedgerConfig
from mentorledger.models.errors import describe
from mentorledger.models.principal import Principal
from mentorledger.models.results import LedgerResult
from mentorledger.models.user import UNSET, ProfileUpdate
from mentorledger.persistence.event_log import EventKind, EventLog, EventRecord
from mentorledger.registry.users import RegistryState, UserRegistry
from mentorledger.sessions.ledger import SessionLedger, SessionState
from mentorledger.tokens.ledger import TokenLedger, TokenState


@dataclass(frozen=True)
class ServiceResult:
    """Result of a service operation.

    code is the integer error code of a rejected operation, None on
    success or when the failure was not a ledger rejection.
    """
    success: bool
    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    code: Optional[int] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of every sub-ledger, for restore in tests and tooling."""
    authority: Optional[Principal]
    tokens: TokenState
    users: RegistryState
    sessions: SessionState


class _Restorable(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


class MentorshipService:
    """Ledger facade.

    Usage:
        service = MentorshipService()
        service.bind_authority("ST0DEPLOYER", "ST3AUTH")

        service.mint("ST3AUTH", 1000, "ST1MENTOR")
        service.transfer("ST1MENTOR", 500, "ST1MENTOR", "ST2MENTEE")

        result = service.register_user(
            "ST1MENTOR", "mentor1", "mentor", ["JS"], 40, ["Teach"], ["Coding"],
        )
        result = service.book_session(
            "ST1MENTOR", "ST1MENTOR", "ST2MENTEE", 100, 60, "Career Advice",
            b"a" * 32,
        )

    Audit trail (optional file storage):
        service = MentorshipService(event_log=EventLog(Path("events.jsonl")))
    """

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._config = config or LedgerConfig()
        if event_log is None:
            event_log = EventLog(self._config.event_log_path)
        self._event_log = event_log

        self._gate = AuthorityGate()
        self._tokens = TokenLedger(self._gate)
        self._users = UserRegistry(self._gate, max_users=self._config.max_users)

        participant_check: Optional[Callable[[Principal], bool]] = None
        if self._config.require_registered_participants:
            participant_check = self._users.is_principal_registered
        self._sessions = SessionLedger(
            self._gate,
            max_sessions=self._config.max_sessions,
            participant_check=participant_check,
        )

        # Continue numbering after any events loaded from storage
        self._event_counter = event_log.count

    # ------------------------------------------------------------------
    # Sub-ledger access (read-only use)
    # ------------------------------------------------------------------

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def gate(self) -> AuthorityGate:
        return self._gate

    @property
    def tokens(self) -> TokenLedger:
        return self._tokens

    @property
    def users(self) -> UserRegistry:
        return self._users

    @property
    def sessions(self) -> SessionLedger:
        return self._sessions

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # ------------------------------------------------------------------
    # Authority
    # ------------------------------------------------------------------

    def bind_authority(
        self, caller: Principal, candidate: Principal, block_height: int = 0,
    ) -> ServiceResult:
        """Bind the controlling authority. Succeeds once per ledger."""
        return self._apply(
            self._gate,
            lambda: self._gate.bind(candidate),
            EventKind.AUTHORITY_BOUND,
            caller,
            block_height,
            lambda _: {"authority": candidate},
        )

    # ------------------------------------------------------------------
    # Token
    # ------------------------------------------------------------------

    def mint(
        self, caller: Principal, amount: int, recipient: Principal, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._tokens,
            lambda: self._tokens.mint(amount, recipient),
            EventKind.TOKENS_MINTED,
            caller,
            block_height,
            lambda _: {
                "amount": amount,
                "recipient": recipient,
                "total_supply": self._tokens.total_supply(),
            },
        )

    def transfer(
        self,
        caller: Principal,
        amount: int,
        sender: Principal,
        recipient: Principal,
        block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._tokens,
            lambda: self._tokens.transfer(caller, amount, sender, recipient),
            EventKind.TOKENS_TRANSFERRED,
            caller,
            block_height,
            lambda _: {"amount": amount, "sender": sender, "recipient": recipient},
        )

    def burn(
        self, caller: Principal, amount: int, owner: Principal, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._tokens,
            lambda: self._tokens.burn(caller, amount, owner),
            EventKind.TOKENS_BURNED,
            caller,
            block_height,
            lambda _: {
                "amount": amount,
                "owner": owner,
                "total_supply": self._tokens.total_supply(),
            },
        )

    def stake_tokens(
        self, caller: Principal, amount: int, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._tokens,
            lambda: self._tokens.stake_tokens(caller, amount),
            EventKind.TOKENS_STAKED,
            caller,
            block_height,
            lambda _: {"amount": amount, "total_staked": self._tokens.total_staked()},
        )

    def unstake_tokens(self, caller: Principal, block_height: int = 0) -> ServiceResult:
        staked = self._tokens.staked_balance(caller)
        return self._apply(
            self._tokens,
            lambda: self._tokens.unstake_tokens(caller),
            EventKind.TOKENS_UNSTAKED,
            caller,
            block_height,
            lambda _: {"amount": staked, "total_staked": self._tokens.total_staked()},
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register_user(
        self,
        caller: Principal,
        username: str,
        role: str,
        expertise: list[str],
        availability_hours: int,
        goals: list[str],
        skills: list[str],
        block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._users,
            lambda: self._users.register_user(
                caller, username, role, expertise, availability_hours,
                goals, skills, block_height=block_height,
            ),
            EventKind.USER_REGISTERED,
            caller,
            block_height,
            lambda user_id: {"user_id": user_id, "username": username, "role": role},
        )

    def update_user_profile(
        self,
        caller: Principal,
        user_id: int,
        username: Any = UNSET,
        expertise: Any = UNSET,
        availability_hours: Any = UNSET,
        goals: Any = UNSET,
        block_height: int = 0,
    ) -> ServiceResult:
        """Overwrite only the supplied fields. Omitted fields stay as they are."""
        update = ProfileUpdate(
            username=username,
            expertise=expertise,
            availability_hours=availability_hours,
            goals=goals,
        )
        return self._apply(
            self._users,
            lambda: self._users.update_user_profile(user_id, update, block_height=block_height),
            EventKind.USER_PROFILE_UPDATED,
            caller,
            block_height,
            lambda _: {"user_id": user_id, "fields": sorted(update.supplied())},
        )

    def deactivate_user(
        self, caller: Principal, user_id: int, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._users,
            lambda: self._users.deactivate_user(user_id, block_height),
            EventKind.USER_DEACTIVATED,
            caller,
            block_height,
            lambda _: {"user_id": user_id},
        )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def book_session(
        self,
        caller: Principal,
        mentor: Principal,
        mentee: Principal,
        start_time: int,
        duration_minutes: int,
        topic: str,
        interaction_hash: bytes,
        block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._sessions,
            lambda: self._sessions.book_session(
                mentor, mentee, start_time, duration_minutes, topic,
                interaction_hash, block_height=block_height,
            ),
            EventKind.SESSION_BOOKED,
            caller,
            block_height,
            lambda session_id: {
                "session_id": session_id,
                "mentor": mentor,
                "mentee": mentee,
                "start_time": start_time,
            },
        )

    def update_session_status(
        self, caller: Principal, session_id: int, new_status: str, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._sessions,
            lambda: self._sessions.update_session_status(
                caller, session_id, new_status, block_height=block_height,
            ),
            EventKind.SESSION_STATUS_CHANGED,
            caller,
            block_height,
            lambda _: {
                "session_id": session_id,
                "status": self._sessions.get_session(session_id).status.value,
            },
        )

    def rate_session(
        self, caller: Principal, session_id: int, rating: int, block_height: int = 0,
    ) -> ServiceResult:
        return self._apply(
            self._sessions,
            lambda: self._sessions.rate_session(
                caller, session_id, rating, block_height=block_height,
            ),
            EventKind.SESSION_RATED,
            caller,
            block_height,
            lambda _: {"session_id": session_id, "rating": rating},
        )

    # ------------------------------------------------------------------
    # State lifecycle
    # ------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            authority=self._gate.snapshot(),
            tokens=self._tokens.snapshot(),
            users=self._users.snapshot(),
            sessions=self._sessions.snapshot(),
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Replace all ledger state. The audit log is not rewound."""
        self._gate.restore(snapshot.authority)
        self._tokens.restore(snapshot.tokens)
        self._users.restore(snapshot.users)
        self._sessions.restore(snapshot.sessions)

    def status(self) -> dict[str, Any]:
        """Return a ledger-wide summary."""
        return {
            "authority": self._gate.authority,
            "token": {
                "total_supply": self._tokens.total_supply(),
                "total_staked": self._tokens.total_staked(),
                "holders": sum(1 for b in self._tokens.state.balances.values() if b > 0),
            },
            "users": {
                "total": self._users.user_count(),
                "active": sum(1 for u in self._users.state.users.values() if u.active),
            },
            "sessions": {
                "total": self._sessions.session_count(),
            },
            "events": self._event_log.count,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply(
        self,
        target: _Restorable,
        operation: Callable[[], LedgerResult],
        kind: EventKind,
        caller: Principal,
        block_height: int,
        payload: Callable[[Any], dict[str, Any]],
    ) -> ServiceResult:
        """Run a ledger operation and record its audit event.

        A durable log can fail on write, so the target is snapshotted first
        and restored if the event cannot be appended.
        """
        durable = self._event_log.storage_path is not None
        pre_state = target.snapshot() if durable else None

        try:
            result = operation()
        except (TypeError, ValueError) as e:
            return ServiceResult(success=False, errors=[str(e)])

        if not result.ok:
            return ServiceResult(
                success=False,
                errors=[describe(result.code)],
                code=int(result.code),
            )

        data = payload(result.value)
        err = self._record_event(kind, caller, block_height, data)
        if err:
            if pre_state is not None:
                target.restore(pre_state)
            return ServiceResult(success=False, errors=[err])
        return ServiceResult(success=True, data={"value": result.value, **data})

    def _next_event_id(self) -> str:
        self._event_counter += 1
        return f"EVT-{self._event_counter:08d}"

    def _record_event(
        self,
        kind: EventKind,
        caller: Principal,
        block_height: int,
        payload: dict[str, Any],
    ) -> Optional[str]:
        """Append an audit event. Returns an error string or None."""
        event = EventRecord.create(
            event_id=self._next_event_id(),
            event_kind=kind,
            actor_id=caller,
            payload=payload,
            block_height=block_height,
        )
        try:
            self._event_log.append(event)
        except OSError as e:
            return f"Audit-trail failure: {e}"
        return None
