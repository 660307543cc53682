"""Executable ledger invariants.

Each check returns a list of violation messages; an empty list means the
ledger is healthy. These hold after every operation, successful or not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mentorledger.models.session import MAX_RATING, MIN_RATING, SessionStatus
from mentorledger.registry.users import UserRegistry
from mentorledger.sessions.ledger import SessionLedger
from mentorledger.tokens.ledger import MAX_SUPPLY, TokenLedger

if TYPE_CHECKING:
    from mentorledger.service import MentorshipService


def check_token(ledger: TokenLedger) -> list[str]:
    state = ledger.state
    errors: list[str] = []

    if not 0 <= state.total_supply <= MAX_SUPPLY:
        errors.append(f"total_supply {state.total_supply} outside [0, {MAX_SUPPLY}]")

    negative = sorted(p for p, b in state.balances.items() if b < 0)
    if negative:
        errors.append(f"negative balances: {', '.join(negative)}")

    bad_stakes = sorted(p for p, s in state.stakes.items() if s <= 0)
    if bad_stakes:
        errors.append(f"non-positive stakes: {', '.join(bad_stakes)}")

    staked = sum(state.stakes.values())
    if staked != state.total_staked:
        errors.append(f"total_staked {state.total_staked} != sum of stakes {staked}")

    held = sum(state.balances.values()) + state.total_staked
    if held != state.total_supply:
        errors.append(
            f"balances + staked ({held}) != total_supply ({state.total_supply})"
        )
    return errors


def check_registry(registry: UserRegistry) -> list[str]:
    state = registry.state
    errors: list[str] = []

    if len(state.users) > registry.max_users:
        errors.append(f"{len(state.users)} users exceeds capacity {registry.max_users}")

    for user_id, user in state.users.items():
        if user_id != user.user_id:
            errors.append(f"user {user_id} stored under mismatched id {user.user_id}")
        if user_id >= state.next_user_id:
            errors.append(f"user id {user_id} not below next_user_id {state.next_user_id}")
        if state.users_by_username.get(user.username) != user_id:
            errors.append(f"username {user.username!r} not indexed to user {user_id}")

    for username, user_id in state.users_by_username.items():
        user = state.users.get(user_id)
        if user is None or user.username != username:
            errors.append(f"stale username index entry {username!r} -> {user_id}")

    for principal, user_id in state.user_by_principal.items():
        if user_id not in state.users:
            errors.append(f"principal {principal} indexed to missing user {user_id}")
    return errors


def check_sessions(ledger: SessionLedger) -> list[str]:
    state = ledger.state
    errors: list[str] = []

    if len(state.sessions) > ledger.max_sessions:
        errors.append(
            f"{len(state.sessions)} sessions exceeds capacity {ledger.max_sessions}"
        )

    for session_id, session in state.sessions.items():
        if session_id >= state.next_session_id:
            errors.append(
                f"session id {session_id} not below next_session_id {state.next_session_id}"
            )
        if state.session_by_pair.get(session.pair) != session_id:
            errors.append(f"session {session_id} not indexed by its participant pair")
        if not isinstance(session.status, SessionStatus):
            errors.append(f"session {session_id} has unknown status {session.status!r}")
        for side, rating in (
            ("mentor", session.mentor_rating),
            ("mentee", session.mentee_rating),
        ):
            if not MIN_RATING <= rating <= MAX_RATING:
                errors.append(f"session {session_id} {side} rating {rating} out of range")

    for pair, session_id in state.session_by_pair.items():
        session = state.sessions.get(session_id)
        if session is None or session.pair != pair:
            errors.append(f"stale pair index entry {pair} -> {session_id}")
    return errors


def check_all(service: MentorshipService) -> list[str]:
    return (
        check_token(service.tokens)
        + check_registry(service.users)
        + check_sessions(service.sessions)
    )
