"""User registry: participants with unique usernames and principals.

Uniqueness rules:
- A username maps to exactly one user id, enforced on register and on
  rename. Deactivated users keep their username reserved.
- A principal registers at most once (checked at registration only).

User ids are issued sequentially from next_user_id and never reused.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mentorledger.authority.gate import AuthorityGate
from mentorledger.models.errors import UserError
from mentorledger.models.principal import Principal
from mentorledger.models.results import Failure, LedgerResult, Success
from mentorledger.models.user import (
    DEFAULT_MAX_USERS,
    MAX_AVAILABILITY_HOURS,
    MAX_EXPERTISE,
    MAX_GOALS,
    MAX_SKILLS,
    MAX_USERNAME_LENGTH,
    ProfileUpdate,
    Role,
    UserRecord,
)


@dataclass
class RegistryState:
    """Owned state of a user registry."""
    next_user_id: int = 0
    users: Dict[int, UserRecord] = field(default_factory=dict)
    users_by_username: Dict[str, int] = field(default_factory=dict)
    user_by_principal: Dict[Principal, int] = field(default_factory=dict)


def _valid_username(username: Any) -> bool:
    return isinstance(username, str) and 0 < len(username) <= MAX_USERNAME_LENGTH


def _valid_availability(hours: Any) -> bool:
    return isinstance(hours, int) and 0 <= hours <= MAX_AVAILABILITY_HOURS


class UserRegistry:
    """Directory of registered mentors and mentees.

    Usage:
        registry = UserRegistry(gate)
        result = registry.register_user(
            "ST1MENTOR", "mentor1", "mentor", ["JS"], 40, ["Teach"], ["Coding"],
        )
        registry.update_user_profile(result.value, ProfileUpdate(goals=["Ship"]))
        registry.deactivate_user(result.value)
    """

    def __init__(
        self,
        gate: AuthorityGate,
        max_users: int = DEFAULT_MAX_USERS,
        state: Optional[RegistryState] = None,
    ) -> None:
        if max_users <= 0:
            raise ValueError("max_users must be positive")
        self._gate = gate
        self._max_users = max_users
        self._state = state if state is not None else RegistryState()

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def max_users(self) -> int:
        return self._max_users

    # ------------------------------------------------------------------
    # Mutations
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
    ) -> LedgerResult:
        """Register the caller. Returns Success(user_id)."""
        state = self._state
        if state.next_user_id >= self._max_users:
            return Failure(UserError.MAX_USERS_EXCEEDED)
        if not _valid_username(username):
            return Failure(UserError.INVALID_USERNAME)
        parsed_role = Role.parse(role)
        if parsed_role is None:
            return Failure(UserError.INVALID_ROLE)
        if len(expertise) > MAX_EXPERTISE:
            return Failure(UserError.INVALID_EXPERTISE)
        if not _valid_availability(availability_hours):
            return Failure(UserError.INVALID_AVAILABILITY)
        if len(goals) > MAX_GOALS:
            return Failure(UserError.INVALID_GOALS)
        if len(skills) > MAX_SKILLS:
            return Failure(UserError.INVALID_SKILLS)
        if not self._gate.is_bound:
            return Failure(UserError.NOT_AUTHORIZED)
        if username in state.users_by_username:
            return Failure(UserError.USER_ALREADY_EXISTS)
        if caller in state.user_by_principal:
            return Failure(UserError.USER_ALREADY_EXISTS)

        user_id = state.next_user_id
        state.users[user_id] = UserRecord(
            user_id=user_id,
            username=username,
            role=parsed_role,
            principal=caller,
            expertise=list(expertise),
            availability_hours=availability_hours,
            goals=list(goals),
            skills=list(skills),
            registered_at=block_height,
            last_updated=block_height,
            active=True,
        )
        state.users_by_username[username] = user_id
        state.user_by_principal[caller] = user_id
        state.next_user_id += 1
        return Success(user_id)

    def update_user_profile(
        self,
        user_id: int,
        update: ProfileUpdate,
        block_height: int = 0,
    ) -> LedgerResult:
        """Selectively overwrite username, expertise, availability and goals.

        Fields left UNSET in the update are unchanged. Renaming to the
        user's own current username is allowed.
        """
        user = self._state.users.get(user_id)
        if user is None:
            return Failure(UserError.USER_NOT_FOUND)

        fields = update.supplied()
        if "username" in fields:
            new_username = fields["username"]
            if not _valid_username(new_username):
                return Failure(UserError.INVALID_PROFILE_UPDATE)
            owner = self._state.users_by_username.get(new_username)
            if owner is not None and owner != user_id:
                return Failure(UserError.USER_ALREADY_EXISTS)
        if "expertise" in fields and len(fields["expertise"]) > MAX_EXPERTISE:
            return Failure(UserError.INVALID_PROFILE_UPDATE)
        if "availability_hours" in fields and not _valid_availability(
            fields["availability_hours"]
        ):
            return Failure(UserError.INVALID_PROFILE_UPDATE)
        if "goals" in fields and len(fields["goals"]) > MAX_GOALS:
            return Failure(UserError.INVALID_PROFILE_UPDATE)

        if "username" in fields:
            del self._state.users_by_username[user.username]
            self._state.users_by_username[fields["username"]] = user_id
            user.username = fields["username"]
        if "expertise" in fields:
            user.expertise = list(fields["expertise"])
        if "availability_hours" in fields:
            user.availability_hours = fields["availability_hours"]
        if "goals" in fields:
            user.goals = list(fields["goals"])
        user.last_updated = block_height
        return Success(True)

    def deactivate_user(self, user_id: int, block_height: int = 0) -> LedgerResult:
        """Soft-delete a user. Idempotent; indices are kept."""
        user = self._state.users.get(user_id)
        if user is None:
            return Failure(UserError.USER_NOT_FOUND)
        user.active = False
        user.last_updated = block_height
        return Success(True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        return self._state.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        user_id = self._state.users_by_username.get(username)
        return self._state.users.get(user_id) if user_id is not None else None

    def get_user_by_principal(self, principal: Principal) -> Optional[UserRecord]:
        user_id = self._state.user_by_principal.get(principal)
        return self._state.users.get(user_id) if user_id is not None else None

    def is_user_registered(self, username: str) -> bool:
        return username in self._state.users_by_username

    def is_principal_registered(self, principal: Principal) -> bool:
        return principal in self._state.user_by_principal

    def user_count(self) -> int:
        return self._state.next_user_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def snapshot(self) -> RegistryState:
        return copy.deepcopy(self._state)

    def restore(self, snapshot: RegistryState) -> None:
        self._state = copy.deepcopy(snapshot)

    def reset(self) -> None:
        self._state = RegistryState()
