"""Tests for the user registry: uniqueness, validation order, profile updates."""

import pytest

from mentorledger.authority.gate import AuthorityGate
from mentorledger.models.errors import UserError
from mentorledger.models.user import UNSET, ProfileUpdate, Role
from mentorledger.registry.users import UserRegistry

MENTOR = "ST1MENTOR"
MENTEE = "ST2MENTEE"


def _registry(bound: bool = True, max_users: int = 5000) -> UserRegistry:
    gate = AuthorityGate()
    if bound:
        gate.bind("ST3AUTH")
    return UserRegistry(gate, max_users=max_users)


def _register(
    registry: UserRegistry,
    caller: str = MENTOR,
    username: str = "mentor1",
    role: str = "mentor",
    expertise: list[str] | None = None,
    availability: int = 40,
    goals: list[str] | None = None,
    skills: list[str] | None = None,
    block_height: int = 0,
):
    return registry.register_user(
        caller,
        username,
        role,
        ["JS"] if expertise is None else expertise,
        availability,
        ["Teach"] if goals is None else goals,
        ["Coding"] if skills is None else skills,
        block_height=block_height,
    )


class TestRegistration:
    def test_register_success(self) -> None:
        registry = _registry()
        result = registry.register_user(
            MENTOR, "mentor1", "mentor", ["JS", "Clarity"], 40,
            ["Teach Web3"], ["Coding", "Mentoring"], block_height=7,
        )
        assert result.ok
        assert result.value == 0
        user = registry.get_user(0)
        assert user is not None
        assert user.username == "mentor1"
        assert user.role == Role.MENTOR
        assert user.expertise == ["JS", "Clarity"]
        assert user.principal == MENTOR
        assert user.registered_at == 7
        assert user.active is True

    def test_ids_are_sequential(self) -> None:
        registry = _registry()
        assert _register(registry, MENTOR, "a").value == 0
        assert _register(registry, MENTEE, "b", role="mentee").value == 1
        assert registry.user_count() == 2

    def test_duplicate_username_rejected(self) -> None:
        registry = _registry()
        _register(registry)
        result = _register(registry, MENTEE, "mentor1", role="mentee")
        assert result.code == UserError.USER_ALREADY_EXISTS
        assert registry.user_count() == 1

    def test_duplicate_principal_rejected(self) -> None:
        registry = _registry()
        _register(registry)
        result = _register(registry, MENTOR, "another_name", role="mentee")
        assert result.code == UserError.USER_ALREADY_EXISTS
        assert not registry.is_user_registered("another_name")

    def test_failed_registration_does_not_consume_id(self) -> None:
        registry = _registry()
        _register(registry, username="")
        assert _register(registry).value == 0

    def test_without_authority(self) -> None:
        result = _register(_registry(bound=False))
        assert result.code == UserError.NOT_AUTHORIZED

    def test_invalid_role(self) -> None:
        result = _register(_registry(), username="invalid", role="admin")
        assert result.code == UserError.INVALID_ROLE

    @pytest.mark.parametrize("username", ["", "x" * 51])
    def test_invalid_username(self, username: str) -> None:
        assert _register(_registry(), username=username).code == UserError.INVALID_USERNAME

    def test_username_at_limit(self) -> None:
        assert _register(_registry(), username="x" * 50).ok

    def test_too_much_expertise(self) -> None:
        result = _register(_registry(), expertise=["e"] * 11)
        assert result.code == UserError.INVALID_EXPERTISE

    @pytest.mark.parametrize("hours", [169, -1])
    def test_invalid_availability(self, hours: int) -> None:
        assert _register(_registry(), availability=hours).code == UserError.INVALID_AVAILABILITY

    def test_availability_bounds_inclusive(self) -> None:
        registry = _registry()
        assert _register(registry, MENTOR, "a", availability=0).ok
        assert _register(registry, MENTEE, "b", availability=168).ok

    def test_too_many_goals(self) -> None:
        assert _register(_registry(), goals=["g"] * 6).code == UserError.INVALID_GOALS

    def test_too_many_skills(self) -> None:
        assert _register(_registry(), skills=["s"] * 11).code == UserError.INVALID_SKILLS

    def test_capacity(self) -> None:
        registry = _registry(max_users=2)
        _register(registry, "P1", "a")
        _register(registry, "P2", "b")
        result = _register(registry, "P3", "c")
        assert result.code == UserError.MAX_USERS_EXCEEDED

    def test_max_users_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            UserRegistry(AuthorityGate(), max_users=0)


class TestRegistrationOrdering:
    """The first violated check decides the error code."""

    def test_capacity_before_username(self) -> None:
        registry = _registry(bound=False, max_users=1)
        registry.state.next_user_id = 1
        assert _register(registry, username="").code == UserError.MAX_USERS_EXCEEDED

    def test_username_before_role(self) -> None:
        result = _register(_registry(), username="", role="admin")
        assert result.code == UserError.INVALID_USERNAME

    def test_role_before_expertise(self) -> None:
        result = _register(_registry(), role="admin", expertise=["e"] * 11)
        assert result.code == UserError.INVALID_ROLE

    def test_expertise_before_availability(self) -> None:
        result = _register(_registry(), expertise=["e"] * 11, availability=500)
        assert result.code == UserError.INVALID_EXPERTISE

    def test_availability_before_goals(self) -> None:
        result = _register(_registry(), availability=500, goals=["g"] * 6)
        assert result.code == UserError.INVALID_AVAILABILITY

    def test_goals_before_skills(self) -> None:
        result = _register(_registry(), goals=["g"] * 6, skills=["s"] * 11)
        assert result.code == UserError.INVALID_GOALS

    def test_validation_before_authority(self) -> None:
        result = _register(_registry(bound=False), skills=["s"] * 11)
        assert result.code == UserError.INVALID_SKILLS

    def test_authority_before_uniqueness(self) -> None:
        registry = _registry(bound=False)
        registry.state.users_by_username["mentor1"] = 99
        assert _register(registry).code == UserError.NOT_AUTHORIZED


class TestProfileUpdate:
    def _registered(self) -> UserRegistry:
        registry = _registry()
        _register(registry)
        return registry

    def test_update_success(self) -> None:
        registry = self._registered()
        result = registry.update_user_profile(
            0,
            ProfileUpdate(username="mentor_updated", expertise=["JS", "Rust"], availability_hours=50),
            block_height=12,
        )
        assert result.ok
        assert result.value is True
        user = registry.get_user(0)
        assert user.username == "mentor_updated"
        assert user.expertise == ["JS", "Rust"]
        assert user.availability_hours == 50
        assert user.goals == ["Teach"]
        assert user.last_updated == 12

    def test_rename_moves_index(self) -> None:
        registry = self._registered()
        registry.update_user_profile(0, ProfileUpdate(username="renamed"))
        assert not registry.is_user_registered("mentor1")
        assert registry.get_user_by_username("renamed").user_id == 0

    def test_rename_to_own_username(self) -> None:
        registry = self._registered()
        assert registry.update_user_profile(0, ProfileUpdate(username="mentor1")).ok
        assert registry.get_user_by_username("mentor1").user_id == 0

    def test_rename_collision_rejected(self) -> None:
        registry = self._registered()
        _register(registry, MENTEE, "mentee1", role="mentee")
        result = registry.update_user_profile(1, ProfileUpdate(username="mentor1"))
        assert result.code == UserError.USER_ALREADY_EXISTS
        assert registry.get_user(1).username == "mentee1"

    def test_unknown_user(self) -> None:
        registry = self._registered()
        result = registry.update_user_profile(42, ProfileUpdate(goals=["x"]))
        assert result.code == UserError.USER_NOT_FOUND

    @pytest.mark.parametrize(
        "update",
        [
            ProfileUpdate(username="x" * 51),
            ProfileUpdate(username=""),
            ProfileUpdate(expertise=["e"] * 11),
            ProfileUpdate(availability_hours=169),
            ProfileUpdate(goals=["g"] * 6),
        ],
    )
    def test_out_of_bounds_field(self, update: ProfileUpdate) -> None:
        registry = self._registered()
        result = registry.update_user_profile(0, update)
        assert result.code == UserError.INVALID_PROFILE_UPDATE

    def test_rejected_update_is_not_partially_applied(self) -> None:
        registry = self._registered()
        result = registry.update_user_profile(
            0, ProfileUpdate(username="renamed", goals=["g"] * 6)
        )
        assert result.code == UserError.INVALID_PROFILE_UPDATE
        assert registry.get_user(0).username == "mentor1"
        assert registry.is_user_registered("mentor1")
        assert not registry.is_user_registered("renamed")

    def test_zero_availability_is_applied(self) -> None:
        registry = self._registered()
        assert registry.update_user_profile(0, ProfileUpdate(availability_hours=0)).ok
        assert registry.get_user(0).availability_hours == 0

    def test_empty_update_changes_nothing_but_timestamp(self) -> None:
        registry = self._registered()
        assert registry.update_user_profile(0, ProfileUpdate(), block_height=3).ok
        user = registry.get_user(0)
        assert user.username == "mentor1"
        assert user.availability_hours == 40
        assert user.last_updated == 3

    def test_empty_list_is_a_real_value(self) -> None:
        registry = self._registered()
        registry.update_user_profile(0, ProfileUpdate(goals=[]))
        assert registry.get_user(0).goals == []

    def test_role_and_skills_are_immutable(self) -> None:
        registry = self._registered()
        registry.update_user_profile(0, ProfileUpdate(username="renamed", goals=["New"]))
        user = registry.get_user(0)
        assert user.role == Role.MENTOR
        assert user.skills == ["Coding"]

    def test_supplied_fields(self) -> None:
        update = ProfileUpdate(availability_hours=0)
        assert update.supplied() == {"availability_hours": 0}
        assert ProfileUpdate().supplied() == {}
        assert ProfileUpdate().username is UNSET


class TestDeactivation:
    def test_deactivate(self) -> None:
        registry = _registry()
        _register(registry)
        result = registry.deactivate_user(0, block_height=12)
        assert result.ok
        assert registry.get_user(0).active is False
        assert registry.get_user(0).last_updated == 12

    def test_deactivate_is_idempotent(self) -> None:
        registry = _registry()
        _register(registry)
        registry.deactivate_user(0)
        assert registry.deactivate_user(0).ok
        assert registry.get_user(0).active is False

    def test_deactivate_unknown_user(self) -> None:
        assert _registry().deactivate_user(0).code == UserError.USER_NOT_FOUND

    def test_username_stays_reserved(self) -> None:
        registry = _registry()
        _register(registry)
        registry.deactivate_user(0)
        result = _register(registry, MENTEE, "mentor1", role="mentee")
        assert result.code == UserError.USER_ALREADY_EXISTS

    def test_principal_stays_reserved(self) -> None:
        registry = _registry()
        _register(registry)
        registry.deactivate_user(0)
        assert _register(registry, MENTOR, "fresh").code == UserError.USER_ALREADY_EXISTS
        assert registry.get_user_by_principal(MENTOR).user_id == 0


class TestLookups:
    def test_lookup_by_username_and_principal(self) -> None:
        registry = _registry()
        _register(registry)
        assert registry.get_user_by_username("mentor1").user_id == 0
        assert registry.get_user_by_principal(MENTOR).username == "mentor1"
        assert registry.is_user_registered("mentor1")
        assert registry.is_principal_registered(MENTOR)

    def test_missing_lookups_return_none(self) -> None:
        registry = _registry()
        assert registry.get_user(0) is None
        assert registry.get_user_by_username("ghost") is None
        assert registry.get_user_by_principal("ghost") is None
        assert not registry.is_user_registered("ghost")

    def test_snapshot_restore(self) -> None:
        registry = _registry()
        snap = registry.snapshot()
        _register(registry)
        registry.restore(snap)
        assert registry.user_count() == 0
        assert not registry.is_user_registered("mentor1")
