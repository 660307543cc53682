"""User directory: registration, profile updates, soft deactivation."""

from mentorledger.registry.users import RegistryState, UserRegistry

__all__ = ["RegistryState", "UserRegistry"]
