"""Ledger configuration.

Values come from constructor arguments or from the environment, with an
optional .env file loaded through python-dotenv:

    MENTORLEDGER_MAX_USERS            user capacity (default 5000)
    MENTORLEDGER_MAX_SESSIONS         session capacity (default 10000)
    MENTORLEDGER_REQUIRE_REGISTERED   "true" to require registered participants
    MENTORLEDGER_EVENT_LOG            path of a JSONL audit log

Token supply and field limits are fixed and not configurable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from mentorledger.models.session import DEFAULT_MAX_SESSIONS
from mentorledger.models.user import DEFAULT_MAX_USERS

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class LedgerConfig:
    max_users: int = DEFAULT_MAX_USERS
    max_sessions: int = DEFAULT_MAX_SESSIONS
    require_registered_participants: bool = False
    event_log_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.max_users <= 0:
            raise ValueError("max_users must be positive")
        if self.max_sessions <= 0:
            raise ValueError("max_sessions must be positive")

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> LedgerConfig:
        """Build a config from the process environment.

        If env_file is given it is loaded first; variables already set in
        the environment take precedence over the file.
        """
        if env_file is not None:
            load_dotenv(env_file)
        log_path = os.getenv("MENTORLEDGER_EVENT_LOG")
        return cls(
            max_users=_env_int("MENTORLEDGER_MAX_USERS", DEFAULT_MAX_USERS),
            max_sessions=_env_int("MENTORLEDGER_MAX_SESSIONS", DEFAULT_MAX_SESSIONS),
            require_registered_participants=_env_bool(
                "MENTORLEDGER_REQUIRE_REGISTERED", False
            ),
            event_log_path=Path(log_path) if log_path else None,
        )
