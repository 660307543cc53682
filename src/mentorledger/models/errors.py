"""Error code registry for every sub-ledger.

Codes are a compatibility surface: external callers match on the integer
values, so neither the numbers nor their triggering conditions may change.

Ranges:
    SessionError  100-112
    UserError     200-210
    TokenError    300-307
    GateError     400-401
"""

from __future__ import annotations

import enum
from typing import Dict


class SessionError(enum.IntEnum):
    NOT_AUTHORIZED = 100
    INVALID_SESSION_ID = 101
    INVALID_TIMESTAMP = 102
    INVALID_DURATION = 103
    INVALID_TOPIC = 104
    USER_NOT_REGISTERED = 105
    SESSION_NOT_FOUND = 106
    SESSION_ALREADY_EXISTS = 107
    INVALID_STATUS = 108
    MAX_SESSIONS_EXCEEDED = 109
    INVALID_RATING = 110
    SESSION_NOT_ACTIVE = 111
    INVALID_PARTICIPANT = 112


class UserError(enum.IntEnum):
    NOT_AUTHORIZED = 200
    INVALID_USERNAME = 201
    INVALID_EXPERTISE = 202
    INVALID_AVAILABILITY = 203
    INVALID_ROLE = 204
    USER_ALREADY_EXISTS = 205
    USER_NOT_FOUND = 206
    MAX_USERS_EXCEEDED = 207
    INVALID_GOALS = 208
    INVALID_SKILLS = 209
    INVALID_PROFILE_UPDATE = 210


class TokenError(enum.IntEnum):
    NOT_AUTHORIZED = 300
    INVALID_AMOUNT = 301
    INSUFFICIENT_BALANCE = 302
    INVALID_RECIPIENT = 303
    MAX_SUPPLY_EXCEEDED = 304
    INVALID_STAKE_AMOUNT = 305
    ALREADY_STAKED = 306
    NO_STAKE_FOUND = 307


class GateError(enum.IntEnum):
    ALREADY_BOUND = 400
    INVALID_PRINCIPAL = 401


_MESSAGES: Dict[int, str] = {
    SessionError.NOT_AUTHORIZED: "Caller is not authorized for this session",
    SessionError.INVALID_SESSION_ID: "Session ID must be a non-negative integer",
    SessionError.INVALID_TIMESTAMP: "Session start time is in the past",
    SessionError.INVALID_DURATION: "Duration must be between 1 and 1440 minutes",
    SessionError.INVALID_TOPIC: "Topic must be between 1 and 100 characters",
    SessionError.USER_NOT_REGISTERED: "Participant is not a registered user",
    SessionError.SESSION_NOT_FOUND: "Session not found",
    SessionError.SESSION_ALREADY_EXISTS: "A session already exists for this mentor/mentee pair",
    SessionError.INVALID_STATUS: "Unknown session status",
    SessionError.MAX_SESSIONS_EXCEEDED: "Session capacity reached",
    SessionError.INVALID_RATING: "Rating must be between 0 and 5",
    SessionError.SESSION_NOT_ACTIVE: "Session must be completed before rating",
    SessionError.INVALID_PARTICIPANT: "The null principal cannot be a participant",
    UserError.NOT_AUTHORIZED: "Authority not bound",
    UserError.INVALID_USERNAME: "Username must be between 1 and 50 characters",
    UserError.INVALID_EXPERTISE: "At most 10 expertise entries are allowed",
    UserError.INVALID_AVAILABILITY: "Availability must be between 0 and 168 hours",
    UserError.INVALID_ROLE: "Role must be 'mentor' or 'mentee'",
    UserError.USER_ALREADY_EXISTS: "Username or principal already registered",
    UserError.USER_NOT_FOUND: "User not found",
    UserError.MAX_USERS_EXCEEDED: "User capacity reached",
    UserError.INVALID_GOALS: "At most 5 goals are allowed",
    UserError.INVALID_SKILLS: "At most 10 skills are allowed",
    UserError.INVALID_PROFILE_UPDATE: "Profile update contains an out-of-bounds field",
    TokenError.NOT_AUTHORIZED: "Caller is not authorized",
    TokenError.INVALID_AMOUNT: "Amount must be positive",
    TokenError.INSUFFICIENT_BALANCE: "Insufficient balance",
    TokenError.INVALID_RECIPIENT: "The null principal cannot receive tokens",
    TokenError.MAX_SUPPLY_EXCEEDED: "Mint would exceed the maximum supply",
    TokenError.INVALID_STAKE_AMOUNT: "Stake amount must be positive",
    TokenError.ALREADY_STAKED: "Caller already has an active stake",
    TokenError.NO_STAKE_FOUND: "Caller has no active stake",
    GateError.ALREADY_BOUND: "Authority is already bound",
    GateError.INVALID_PRINCIPAL: "The null principal cannot be bound as authority",
}

ALL_CODES = (SessionError, UserError, TokenError, GateError)


def describe(code: int) -> str:
    """Return the human-readable message for an error code."""
    return _MESSAGES.get(code, f"Unknown error code: {code}")
