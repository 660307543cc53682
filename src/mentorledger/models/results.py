"""Tagged operation results.

Every ledger operation returns exactly one of these. A Failure carries an
integer error code (see models.errors);
callers match on the integer, so the enums compare equal to raw ints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    """Operation applied. ``value`` is the operation's return value."""
    value: Any = True

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Operation rejected. State is unchanged."""
    code: int

    @property
    def ok(self) -> bool:
        return False


LedgerResult = Union[Success, Failure]
