"""Errors raised by the progression services.

Routers let these propagate; the handlers registered in ``src.main`` map them
to HTTP responses.
"""

from enum import Enum


class ForbiddenReason(str, Enum):
    """Why a user may not play a level."""

    LEVEL_LOCKED = "level_locked"
    DAILY_LIMIT = "daily_limit"


FORBIDDEN_MESSAGES = {
    ForbiddenReason.LEVEL_LOCKED: "Complete the previous level to unlock this one",
    ForbiddenReason.DAILY_LIMIT: (
        "Free users can only start 1 new puzzle per day. Upgrade to Pro for unlimited puzzles!"
    ),
}


class ProgressionError(Exception):
    """Base class for progression errors. Terminal for the request."""


class NotFoundError(ProgressionError):
    """A puzzle or progress record is absent where one is required."""

    def __init__(self, message: str = "Puzzle not found"):
        super().__init__(message)
        self.message = message


class ForbiddenError(ProgressionError):
    """Access to a level was denied by policy."""

    def __init__(self, reason: ForbiddenReason):
        self.reason = ForbiddenReason(reason)
        self.message = FORBIDDEN_MESSAGES[self.reason]
        super().__init__(f"{self.reason.value}: {self.message}")


class StoreError(ProgressionError):
    """The persistence layer failed. Never retried inside the core."""
