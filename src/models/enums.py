"""Enums for model fields."""

from enum import Enum


class SubscriptionTier(str, Enum):
    """Subscription tiers recorded on a user."""

    FREE = "free"
    PRO = "pro"

    def has_daily_limit(self) -> bool:
        """Check if this tier is subject to the daily new-level quota."""
        return self == SubscriptionTier.FREE


class UserRole(str, Enum):
    """Account roles."""

    USER = "user"
    ADMIN = "admin"
