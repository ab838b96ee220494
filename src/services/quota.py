"""Quota governor for the free-tier daily new-level limit."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ForbiddenError, ForbiddenReason
from src.models.enums import SubscriptionTier
from src.services.progress_store import Clock, ProgressStore, utc_now

logger = logging.getLogger(__name__)


def start_of_utc_day(now: datetime) -> datetime:
    """Truncate an instant to 00:00:00 UTC of its UTC calendar date."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)


class QuotaGovernor:
    """Limits free users to a number of newly started levels per UTC day.

    Only levels without an existing progress record count as new; any record,
    even one with no placed pieces, is a continuation and is never limited.

    The count and the later insert are separate store calls, so concurrent
    "start new level" requests on the same day can exceed the limit slightly.
    """

    def __init__(self, db: Session, clock: Clock = utc_now, daily_limit: int | None = None):
        self.store = ProgressStore(db, clock=clock)
        self.clock = clock
        self.daily_limit = daily_limit or get_settings().free_daily_level_limit

    def levels_started_today(self, user_id: int) -> int:
        """Count records the user first saved since midnight UTC."""
        return self.store.count_created_since(user_id, start_of_utc_day(self.clock()))

    def check(self, user_id: int, tier: SubscriptionTier, has_existing_progress: bool) -> None:
        """Raise ``ForbiddenError(daily_limit)`` if starting a new level is not allowed."""
        if not SubscriptionTier(tier).has_daily_limit() or has_existing_progress:
            return

        started = self.levels_started_today(user_id)
        if started >= self.daily_limit:
            logger.info(
                f"User {user_id} hit daily limit ({started}/{self.daily_limit} started today)"
            )
            raise ForbiddenError(ForbiddenReason.DAILY_LIMIT)
