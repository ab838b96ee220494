"""Progression service: level listing, play access and progress saves."""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from src.models.puzzle import Puzzle
from src.models.user import User
from src.models.user_progress import UserProgress
from src.services.catalog import Catalog
from src.services.progress_store import Clock, ProgressStore, utc_now
from src.services.quota import QuotaGovernor
from src.services.unlock_policy import UnlockPolicy


@dataclass
class LevelStatus:
    """A level as seen by one user."""

    puzzle: Puzzle
    is_unlocked: bool
    is_completed: bool
    progress: UserProgress | None


class ProgressionService:
    """Service wiring the catalog, unlock policy, quota governor and store.

    Access to a level resolves through the unlock policy first, then, for
    levels the user has no record for yet, through the quota governor.
    """

    def __init__(
        self,
        db: Session,
        clock: Clock = utc_now,
        unlock_policy: UnlockPolicy | None = None,
        quota: QuotaGovernor | None = None,
    ):
        self.db = db
        self.catalog = Catalog(db)
        self.store = ProgressStore(db, clock=clock)
        self.unlock_policy = unlock_policy or UnlockPolicy(db)
        self.quota = quota or QuotaGovernor(db, clock=clock)

    def list_levels(self, user: User) -> list[LevelStatus]:
        """Active levels in order with the user's unlock and completion status."""
        levels = self.catalog.list_active()
        records = {record.puzzle_id: record for record in self.store.list_for_user(user.id)}
        completed_orders = {
            level.level_order
            for level in levels
            if level.id in records and records[level.id].is_completed
        }
        unlocked = self.unlock_policy.unlock_map(levels, completed_orders)

        return [
            LevelStatus(
                puzzle=level,
                is_unlocked=unlocked[level.id],
                is_completed=level.level_order in completed_orders,
                progress=records.get(level.id),
            )
            for level in levels
        ]

    def open_level(self, user: User, puzzle_id: int) -> tuple[Puzzle, UserProgress | None]:
        """Fetch a level for play, enforcing unlock and daily quota."""
        puzzle = self._playable_puzzle(user, puzzle_id)
        progress = self.store.get(user.id, puzzle.id)
        self.quota.check(user.id, user.tier, has_existing_progress=progress is not None)
        return puzzle, progress

    def save_progress(
        self,
        user: User,
        puzzle_id: int,
        placed_piece_ids: Iterable[str],
    ) -> UserProgress:
        """Save the placed pieces for a level, creating the record on first save."""
        puzzle = self._playable_puzzle(user, puzzle_id)
        existing = self.store.get(user.id, puzzle.id)
        self.quota.check(user.id, user.tier, has_existing_progress=existing is not None)
        return self.store.upsert(user.id, puzzle, placed_piece_ids)

    def get_progress(self, user: User, puzzle_id: int) -> UserProgress | None:
        """The user's record for a level, if any."""
        return self.store.get(user.id, puzzle_id)

    def list_progress(self, user: User) -> list[UserProgress]:
        """All of the user's records."""
        return self.store.list_for_user(user.id)

    def reset_progress(self, user: User, puzzle_id: int) -> bool:
        """Remove the user's record for a level. Resetting nothing is a no-op."""
        return self.store.reset(user.id, puzzle_id)

    def _playable_puzzle(self, user: User, puzzle_id: int) -> Puzzle:
        puzzle = self.catalog.get(puzzle_id)
        self.unlock_policy.ensure_unlocked(user.id, puzzle)
        return puzzle
