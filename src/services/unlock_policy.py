"""Unlock policy: which levels a user may start or continue."""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ForbiddenError, ForbiddenReason
from src.models.puzzle import Puzzle
from src.services.catalog import Catalog
from src.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)


class UnlockPolicy:
    """Derives unlock status from catalog order and the user's completions.

    Evaluated fresh on every request. With the default ``local`` chain only the
    immediate predecessor is consulted: completing level n-1 unlocks level n
    regardless of the levels before it. The ``global`` chain instead requires
    every earlier active level to be completed.

    When no active level sits at ``level_order - 1`` the gap policy decides:
    ``open`` treats the level as unlocked, ``closed`` keeps it locked.
    """

    def __init__(
        self,
        db: Session,
        gap_policy: str | None = None,
        chain: str | None = None,
    ):
        settings = get_settings()
        self.catalog = Catalog(db)
        self.store = ProgressStore(db)
        self.gap_policy = gap_policy or settings.unlock_gap_policy
        self.chain = chain or settings.unlock_chain

    def completed_orders(self, user_id: int, levels: Iterable[Puzzle]) -> set[int]:
        """Level orders of ``levels`` the user has completed."""
        order_by_id = {level.id: level.level_order for level in levels}
        return {
            order_by_id[record.puzzle_id]
            for record in self.store.list_for_user(user_id)
            if record.is_completed and record.puzzle_id in order_by_id
        }

    def unlock_map(self, levels: list[Puzzle], completed_orders: set[int]) -> dict[int, bool]:
        """Unlock status for every level in one pass, keyed by puzzle id.

        ``levels`` must be the full list of active puzzles.
        """
        active_orders = {level.level_order for level in levels}
        status = {}
        for level in levels:
            if self.chain == "global":
                status[level.id] = all(
                    order in completed_orders
                    for order in active_orders
                    if order < level.level_order
                )
            else:
                status[level.id] = self._locally_unlocked(
                    level.level_order,
                    predecessor_active=(level.level_order - 1) in active_orders,
                    predecessor_completed=(level.level_order - 1) in completed_orders,
                )
        return status

    def is_unlocked(self, user_id: int, puzzle: Puzzle) -> bool:
        """Check a single level against its predecessor(s)."""
        if puzzle.level_order == 1:
            return True

        if self.chain == "global":
            earlier = self.catalog.list_active_before(puzzle)
            return self.completed_orders(user_id, earlier) == {p.level_order for p in earlier}

        previous = self.catalog.previous(puzzle)
        predecessor_completed = False
        if previous is not None:
            record = self.store.get(user_id, previous.id)
            predecessor_completed = record is not None and bool(record.is_completed)

        return self._locally_unlocked(
            puzzle.level_order,
            predecessor_active=previous is not None,
            predecessor_completed=predecessor_completed,
        )

    def ensure_unlocked(self, user_id: int, puzzle: Puzzle) -> None:
        """Raise ``ForbiddenError(level_locked)`` if the level is locked."""
        if not self.is_unlocked(user_id, puzzle):
            logger.info(
                f"User {user_id} denied locked puzzle {puzzle.id} (level {puzzle.level_order})"
            )
            raise ForbiddenError(ForbiddenReason.LEVEL_LOCKED)

    def _locally_unlocked(
        self,
        level_order: int,
        predecessor_active: bool,
        predecessor_completed: bool,
    ) -> bool:
        if level_order == 1:
            return True
        if not predecessor_active:
            return self.gap_policy == "open"
        return predecessor_completed
