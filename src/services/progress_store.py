"""Progress store: one solving-state record per (user, puzzle)."""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from sqlalchemy import func, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from src.database import store_errors
from src.models.puzzle import Puzzle
from src.models.user_progress import UserProgress
from src.services.completion import distinct_pieces, evaluate_completion

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


class ProgressStore:
    """Persistence for UserProgress records.

    Uniqueness of (user_id, puzzle_id) is enforced by the database constraint;
    ``upsert`` writes through a single conflict-aware insert so concurrent
    first saves for the same pair cannot produce two records.
    """

    def __init__(self, db: Session, clock: Clock = utc_now):
        self.db = db
        self.clock = clock

    def get(self, user_id: int, puzzle_id: int) -> UserProgress | None:
        """Get the record for a user and puzzle, if one exists."""
        with store_errors(self.db, "fetch progress"):
            return (
                self.db.query(UserProgress)
                .filter(UserProgress.user_id == user_id, UserProgress.puzzle_id == puzzle_id)
                .first()
            )

    def list_for_user(self, user_id: int) -> list[UserProgress]:
        """All records belonging to a user."""
        with store_errors(self.db, "list progress"):
            return (
                self.db.query(UserProgress)
                .filter(UserProgress.user_id == user_id)
                .order_by(UserProgress.id)
                .all()
            )

    def count_created_since(self, user_id: int, instant: datetime) -> int:
        """Count the user's records first saved at or after ``instant``."""
        with store_errors(self.db, "count progress"):
            return (
                self.db.query(func.count(UserProgress.id))
                .filter(UserProgress.user_id == user_id, UserProgress.created_at >= instant)
                .scalar()
            )

    def upsert(self, user_id: int, puzzle: Puzzle, placed_piece_ids: Iterable[str]) -> UserProgress:
        """Create or replace the record's placed pieces and recompute completion.

        A new record gets ``created_at = now``; an existing one keeps it.
        Concurrent saves are last-write-wins on the piece list, while an
        existing completion stamp always survives the conflict update.
        """
        pieces = distinct_pieces(placed_piece_ids)
        now = self.clock()
        existing = self.get(user_id, puzzle.id)
        was_completed = existing is not None and bool(existing.is_completed)
        result = evaluate_completion(
            pieces,
            puzzle.total_pieces,
            previous_completed_at=existing.completed_at if existing else None,
            now=now,
        )

        table = UserProgress.__table__
        insert = self._dialect_insert()
        stmt = insert(table).values(
            user_id=user_id,
            puzzle_id=puzzle.id,
            placed_piece_ids=pieces,
            is_completed=result.is_completed,
            completed_at=result.completed_at,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id, table.c.puzzle_id],
            set_={
                "placed_piece_ids": stmt.excluded.placed_piece_ids,
                "is_completed": or_(table.c.is_completed, stmt.excluded.is_completed),
                "completed_at": func.coalesce(table.c.completed_at, stmt.excluded.completed_at),
                "updated_at": stmt.excluded.updated_at,
            },
        )

        with store_errors(self.db, "save progress"):
            self.db.execute(stmt)
            self.db.commit()
            progress = (
                self.db.query(UserProgress)
                .populate_existing()
                .filter(UserProgress.user_id == user_id, UserProgress.puzzle_id == puzzle.id)
                .one()
            )

        if result.is_completed and not was_completed:
            logger.info(f"User {user_id} completed puzzle {puzzle.id} (level {puzzle.level_order})")
        return progress

    def reset(self, user_id: int, puzzle_id: int) -> bool:
        """Delete the record entirely. Returns whether one existed."""
        with store_errors(self.db, "reset progress"):
            deleted = (
                self.db.query(UserProgress)
                .filter(UserProgress.user_id == user_id, UserProgress.puzzle_id == puzzle_id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
        return deleted > 0

    def delete_for_puzzle(self, puzzle_id: int) -> int:
        """Delete every user's record for a puzzle. Caller commits."""
        with store_errors(self.db, "delete puzzle progress"):
            return (
                self.db.query(UserProgress)
                .filter(UserProgress.puzzle_id == puzzle_id)
                .delete(synchronize_session="fetch")
            )

    def _dialect_insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Atomic progress upsert is not supported on {dialect}")
