"""Catalog service: read access to the ordered set of puzzle levels."""

from sqlalchemy.orm import Session

from src.database import store_errors
from src.exceptions import NotFoundError
from src.models.puzzle import Puzzle


class Catalog:
    """Read-mostly view over the puzzle levels."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> list[Puzzle]:
        """Active puzzles, ascending by level order."""
        with store_errors(self.db, "list puzzles"):
            return (
                self.db.query(Puzzle)
                .filter(Puzzle.is_active.is_(True))
                .order_by(Puzzle.level_order)
                .all()
            )

    def list_all(self) -> list[Puzzle]:
        """Every puzzle including retired ones (admin view)."""
        with store_errors(self.db, "list puzzles"):
            return self.db.query(Puzzle).order_by(Puzzle.level_order).all()

    def get(self, puzzle_id: int, include_inactive: bool = False) -> Puzzle:
        """Get a puzzle by id.

        Player-facing callers never see inactive puzzles; admin views pass
        ``include_inactive=True``.
        """
        with store_errors(self.db, "fetch puzzle"):
            query = self.db.query(Puzzle).filter(Puzzle.id == puzzle_id)
            if not include_inactive:
                query = query.filter(Puzzle.is_active.is_(True))
            puzzle = query.first()

        if puzzle is None:
            raise NotFoundError("Puzzle not found")
        return puzzle

    def previous(self, puzzle: Puzzle) -> Puzzle | None:
        """The active puzzle exactly one position earlier, if any."""
        if puzzle.level_order <= 1:
            return None
        with store_errors(self.db, "fetch previous puzzle"):
            return (
                self.db.query(Puzzle)
                .filter(
                    Puzzle.level_order == puzzle.level_order - 1,
                    Puzzle.is_active.is_(True),
                )
                .first()
            )

    def list_active_before(self, puzzle: Puzzle) -> list[Puzzle]:
        """Active puzzles with a smaller level order than ``puzzle``."""
        with store_errors(self.db, "list earlier puzzles"):
            return (
                self.db.query(Puzzle)
                .filter(
                    Puzzle.level_order < puzzle.level_order,
                    Puzzle.is_active.is_(True),
                )
                .order_by(Puzzle.level_order)
                .all()
            )

    def level_order_taken(self, level_order: int, exclude_id: int | None = None) -> bool:
        """Check whether another puzzle already uses ``level_order``."""
        with store_errors(self.db, "check level order"):
            query = self.db.query(Puzzle.id).filter(Puzzle.level_order == level_order)
            if exclude_id is not None:
                query = query.filter(Puzzle.id != exclude_id)
            return query.first() is not None
