"""Puzzle model: one level of the progression."""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, String

from src.database import Base
from src.models.mixins import TimestampMixin

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 20


class Puzzle(Base, TimestampMixin):
    """A playable jigsaw grid with its position in the level order."""

    __tablename__ = "puzzles"
    __table_args__ = (
        CheckConstraint("grid_rows BETWEEN 2 AND 20", name="ck_puzzles_grid_rows"),
        CheckConstraint("grid_cols BETWEEN 2 AND 20", name="ck_puzzles_grid_cols"),
        CheckConstraint("level_order >= 1", name="ck_puzzles_level_order"),
        Index("ix_puzzles_active_order", "is_active", "level_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    # Asset metadata is opaque to the progression core
    image_url = Column(String(1024), nullable=False)
    image_key = Column(String(512), nullable=True)
    audio_url = Column(String(1024), nullable=True)
    spotify_playlist_url = Column(String(1024), nullable=True)
    grid_rows = Column(Integer, nullable=False)
    grid_cols = Column(Integer, nullable=False)
    level_order = Column(Integer, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)

    @property
    def total_pieces(self) -> int:
        """Number of cells in the grid."""
        return self.grid_rows * self.grid_cols
