"""UserProgress model for per-user solving state of a puzzle."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class UserProgress(Base, TimestampMixin):
    """One record per (user, puzzle); created on first save."""

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "puzzle_id", name="uq_user_progress_user_puzzle"),
        Index("ix_user_progress_user_completed", "user_id", "is_completed"),
        Index("ix_user_progress_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    puzzle_id = Column(Integer, ForeignKey("puzzles.id"), nullable=False, index=True)
    # ["r0c1", "r2c3", ...] as sent by the client, de-duplicated
    placed_piece_ids = Column(JSON, nullable=False, default=list)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", backref="progress_records")
    puzzle = relationship("Puzzle")
