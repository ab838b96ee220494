"""Progress schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from src.models.puzzle import MAX_GRID_SIZE
from src.services.completion import distinct_pieces

MAX_PIECES = MAX_GRID_SIZE * MAX_GRID_SIZE


class ProgressSave(BaseModel):
    """Save the pieces placed so far.

    Duplicate ids are dropped, keeping first occurrences; the distinct ids
    may not exceed the largest grid.
    """

    placed_piece_ids: list[str]

    @field_validator("placed_piece_ids")
    @classmethod
    def dedupe_piece_ids(cls, value: list[str]) -> list[str]:
        pieces = distinct_pieces(value)
        if len(pieces) > MAX_PIECES:
            raise ValueError(f"At most {MAX_PIECES} distinct piece ids are allowed")
        return pieces


class ProgressSummary(BaseModel):
    """Progress shown alongside a level in the level list."""

    model_config = ConfigDict(from_attributes=True)

    placed_piece_ids: list[str]
    completed_at: datetime | None


class ProgressSnapshot(ProgressSummary):
    """Saved solving state for one level."""

    is_completed: bool


class ProgressSaveResponse(BaseModel):
    """Result of a save."""

    message: str
    progress: ProgressSnapshot


class ProgressResponse(ProgressSnapshot):
    """Full progress record."""

    id: int
    puzzle_id: int
    created_at: datetime
    updated_at: datetime


class ProgressDetailResponse(BaseModel):
    """Progress for one puzzle, if any."""

    progress: ProgressResponse | None
    message: str | None = None


class ProgressPuzzleRef(BaseModel):
    """Puzzle fields shown in the progress overview."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    level_order: int
    grid_rows: int
    grid_cols: int


class ProgressWithPuzzle(ProgressResponse):
    """Progress record with its puzzle."""

    puzzle: ProgressPuzzleRef


class ProgressListResponse(BaseModel):
    """All progress for the current user."""

    progress: list[ProgressWithPuzzle]
